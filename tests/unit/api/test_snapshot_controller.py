"""Testes do controlador de recarga do snapshot."""

from unittest.mock import Mock

import requests
from fastapi import FastAPI
from fastapi.testclient import TestClient

from sei.api.dependencias import obter_repositorio
from sei.api.snapshot_controller import ControladorSnapshot


def _cliente(repositorio):
    aplicacao = FastAPI()
    aplicacao.dependency_overrides[obter_repositorio] = lambda: repositorio
    aplicacao.include_router(ControladorSnapshot().roteador, prefix="/api/v1")
    return TestClient(aplicacao)


def test_recarregar_snapshot(dados_escolares):
    repositorio = Mock()
    repositorio.recarregar.return_value = dados_escolares

    resposta = _cliente(repositorio).post("/api/v1/snapshot/reload")

    assert resposta.status_code == 200
    assert resposta.json() == {"status": "ok", "estudantes": 7, "turmas": 4, "disciplinas": 5, "notas": 29}


def test_recarregar_contrato_violado():
    repositorio = Mock()
    repositorio.recarregar.side_effect = ValueError("colunas obrigatórias ausentes")

    resposta = _cliente(repositorio).post("/api/v1/snapshot/reload")

    assert resposta.status_code == 400


def test_recarregar_origem_indisponivel():
    repositorio = Mock()
    repositorio.recarregar.side_effect = requests.ConnectionError("offline")

    resposta = _cliente(repositorio).post("/api/v1/snapshot/reload")

    assert resposta.status_code == 503
