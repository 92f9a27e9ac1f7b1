"""Testes do controlador de boletins."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from sei.api.boletim_controller import ControladorBoletim
from sei.api.dependencias import obter_dados_escolares


def _cliente(dados):
    aplicacao = FastAPI()
    aplicacao.dependency_overrides[obter_dados_escolares] = lambda: dados
    aplicacao.include_router(ControladorBoletim().roteador, prefix="/api/v1")
    return TestClient(aplicacao)


def test_boletim_do_aluno(dados_escolares):
    resposta = _cliente(dados_escolares).get("/api/v1/boletim/E2")

    assert resposta.status_code == 200
    corpo = resposta.json()
    assert corpo["nome"] == "Bruno Lima"
    assert corpo["linhas"][1]["exibicao"]["mf"] == "7.0"


def test_boletim_aluno_inexistente(dados_escolares):
    assert _cliente(dados_escolares).get("/api/v1/boletim/E999").status_code == 404


def test_lista_de_emissao(dados_escolares):
    resposta = _cliente(dados_escolares).get("/api/v1/boletim", params={"ano": "2026", "busca": "li"})

    assert resposta.status_code == 200
    assert [item["nome"] for item in resposta.json()] == ["Bruno Lima"]
    assert resposta.json()[0]["anterior"] is None
