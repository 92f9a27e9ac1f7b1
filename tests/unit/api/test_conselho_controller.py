"""Testes do controlador do conselho de classe."""

from unittest.mock import Mock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from sei.api.conselho_controller import ControladorConselho
from sei.api.dependencias import obter_dados_escolares, obter_registro_deliberacoes
from sei.domain.filtros import Deliberacao
from sei.domain.resultados import ResultadoGeral


def _cliente(dados, registro):
    aplicacao = FastAPI()
    aplicacao.dependency_overrides[obter_dados_escolares] = lambda: dados
    aplicacao.dependency_overrides[obter_registro_deliberacoes] = lambda: registro
    aplicacao.include_router(ControladorConselho().roteador, prefix="/api/v1")
    return TestClient(aplicacao)


def test_consultar_conselho_aplica_deliberacoes(dados_escolares):
    registro = Mock()
    registro.carregar.return_value = {"E1": Deliberacao(student_id="E1", resultado=ResultadoGeral.APROVADO)}

    resposta = _cliente(dados_escolares, registro).post(
        "/api/v1/conselho", json={"filtro": {"year": "2026", "class_id": "T1"}, "pagina": 1}
    )

    assert resposta.status_code == 200
    corpo = resposta.json()
    assert corpo["total_linhas"] == 2
    assert corpo["linhas"][0]["nome"] == "Ana Souza"
    assert corpo["linhas"][0]["resultado_geral"] == "Reprovado"
    assert corpo["linhas"][0]["resultado_final"] == "Aprovado"
    assert corpo["linhas"][0]["disciplinas_retidas"] == ["Português"]
    registro.carregar.assert_called_once_with("2026", "T1")


def test_consultar_conselho_turma_inexistente(dados_escolares):
    registro = Mock()
    registro.carregar.return_value = {}

    resposta = _cliente(dados_escolares, registro).post("/api/v1/conselho", json={"filtro": {"class_id": "T999"}})

    assert resposta.status_code == 404


def test_registrar_deliberacoes(dados_escolares):
    registro = Mock()
    registro.registrar.return_value = "lote-1"

    resposta = _cliente(dados_escolares, registro).post(
        "/api/v1/conselho/deliberacoes",
        json={"year": 2026, "class_id": "T1", "deliberacoes": [{"student_id": "E1", "resultado": "Aprovado"}]},
    )

    assert resposta.status_code == 200
    assert resposta.json() == {"batch_id": "lote-1", "registradas": 1}
    ano, turma, deliberacoes = registro.registrar.call_args[0]
    assert (ano, turma) == ("2026", "T1")
    assert deliberacoes[0].conselho == "Sim"


def test_registrar_deliberacoes_turma_inexistente(dados_escolares):
    resposta = _cliente(dados_escolares, Mock()).post(
        "/api/v1/conselho/deliberacoes",
        json={"year": "2026", "class_id": "T999", "deliberacoes": [{"student_id": "E1", "resultado": "Aprovado"}]},
    )

    assert resposta.status_code == 404


def test_registrar_deliberacoes_resultado_invalido(dados_escolares):
    resposta = _cliente(dados_escolares, Mock()).post(
        "/api/v1/conselho/deliberacoes",
        json={"year": "2026", "class_id": "T1", "deliberacoes": [{"student_id": "E1", "resultado": "Talvez"}]},
    )

    assert resposta.status_code == 422


def test_registro_indisponivel(dados_escolares):
    registro = Mock()
    registro.registrar.side_effect = RuntimeError("Registro de deliberações indisponível.")

    resposta = _cliente(dados_escolares, registro).post(
        "/api/v1/conselho/deliberacoes",
        json={"year": "2026", "class_id": "T1", "deliberacoes": [{"student_id": "E1", "resultado": "Aprovado"}]},
    )

    assert resposta.status_code == 503
    assert "indisponível" in resposta.json()["detail"]
