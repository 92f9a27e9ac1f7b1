"""Fixtures compartilhadas para os testes."""

import sys
from pathlib import Path

import pytest


RAIZ = Path(__file__).resolve().parents[2]
DIRETORIO_APP = RAIZ / "app"
if str(DIRETORIO_APP) not in sys.path:
    sys.path.insert(0, str(DIRETORIO_APP))

from sei.domain.entidades import (  # noqa: E402
    AreaConhecimento,
    DadosEscolares,
    Disciplina,
    Estudante,
    Nota,
    SubArea,
    TipoFormacao,
    Turma,
)


def _notas(estudante_id, disciplina_id, valores, rf=None):
    notas = [
        Nota(student_id=estudante_id, subject_id=disciplina_id, term=bimestre, value=valor)
        for bimestre, valor in enumerate(valores, start=1)
    ]
    if rf is not None:
        notas.append(Nota(student_id=estudante_id, subject_id=disciplina_id, term=5, value=rf))
    return notas


@pytest.fixture()
def dados_escolares():
    """Snapshot de uma escola com três turmas em 2026 e uma em 2025.

    - Ana (1A): Matemática [8,7,6,5] e Português [4,4,3,3] sem recuperação
    - Bruno (1A): Matemática [7,7,7,7] e Português [10,10,0,0] com rf 10
    - Carla (1A, transferida): Matemática [2,2,2,2]
    - Davi (10A): Matemática [6,6,6] incompleta e História [9,9,9,9]
    - Érica (2A): turma sem disciplinas
    - Fábio (10A, evadido): sem notas
    """
    formacoes = [
        TipoFormacao(id="F1", name="Formação Geral Básica"),
        TipoFormacao(id="F2", name="Itinerário Formativo"),
    ]
    areas = [
        AreaConhecimento(id="A1", name="Matemática", formation_type_id="F1"),
        AreaConhecimento(id="A2", name="Linguagens", formation_type_id="F1"),
        AreaConhecimento(id="A3", name="Ciências Humanas", formation_type_id="F2"),
        AreaConhecimento(id="A4", name="Ciências da Natureza", formation_type_id="F2"),
    ]
    subareas = [
        SubArea(id="S1", name="Matemática", knowledge_area_id="A1"),
        SubArea(id="S2", name="Língua Portuguesa", knowledge_area_id="A2"),
        SubArea(id="S3", name="História", knowledge_area_id="A3"),
        SubArea(id="S4", name="Biologia", knowledge_area_id="A4"),
    ]
    disciplinas = [
        Disciplina(id="D1", name="Matemática", sub_area_id="S1", periodicity="Anual", year="2026"),
        Disciplina(id="D2", name="Português", sub_area_id="S2", periodicity="Anual", year="2026"),
        Disciplina(id="D3", name="História", sub_area_id="S3", periodicity="Semestral", semester="1", year="2026"),
        Disciplina(id="D5", name="Biologia", sub_area_id="S4", periodicity="Anual", year="2026"),
        Disciplina(id="D9", name="Matemática", sub_area_id="S1", periodicity="Anual", year="2025"),
    ]
    turmas = [
        Turma(id="T1", name="1A", year="2026", subject_ids=["D1", "D2", "D404"]),
        Turma(id="T2", name="10A", year="2026", subject_ids=["D1", "D3"]),
        Turma(id="T3", name="2A", year="2026", subject_ids=[]),
        Turma(id="T0", name="1A", year="2025", subject_ids=["D9"]),
    ]
    estudantes = [
        Estudante(id="E1", name="Ana Souza", class_id="T1", registration_number="001", status="Cursando"),
        Estudante(id="E2", name="Bruno Lima", class_id="T1", registration_number="002", status=""),
        Estudante(id="E3", name="Carla Dias", class_id="T1", registration_number="003", status="Transferência"),
        Estudante(id="E4", name="Davi Reis", class_id="T2", registration_number="004", status="Cursando"),
        Estudante(id="E5", name="Érica Melo", class_id="T3", registration_number="005", status="Cursando"),
        Estudante(id="E6", name="Fábio Nunes", class_id="T2", registration_number="006", status="Evasão"),
        Estudante(id="E0", name="Zeca Antigo", class_id="T0", registration_number="000", status="Cursando"),
    ]
    notas = (
        _notas("E1", "D1", [8, 7, 6, 5])
        + _notas("E1", "D2", [4, 4, 3, 3])
        + _notas("E2", "D1", [7, 7, 7, 7])
        + _notas("E2", "D2", [10, 10, 0, 0], rf=10)
        + _notas("E3", "D1", [2, 2, 2, 2])
        + _notas("E4", "D1", [6, 6, 6])
        + _notas("E4", "D3", [9, 9, 9, 9])
        + [Nota(student_id="E4", subject_id="D1", term=4, value=None)]
    )
    return DadosEscolares(
        estudantes=estudantes,
        turmas=turmas,
        disciplinas=disciplinas,
        notas=notas,
        formacoes=formacoes,
        areas=areas,
        subareas=subareas,
    )


@pytest.fixture()
def registro_temporario(tmp_path, monkeypatch):
    """Aponta o registro de deliberações para um arquivo temporário."""
    from sei.config.settings import Configuracoes

    caminho = tmp_path / "registros" / "deliberacoes.jsonl"
    monkeypatch.setattr(Configuracoes, "DELIBERACOES_PATH", str(caminho))
    return caminho


@pytest.fixture()
def repositorio_limpo(monkeypatch):
    """Descarta a instância única do repositório entre testes."""
    from sei.infrastructure.data.repositorio_escolar import RepositorioEscolar

    monkeypatch.setattr(RepositorioEscolar, "_instancia", None)
    monkeypatch.setattr(RepositorioEscolar, "_dados", None)
    return RepositorioEscolar
