"""Testes do repositório do snapshot escolar."""

from unittest.mock import Mock

import pandas as pd
import pytest

from sei.config.settings import Configuracoes
from sei.infrastructure.data.repositorio_escolar import interpretar_lista_ids, preparar_tabela


def _escrever_tabelas(diretorio):
    (diretorio / "students.csv").write_text(
        "id;name;classId;registrationNumber;status\n1;Ana;10;2024001;\n2;Bruno;10;2024002;Transferência\n",
        encoding="utf-8",
    )
    (diretorio / "classes.csv").write_text('id,name,year,subjectIds\n10,1A,2026,"[100, 101]"\n', encoding="utf-8")
    (diretorio / "subjects.csv").write_text(
        "id;name;subAreaId;periodicity;year\n100;Matemática;;Anual;2026\n101;Português;;Semestral;2026\n",
        encoding="utf-8",
    )
    (diretorio / "grades.csv").write_text(
        "studentId;subjectId;term;value\n1;100;1;8.5\n1;100;2;\n2;100;1;7\n",
        encoding="utf-8",
    )


@pytest.fixture()
def diretorio_dados(tmp_path, monkeypatch):
    monkeypatch.setattr(Configuracoes, "DATA_DIR", str(tmp_path))
    monkeypatch.setattr(Configuracoes, "SNAPSHOT_SOURCE", "arquivos")
    return tmp_path


def test_repositorio_carrega_tabelas_da_pasta(diretorio_dados, repositorio_limpo):
    _escrever_tabelas(diretorio_dados)

    dados = repositorio_limpo().obter_dados()

    ana = dados.estudantes_por_id["1"]
    assert ana.status == "Cursando"
    assert ana.class_id == "10"
    assert ana.registration_number == "2024001"
    assert dados.turmas_por_id["10"].subject_ids == ("100", "101")
    assert dados.turmas_por_id["10"].year == "2026"
    assert dados.disciplinas_por_id["100"].sub_area_id is None
    assert dict(dados.notas_de("1", "100")) == {1: 8.5}
    assert dados.formacoes == ()


def test_repositorio_singleton(diretorio_dados, repositorio_limpo):
    _escrever_tabelas(diretorio_dados)

    assert repositorio_limpo() is repositorio_limpo()


def test_tabela_obrigatoria_ausente_deixa_snapshot_indisponivel(diretorio_dados, repositorio_limpo):
    repositorio = repositorio_limpo()

    assert repositorio.disponivel is False
    with pytest.raises(RuntimeError):
        repositorio.obter_dados()
    with pytest.raises(RuntimeError, match="students"):
        repositorio.recarregar()


def test_recarregar_substitui_snapshot(diretorio_dados, repositorio_limpo):
    _escrever_tabelas(diretorio_dados)
    repositorio = repositorio_limpo()
    anterior = repositorio.obter_dados()

    (diretorio_dados / "students.csv").write_text("id;name;classId\n3;Carla;10\n", encoding="utf-8")
    novo = repositorio.recarregar()

    assert repositorio.obter_dados() is novo
    assert novo is not anterior
    assert [e.name for e in novo.estudantes] == ["Carla"]


def test_registros_invalidos_sao_ignorados(diretorio_dados, repositorio_limpo):
    _escrever_tabelas(diretorio_dados)
    (diretorio_dados / "subjects.csv").write_text(
        "id;name;periodicity;year\n100;Matemática;Bimestral;2026\n101;Português;Anual;2026\n", encoding="utf-8"
    )

    dados = repositorio_limpo().obter_dados()

    assert [d.id for d in dados.disciplinas] == ["101"]


def test_repositorio_consulta_supabase(monkeypatch, repositorio_limpo):
    tabelas = {
        "students": pd.DataFrame([{"id": 1, "name": "Ana", "classId": 10, "status": None}]),
        "classes": pd.DataFrame([{"id": 10, "name": "1A", "year": "2026", "subjectIds": [100]}]),
        "subjects": pd.DataFrame([{"id": 100, "name": "Matemática", "year": "2026"}]),
        "grades": pd.DataFrame([{"id": 5, "studentId": 1, "subjectId": 100, "term": 1, "value": 9.0}]),
    }
    carregador = Mock()
    carregador.carregar.side_effect = lambda tabela: tabelas.get(tabela)
    monkeypatch.setattr("sei.infrastructure.data.repositorio_escolar.criar_carregador", lambda: carregador)

    dados = repositorio_limpo().obter_dados()

    assert dados.turmas_por_id["10"].subject_ids == ("100",)
    assert dict(dados.notas_de("1", "100")) == {1: 9.0}
    assert carregador.carregar.call_count == 7


@pytest.mark.parametrize(
    "valor,esperado",
    [
        ('["1", "2"]', ["1", "2"]),
        ("[1.0, 2]", ["1", "2"]),
        ("1;2|3", ["1", "2", "3"]),
        ("1, 2", ["1", "2"]),
        ([4, 5], ["4", "5"]),
        (None, []),
        (float("nan"), []),
        ("", []),
    ],
)
def test_interpretar_lista_ids(valor, esperado):
    assert interpretar_lista_ids(valor) == esperado


def test_preparar_tabela_remove_sufixo_decimal_dos_ids():
    df = pd.DataFrame({"id": [1.0, 2.0], "name": ["Ana", "Bruno"], "classId": [10.0, None]})

    preparada = preparar_tabela("students", df)

    assert preparada["id"].tolist() == ["1", "2"]
    assert preparada["class_id"].tolist() == ["10", None]


def test_matricula_com_zeros_a_esquerda_preservada(diretorio_dados, repositorio_limpo):
    _escrever_tabelas(diretorio_dados)
    (diretorio_dados / "students.csv").write_text(
        "id;name;classId;registrationNumber\n1;Ana;10;001\n", encoding="utf-8"
    )

    dados = repositorio_limpo().obter_dados()

    assert dados.estudantes_por_id["1"].registration_number == "001"
