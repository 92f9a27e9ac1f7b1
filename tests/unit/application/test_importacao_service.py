"""Testes do lançamento e da importação de notas."""

import pytest

from sei.application.importacao_service import ServicoImportacao, formatar_entrada_nota
from sei.domain.entidades import DadosEscolares, Disciplina, Estudante, Turma
from sei.domain.excecoes import EntidadeNaoEncontrada
from sei.domain.filtros import RequisicaoImportacao
from sei.domain.resultados import Situacao


@pytest.mark.parametrize(
    "entrada,esperado",
    [
        ("", ""),
        (None, ""),
        ("7,5", "7.5"),
        ("11", "10.0"),
        ("10", "10"),
        ("8.5.1", "8.51"),
        ("1,2,3", "1.23"),
        ("abc", ""),
        (" 6 ", "6"),
    ],
)
def test_formatar_entrada_nota(entrada, esperado):
    assert formatar_entrada_nota(entrada) == esperado


def test_folha_lancamento(dados_escolares):
    linhas = ServicoImportacao(dados_escolares).folha_lancamento("T1", "D2")

    assert [linha.nome for linha in linhas] == ["Ana Souza", "Bruno Lima"]
    ana, bruno = linhas
    assert ana.resultado.precisa == "7.3"
    assert ana.recuperacao_habilitada is True
    assert ana.resultado.situacao == Situacao.RECUPERACAO
    assert bruno.rf == 10.0


def test_folha_lancamento_sem_recuperacao_disponivel(dados_escolares):
    linhas = ServicoImportacao(dados_escolares).folha_lancamento("T1", "D1", status="all")

    assert len(linhas) == 3
    assert linhas[0].resultado.precisa == "----"
    assert linhas[0].recuperacao_habilitada is False
    assert linhas[2].resultado.precisa == "Inapto"
    assert linhas[2].recuperacao_habilitada is False


def test_folha_lancamento_disciplina_inexistente(dados_escolares):
    with pytest.raises(EntidadeNaoEncontrada):
        ServicoImportacao(dados_escolares).folha_lancamento("T1", "D999")


def test_importar_colagem_para_bimestres_marcados(dados_escolares):
    requisicao = RequisicaoImportacao(
        class_id="T1",
        subject_id="D2",
        texto="ANA SOUZA\t7,5\t8\nfulano\t5\n\nbruno   lima\t11\nsem colunas",
        bimestres={1: True, 2: False, 3: True, 4: False},
    )

    resultado = ServicoImportacao(dados_escolares).importar(requisicao)

    assert [(a.student_id, a.term, a.value) for a in resultado.atualizacoes] == [
        ("E1", 1, 7.5),
        ("E1", 3, 8.0),
        ("E2", 1, 10.0),
    ]
    assert resultado.estudantes_atualizados == 2
    assert resultado.nao_encontrados == ["fulano"]
    assert resultado.ambiguos == []


def test_importar_valor_vazio_limpa_nota(dados_escolares):
    requisicao = RequisicaoImportacao(class_id="T1", subject_id="D1", status="all", texto="Carla Dias\t")

    resultado = ServicoImportacao(dados_escolares).importar(requisicao)

    assert len(resultado.atualizacoes) == 1
    assert resultado.atualizacoes[0].term == 1
    assert resultado.atualizacoes[0].value is None


def test_importar_sinaliza_homonimos():
    dados = DadosEscolares(
        estudantes=[
            Estudante(id="1", name="José Silva", class_id="T1"),
            Estudante(id="2", name="Jose  SILVA", class_id="T1"),
            Estudante(id="3", name="Maria", class_id="T1"),
        ],
        turmas=[Turma(id="T1", name="1A", year="2026", subject_ids=["D1"])],
        disciplinas=[Disciplina(id="D1", name="Matemática", year="2026")],
    )
    requisicao = RequisicaoImportacao(class_id="T1", subject_id="D1", texto="jose silva\t9\nmaria\t8")

    resultado = ServicoImportacao(dados).importar(requisicao)

    assert resultado.ambiguos == ["jose silva"]
    assert [(a.student_id, a.value) for a in resultado.atualizacoes] == [("3", 8.0)]


def test_requisicao_exige_bimestre_marcado():
    with pytest.raises(ValueError):
        RequisicaoImportacao(class_id="T1", subject_id="D1", texto="x", bimestres={1: False})


def test_importar_considera_apenas_alunos_da_folha():
    dados = DadosEscolares(
        estudantes=[
            Estudante(id="1", name="José Silva", class_id="T1", status="Cursando"),
            Estudante(id="2", name="José Silva", class_id="T1", status="Transferência"),
        ],
        turmas=[Turma(id="T1", name="1A", year="2026", subject_ids=["D1"])],
        disciplinas=[Disciplina(id="D1", name="Matemática", year="2026")],
    )
    servico = ServicoImportacao(dados)

    folha = servico.folha_lancamento("T1", "D1")
    resultado = servico.importar(RequisicaoImportacao(class_id="T1", subject_id="D1", texto="José Silva\t9"))

    assert [linha.estudante_id for linha in folha] == ["1"]
    assert resultado.ambiguos == []
    assert [(a.student_id, a.value) for a in resultado.atualizacoes] == [("1", 9.0)]


def test_importar_com_todos_os_status_sinaliza_homonimo_transferido():
    dados = DadosEscolares(
        estudantes=[
            Estudante(id="1", name="José Silva", class_id="T1", status="Cursando"),
            Estudante(id="2", name="José Silva", class_id="T1", status="Transferência"),
        ],
        turmas=[Turma(id="T1", name="1A", year="2026", subject_ids=["D1"])],
        disciplinas=[Disciplina(id="D1", name="Matemática", year="2026")],
    )
    requisicao = RequisicaoImportacao(class_id="T1", subject_id="D1", status="all", texto="José Silva\t9")

    resultado = ServicoImportacao(dados).importar(requisicao)

    assert resultado.ambiguos == ["José Silva"]
