"""Testes do serviço do conselho de classe."""

import pytest

from sei.application.conselho_service import ServicoConselho, avaliar_estudante, ordenar_disciplinas
from sei.domain.entidades import DadosEscolares, Disciplina, Estudante, Nota, Turma
from sei.domain.excecoes import EntidadeNaoEncontrada
from sei.domain.filtros import Deliberacao, FiltroConselho
from sei.domain.resultados import ResultadoGeral, Situacao


def test_cenario_matematica_aprovada_portugues_retido(dados_escolares):
    estudante = dados_escolares.estudantes_por_id["E1"]
    disciplinas = ordenar_disciplinas(dados_escolares.disciplinas_da_turma(dados_escolares.turmas_por_id["T1"]))

    resultado = avaliar_estudante(estudante, disciplinas, dados_escolares)

    assert resultado.resultados["D1"].mg == 6.5
    assert resultado.resultados["D1"].situacao == Situacao.APROVADO
    assert resultado.resultados["D2"].mf == 2.1
    assert resultado.resultados["D2"].situacao == Situacao.REPROVADO
    assert resultado.medias_acima_5 == 1
    assert resultado.medias_abaixo_5 == 1
    assert resultado.resultado_geral == ResultadoGeral.REPROVADO
    assert resultado.disciplinas_retidas == ["Português"]


def test_disciplina_incompleta_deixa_resultado_pendente():
    disciplina = Disciplina(id="D1", name="Química", year="2026")
    estudante = Estudante(id="E1", name="Aluno", class_id="T1")
    dados = DadosEscolares(
        estudantes=[estudante],
        turmas=[Turma(id="T1", name="1A", year="2026", subject_ids=["D1"])],
        disciplinas=[disciplina],
        notas=[Nota(student_id="E1", subject_id="D1", term=1, value=10)],
    )

    resultado = avaliar_estudante(estudante, [disciplina], dados)

    assert resultado.resultado_geral == ResultadoGeral.PENDENTE
    assert resultado.disciplinas_retidas == ["Química (P)"]
    assert resultado.medias_abaixo_5 == 0


def test_ordenar_disciplinas_anuais_primeiro():
    disciplinas = [
        Disciplina(id="1", name="Artes", periodicity="Semestral", year="2026"),
        Disciplina(id="2", name="Química", periodicity="Anual", year="2026"),
        Disciplina(id="3", name="Biologia", periodicity="Anual", year="2026"),
    ]

    assert [d.name for d in ordenar_disciplinas(disciplinas)] == ["Biologia", "Química", "Artes"]


def test_paginar_conselho(dados_escolares):
    servico = ServicoConselho(dados_escolares)

    pagina = servico.paginar(FiltroConselho(year="2026", class_id="T1"))

    assert pagina.turma == "1A"
    assert [coluna.nome for coluna in pagina.disciplinas] == ["Matemática", "Português"]
    assert [linha.nome for linha in pagina.linhas] == ["Ana Souza", "Bruno Lima"]
    assert pagina.linhas[1].resultado_geral == ResultadoGeral.APROVADO
    assert pagina.total_paginas == 1
    assert pagina.total_linhas == 2


def test_paginacao_respeita_tamanho_da_pagina(dados_escolares):
    servico = ServicoConselho(dados_escolares, itens_por_pagina=1)

    pagina = servico.paginar(FiltroConselho(year="2026", class_id="T1", status="all"), pagina=3)

    assert pagina.total_paginas == 3
    assert [linha.nome for linha in pagina.linhas] == ["Carla Dias"]


def test_filtros_minimos_de_medias(dados_escolares):
    servico = ServicoConselho(dados_escolares)

    linhas = servico.montar_linhas(FiltroConselho(year="2026", class_id="T1", min_abaixo=1))

    assert [linha.nome for linha in linhas] == ["Ana Souza"]

    linhas = servico.montar_linhas(FiltroConselho(year="2026", class_id="T1", min_acima=2))

    assert [linha.nome for linha in linhas] == ["Bruno Lima"]


def test_filtro_de_formacao(dados_escolares):
    servico = ServicoConselho(dados_escolares)

    disciplinas = servico.disciplinas_do_conselho(FiltroConselho(year="2026", class_id="T2", formation_id="F2"))

    assert [d.name for d in disciplinas] == ["História"]


def test_deliberacao_sobrepoe_resultado_calculado(dados_escolares):
    servico = ServicoConselho(dados_escolares)
    deliberacoes = {"E1": Deliberacao(student_id="E1", resultado=ResultadoGeral.APROVADO)}

    linhas = servico.montar_linhas(FiltroConselho(year="2026", class_id="T1"), deliberacoes)

    ana, bruno = linhas
    assert ana.resultado_geral == ResultadoGeral.REPROVADO
    assert ana.resultado_final == ResultadoGeral.APROVADO
    assert ana.decisao_conselho == "Sim"
    assert bruno.decisao_conselho == "-"
    assert bruno.resultado_final == ResultadoGeral.APROVADO


def test_turma_inexistente(dados_escolares):
    servico = ServicoConselho(dados_escolares)

    with pytest.raises(EntidadeNaoEncontrada):
        servico.paginar(FiltroConselho(year="2026", class_id="T999"))
