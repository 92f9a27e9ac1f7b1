"""Serviço do painel institucional e dos cartões de turma.

Responsabilidades:
- Classificar alunos pela regra de soma de pontos (sem recuperação)
- Montar os cartões de situação acadêmica por turma
- Consolidar os indicadores do ano letivo
"""

import math
from enum import Enum
from typing import List, Optional

from sei.application.avaliacao_service import aprovado_por_pontos, arredondar_uma_casa
from sei.config.settings import Configuracoes
from sei.domain.entidades import DadosEscolares, Disciplina, Estudante, StatusMatricula, Turma
from sei.domain.excecoes import EntidadeNaoEncontrada
from sei.domain.resultados import ContagemStatus, PainelInstitucional, SituacaoTurma
from sei.util.texto import chave_natural


class SituacaoPontos(str, Enum):
    APROVADO = "aprovado"
    REPROVADO = "reprovado"
    PENDENTE = "pendente"


def classificar_por_pontos(estudante: Estudante, disciplinas: List[Disciplina], dados: DadosEscolares) -> SituacaoPontos:
    """Classifica o aluno pela soma dos quatro bimestres de cada disciplina.

    Parâmetros:
    - estudante (Estudante): aluno avaliado
    - disciplinas (list[Disciplina]): disciplinas cadastradas da turma
    - dados (DadosEscolares): snapshot com as notas

    Retorno:
    - SituacaoPontos: pendente se faltar bimestre, reprovado se alguma soma < 24
    """
    if not disciplinas:
        return SituacaoPontos.PENDENTE

    reprovado = False
    for disciplina in disciplinas:
        aprovado = aprovado_por_pontos(dados.notas_de(estudante.id, disciplina.id))
        if aprovado is None:
            return SituacaoPontos.PENDENTE
        if not aprovado:
            reprovado = True

    return SituacaoPontos.REPROVADO if reprovado else SituacaoPontos.APROVADO


def _normalizar_status(valor: Optional[str]) -> str:
    return (valor or StatusMatricula.CURSANDO.value).lower().strip()


def _contagem(quantidade: int, total: int) -> ContagemStatus:
    percentual = math.floor(quantidade / total * 100 + 0.5) if total > 0 else 0
    return ContagemStatus(quantidade=quantidade, percentual=percentual)


class ServicoPainel:
    """Indicadores do painel e dos cartões de turma.

    Responsabilidades:
    - Calcular a situação acadêmica de cada turma
    - Contar matrículas por status
    - Calcular a média global de notas do ano
    """

    def __init__(self, dados: DadosEscolares):
        self.dados = dados

    def situacao_turma(self, turma_id: str, status: str = Configuracoes.STATUS_PADRAO) -> SituacaoTurma:
        """Cartão de situação acadêmica de uma turma.

        Parâmetros:
        - turma_id (str): id da turma
        - status (str): status dos alunos considerados

        Retorno:
        - SituacaoTurma: aprovados, reprovados, pendentes e matrículas

        Exceções:
        - EntidadeNaoEncontrada: turma inexistente
        """
        turma = self.dados.turmas_por_id.get(str(turma_id))
        if turma is None:
            raise EntidadeNaoEncontrada(f"Turma {turma_id} não encontrada.")
        return self._situacao(turma, status)

    def _situacao(self, turma: Turma, status: str) -> SituacaoTurma:
        disciplinas = self.dados.disciplinas_da_turma(turma)
        contagem = {situacao: 0 for situacao in SituacaoPontos}
        for estudante in self.dados.estudantes_da_turma(turma.id, status):
            contagem[classificar_por_pontos(estudante, disciplinas, self.dados)] += 1

        todos = self.dados.estudantes_da_turma(turma.id)
        matriculas = {
            status_matricula.value: sum(1 for e in todos if e.status == status_matricula.value)
            for status_matricula in StatusMatricula
        }

        return SituacaoTurma(
            turma_id=turma.id,
            turma=turma.name,
            aprovados=contagem[SituacaoPontos.APROVADO],
            reprovados=contagem[SituacaoPontos.REPROVADO],
            pendentes=contagem[SituacaoPontos.PENDENTE],
            matriculas=matriculas,
        )

    def resumo_institucional(self, ano: str) -> PainelInstitucional:
        """Indicadores do ano letivo.

        Parâmetros:
        - ano (str): ano letivo

        Retorno:
        - PainelInstitucional: contagens, situação acadêmica e média global
        """
        ano = str(ano)
        turmas = sorted((t for t in self.dados.turmas if t.year == ano), key=lambda t: chave_natural(t.name))
        turmas_por_id = {turma.id: turma for turma in turmas}
        estudantes = [e for e in self.dados.estudantes if e.class_id in turmas_por_id]
        total = len(estudantes)

        ativos = [e for e in estudantes if _normalizar_status(e.status) in ("cursando", "ativo")]
        transferidos = sum(1 for e in estudantes if "transfer" in _normalizar_status(e.status))
        evadidos = sum(1 for e in estudantes if "eva" in _normalizar_status(e.status))

        contagem = {situacao: 0 for situacao in SituacaoPontos}
        for estudante in ativos:
            disciplinas = self.dados.disciplinas_da_turma(turmas_por_id[estudante.class_id])
            contagem[classificar_por_pontos(estudante, disciplinas, self.dados)] += 1

        ids_estudantes = {e.id for e in estudantes}
        valores = [n.value for n in self.dados.notas if n.student_id in ids_estudantes and n.value is not None]
        media_global = sum(valores) / len(valores) if valores else 0.0

        return PainelInstitucional(
            ano=ano,
            total_estudantes=total,
            cursando=_contagem(len(ativos), total),
            transferidos=_contagem(transferidos, total),
            evadidos=_contagem(evadidos, total),
            aprovados=contagem[SituacaoPontos.APROVADO],
            recuperacao=contagem[SituacaoPontos.REPROVADO],
            em_curso=contagem[SituacaoPontos.PENDENTE],
            media_global=arredondar_uma_casa(media_global),
            turmas_ativas=len(turmas),
            turmas=[self._situacao(turma, Configuracoes.STATUS_PADRAO) for turma in turmas],
        )
