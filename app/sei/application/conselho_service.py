"""Serviço do conselho de classe.

Responsabilidades:
- Agregar os resultados de cada aluno nas disciplinas da turma
- Aplicar filtros, ordenação e paginação da tela do conselho
- Sobrepor as deliberações registradas ao resultado calculado
"""

import math
from typing import Dict, Iterable, List, Optional

from sei.application.avaliacao_service import MotorAvaliacao, aprovado_pos_recuperacao
from sei.config.settings import Configuracoes
from sei.domain.entidades import DadosEscolares, Disciplina, Estudante, Periodicidade
from sei.domain.excecoes import EntidadeNaoEncontrada
from sei.domain.filtros import Deliberacao, FiltroConselho
from sei.domain.resultados import (
    ColunaDisciplina,
    LinhaConselho,
    PaginaConselho,
    ResultadoEstudante,
    ResultadoGeral,
)
from sei.util.texto import chave_alfabetica

SUFIXO_PENDENTE = " (P)"


def ordenar_disciplinas(disciplinas: Iterable[Disciplina]) -> List[Disciplina]:
    """Disciplinas anuais primeiro, depois por nome."""
    return sorted(
        disciplinas,
        key=lambda disciplina: (disciplina.periodicity != Periodicidade.ANUAL, chave_alfabetica(disciplina.name)),
    )


def avaliar_estudante(
    estudante: Estudante,
    disciplinas: List[Disciplina],
    dados: DadosEscolares,
    recuperacao_encerrada: bool = True,
) -> ResultadoEstudante:
    """Agrega o resultado de um aluno sobre a lista ordenada de disciplinas.

    Parâmetros:
    - estudante (Estudante): aluno avaliado
    - disciplinas (list[Disciplina]): disciplinas da turma, já ordenadas
    - dados (DadosEscolares): snapshot com as notas
    - recuperacao_encerrada (bool): trata rf ausente como definitivo

    Retorno:
    - ResultadoEstudante: resultados por disciplina e contadores
    """
    resultados = {}
    medias_acima_5 = 0
    medias_abaixo_5 = 0
    tem_pendente = False
    retidas = []

    for disciplina in disciplinas:
        resultado = MotorAvaliacao.avaliar_notas(
            dados.notas_de(estudante.id, disciplina.id),
            recuperacao_encerrada=recuperacao_encerrada,
        )

        if aprovado_pos_recuperacao(resultado.mf):
            medias_acima_5 += 1
        elif resultado.completo:
            medias_abaixo_5 += 1
            retidas.append(disciplina.name)

        if not resultado.completo:
            tem_pendente = True
            retidas.append(f"{disciplina.name}{SUFIXO_PENDENTE}")

        resultados[disciplina.id] = resultado

    if tem_pendente:
        resultado_geral = ResultadoGeral.PENDENTE
    elif medias_abaixo_5 > 0:
        resultado_geral = ResultadoGeral.REPROVADO
    else:
        resultado_geral = ResultadoGeral.APROVADO

    return ResultadoEstudante(
        estudante_id=estudante.id,
        resultados=resultados,
        medias_acima_5=medias_acima_5,
        medias_abaixo_5=medias_abaixo_5,
        resultado_geral=resultado_geral,
        disciplinas_retidas=retidas,
    )


class ServicoConselho:
    """Monta a visão do conselho de classe de uma turma.

    Responsabilidades:
    - Resolver as disciplinas da turma conforme a formação escolhida
    - Calcular as linhas de cada aluno
    - Paginar o resultado
    """

    def __init__(self, dados: DadosEscolares, itens_por_pagina: Optional[int] = None):
        """Inicializa o serviço.

        Parâmetros:
        - dados (DadosEscolares): snapshot das entidades
        - itens_por_pagina (int | None): tamanho da página
        """
        self.dados = dados
        self.itens_por_pagina = itens_por_pagina or Configuracoes.ITENS_POR_PAGINA

    def disciplinas_do_conselho(self, filtro: FiltroConselho) -> List[Disciplina]:
        """Disciplinas da turma, filtradas pela formação e ordenadas.

        Exceções:
        - EntidadeNaoEncontrada: turma inexistente
        """
        turma = self.dados.turmas_por_id.get(filtro.class_id)
        if turma is None:
            raise EntidadeNaoEncontrada(f"Turma {filtro.class_id} não encontrada.")

        disciplinas = self.dados.disciplinas_da_turma(turma)
        if filtro.formation_id != "all":
            disciplinas = [
                disciplina
                for disciplina in disciplinas
                if self._formacao_de(disciplina) == filtro.formation_id
            ]
        return ordenar_disciplinas(disciplinas)

    def _formacao_de(self, disciplina: Disciplina) -> Optional[str]:
        subarea, area, _ = self.dados.resolver_hierarquia(disciplina)
        if subarea is None or area is None:
            return None
        return area.formation_type_id

    def montar_linhas(
        self, filtro: FiltroConselho, deliberacoes: Optional[Dict[str, Deliberacao]] = None
    ) -> List[LinhaConselho]:
        """Calcula as linhas do conselho para todos os alunos filtrados.

        Parâmetros:
        - filtro (FiltroConselho): filtro da tela
        - deliberacoes (dict | None): deliberações por id de aluno

        Retorno:
        - list[LinhaConselho]: linhas ordenadas por nome
        """
        deliberacoes = deliberacoes or {}
        disciplinas = self.disciplinas_do_conselho(filtro)
        linhas = []

        for estudante in self.dados.estudantes_da_turma(filtro.class_id, filtro.status):
            resultado = avaliar_estudante(estudante, disciplinas, self.dados)
            if filtro.min_acima is not None and resultado.medias_acima_5 < filtro.min_acima:
                continue
            if filtro.min_abaixo is not None and resultado.medias_abaixo_5 < filtro.min_abaixo:
                continue

            deliberacao = deliberacoes.get(estudante.id)
            linhas.append(
                LinhaConselho(
                    estudante_id=estudante.id,
                    nome=estudante.name,
                    matricula=estudante.registration_number,
                    resultados=resultado.resultados,
                    medias_acima_5=resultado.medias_acima_5,
                    medias_abaixo_5=resultado.medias_abaixo_5,
                    resultado_geral=resultado.resultado_geral,
                    disciplinas_retidas=resultado.disciplinas_retidas,
                    decisao_conselho=deliberacao.conselho if deliberacao else "-",
                    resultado_final=deliberacao.resultado if deliberacao else resultado.resultado_geral,
                )
            )

        return sorted(linhas, key=lambda linha: chave_alfabetica(linha.nome))

    def paginar(
        self,
        filtro: FiltroConselho,
        pagina: int = 1,
        deliberacoes: Optional[Dict[str, Deliberacao]] = None,
    ) -> PaginaConselho:
        """Retorna uma página do conselho.

        Parâmetros:
        - filtro (FiltroConselho): filtro da tela
        - pagina (int): página desejada, a partir de 1
        - deliberacoes (dict | None): deliberações por id de aluno

        Retorno:
        - PaginaConselho: disciplinas, linhas da página e totais
        """
        disciplinas = self.disciplinas_do_conselho(filtro)
        linhas = self.montar_linhas(filtro, deliberacoes)
        total_paginas = math.ceil(len(linhas) / self.itens_por_pagina)
        inicio = (pagina - 1) * self.itens_por_pagina
        turma = self.dados.turmas_por_id[filtro.class_id]

        return PaginaConselho(
            turma_id=turma.id,
            turma=turma.name,
            disciplinas=[
                ColunaDisciplina(id=d.id, nome=d.name, periodicidade=d.periodicity.value) for d in disciplinas
            ],
            linhas=linhas[inicio : inicio + self.itens_por_pagina],
            pagina=pagina,
            total_paginas=total_paginas,
            total_linhas=len(linhas),
        )
