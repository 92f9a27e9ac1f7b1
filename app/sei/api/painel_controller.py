"""Controlador do painel institucional.

Responsabilidades:
- Expor os indicadores do ano letivo
- Expor o cartão de situação de cada turma
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from sei.api.dependencias import obter_dados_escolares
from sei.application.painel_service import ServicoPainel
from sei.config.settings import Configuracoes
from sei.domain.entidades import DadosEscolares
from sei.domain.excecoes import EntidadeNaoEncontrada
from sei.domain.resultados import PainelInstitucional, SituacaoTurma


def obter_servico_painel(dados: DadosEscolares = Depends(obter_dados_escolares)) -> ServicoPainel:
    return ServicoPainel(dados)


class ControladorPainel:
    """Controlador do painel.

    Responsabilidades:
    - Registrar rotas do painel e das turmas
    - Traduzir erros em respostas HTTP
    """

    def __init__(self):
        self.roteador = APIRouter()
        self.roteador.add_api_route(
            path="/painel",
            endpoint=self._painel,
            methods=["GET"],
            response_model=PainelInstitucional,
        )
        self.roteador.add_api_route(
            path="/turmas/{turma_id}/situacao",
            endpoint=self._situacao_turma,
            methods=["GET"],
            response_model=SituacaoTurma,
            summary="Aprovados, reprovados e pendentes pela soma de pontos",
        )

    @staticmethod
    async def _painel(
        ano: str = Query(Configuracoes.ANO_LETIVO_PADRAO),
        servico: ServicoPainel = Depends(obter_servico_painel),
    ):
        return servico.resumo_institucional(ano)

    @staticmethod
    async def _situacao_turma(
        turma_id: str,
        status: str = Query(Configuracoes.STATUS_PADRAO),
        servico: ServicoPainel = Depends(obter_servico_painel),
    ):
        """Cartão de situação da turma.

        Exceções:
        - HTTPException: 404 para turma inexistente
        """
        try:
            return servico.situacao_turma(turma_id, status)
        except EntidadeNaoEncontrada as erro:
            raise HTTPException(status_code=404, detail=str(erro))
