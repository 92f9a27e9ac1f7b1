"""Controlador de análise de rendimento.

Responsabilidades:
- Expor o relatório de rendimento da coorte filtrada
"""

from fastapi import APIRouter, Depends, HTTPException

from sei.api.dependencias import obter_dados_escolares
from sei.application.analise_service import ServicoAnalise
from sei.domain.entidades import DadosEscolares
from sei.domain.filtros import FiltroAnalise
from sei.domain.resultados import RelatorioAnalise


def obter_servico_analise(dados: DadosEscolares = Depends(obter_dados_escolares)) -> ServicoAnalise:
    return ServicoAnalise(dados)


class ControladorAnalise:
    """Controlador de análise.

    Responsabilidades:
    - Registrar a rota do relatório
    - Traduzir erros em respostas HTTP
    """

    def __init__(self):
        self.roteador = APIRouter()
        self.roteador.add_api_route(
            path="/analise",
            endpoint=self._analisar,
            methods=["POST"],
            response_model=RelatorioAnalise,
            summary="Médias, aprovação, rankings e evolução por turma",
        )

    @staticmethod
    async def _analisar(filtro: FiltroAnalise, servico: ServicoAnalise = Depends(obter_servico_analise)):
        """Calcula o relatório para o filtro informado.

        Parâmetros:
        - filtro (FiltroAnalise): ano, status, bimestre e hierarquia
        - servico (ServicoAnalise): serviço injetado

        Retorno:
        - RelatorioAnalise: indicadores da coorte
        """
        try:
            return servico.calcular(filtro)
        except (ValueError, TypeError, KeyError) as erro:
            raise HTTPException(status_code=400, detail=str(erro))
