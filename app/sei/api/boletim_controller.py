"""Controlador de boletins.

Responsabilidades:
- Expor o boletim de um aluno
- Expor a lista de emissão com busca e navegação
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from sei.api.dependencias import obter_dados_escolares
from sei.application.boletim_service import ServicoBoletim
from sei.config.settings import Configuracoes
from sei.domain.entidades import DadosEscolares
from sei.domain.excecoes import EntidadeNaoEncontrada
from sei.domain.resultados import Boletim, OpcaoBoletim


def obter_servico_boletim(dados: DadosEscolares = Depends(obter_dados_escolares)) -> ServicoBoletim:
    return ServicoBoletim(dados)


class ControladorBoletim:
    """Controlador de boletins.

    Responsabilidades:
    - Registrar rotas de emissão
    - Traduzir aluno inexistente em HTTP 404
    """

    def __init__(self):
        self.roteador = APIRouter()
        self.roteador.add_api_route(
            path="/boletim",
            endpoint=self._listar,
            methods=["GET"],
            response_model=List[OpcaoBoletim],
            summary="Alunos disponíveis para emissão de boletim",
        )
        self.roteador.add_api_route(
            path="/boletim/{estudante_id}",
            endpoint=self._boletim,
            methods=["GET"],
            response_model=Boletim,
        )

    @staticmethod
    async def _listar(
        ano: str = Query(Configuracoes.ANO_LETIVO_PADRAO),
        turma_id: str = Query("all"),
        busca: str = Query(""),
        servico: ServicoBoletim = Depends(obter_servico_boletim),
    ):
        return servico.opcoes(ano, turma_id, busca)

    @staticmethod
    async def _boletim(estudante_id: str, servico: ServicoBoletim = Depends(obter_servico_boletim)):
        """Boletim do aluno.

        Parâmetros:
        - estudante_id (str): id do aluno
        - servico (ServicoBoletim): serviço injetado

        Retorno:
        - Boletim: linhas por disciplina com valores formatados

        Exceções:
        - HTTPException: 404 para aluno inexistente
        """
        try:
            return servico.gerar_boletim(estudante_id)
        except EntidadeNaoEncontrada as erro:
            raise HTTPException(status_code=404, detail=str(erro))
