"""Controlador de lançamento de notas.

Responsabilidades:
- Expor a folha de lançamento de uma disciplina
- Expor a pré-visualização da importação em lote
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from sei.api.dependencias import obter_dados_escolares
from sei.application.importacao_service import ServicoImportacao
from sei.config.settings import Configuracoes
from sei.domain.entidades import DadosEscolares
from sei.domain.excecoes import EntidadeNaoEncontrada
from sei.domain.filtros import RequisicaoImportacao
from sei.domain.resultados import LinhaLancamento, ResultadoImportacao


def obter_servico_importacao(dados: DadosEscolares = Depends(obter_dados_escolares)) -> ServicoImportacao:
    return ServicoImportacao(dados)


class ControladorNotas:
    """Controlador de notas.

    Responsabilidades:
    - Registrar rotas de lançamento e importação
    - Traduzir erros em respostas HTTP
    """

    def __init__(self):
        self.roteador = APIRouter()
        self.roteador.add_api_route(
            path="/notas/lancamento",
            endpoint=self._folha_lancamento,
            methods=["GET"],
            response_model=List[LinhaLancamento],
        )
        self.roteador.add_api_route(
            path="/notas/importacao",
            endpoint=self._importar,
            methods=["POST"],
            response_model=ResultadoImportacao,
            summary="Interpreta notas coladas de planilha sem gravá-las",
        )

    @staticmethod
    async def _folha_lancamento(
        turma_id: str = Query(...),
        disciplina_id: str = Query(...),
        status: str = Query(Configuracoes.STATUS_PADRAO),
        servico: ServicoImportacao = Depends(obter_servico_importacao),
    ):
        """Folha de lançamento da turma na disciplina.

        Parâmetros:
        - turma_id (str): id da turma
        - disciplina_id (str): id da disciplina
        - status (str): status dos alunos ("all" para todos)

        Retorno:
        - list[LinhaLancamento]: linhas por aluno

        Exceções:
        - HTTPException: 404 para turma ou disciplina inexistente
        """
        try:
            return servico.folha_lancamento(turma_id, disciplina_id, status)
        except EntidadeNaoEncontrada as erro:
            raise HTTPException(status_code=404, detail=str(erro))

    @staticmethod
    async def _importar(
        requisicao: RequisicaoImportacao, servico: ServicoImportacao = Depends(obter_servico_importacao)
    ):
        try:
            return servico.importar(requisicao)
        except EntidadeNaoEncontrada as erro:
            raise HTTPException(status_code=404, detail=str(erro))
        except (ValueError, TypeError, KeyError) as erro:
            raise HTTPException(status_code=400, detail=str(erro))
