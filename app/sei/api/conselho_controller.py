"""Controlador do conselho de classe.

Responsabilidades:
- Expor a página do conselho com as deliberações aplicadas
- Registrar deliberações do conselho
"""

from fastapi import APIRouter, Depends, HTTPException

from sei.api.dependencias import obter_dados_escolares, obter_registro_deliberacoes
from sei.application.conselho_service import ServicoConselho
from sei.domain.entidades import DadosEscolares
from sei.domain.excecoes import EntidadeNaoEncontrada
from sei.domain.filtros import RequisicaoConselho, RequisicaoDeliberacoes
from sei.domain.resultados import PaginaConselho
from sei.infrastructure.registro.deliberacoes import RegistroDeliberacoes


def obter_servico_conselho(dados: DadosEscolares = Depends(obter_dados_escolares)) -> ServicoConselho:
    """Dependência para obter o serviço do conselho sobre o snapshot atual.

    Retorno:
    - ServicoConselho: instância pronta para uso
    """
    return ServicoConselho(dados)


class ControladorConselho:
    """Controlador do conselho de classe.

    Responsabilidades:
    - Registrar rotas de consulta e deliberação
    - Traduzir erros em respostas HTTP
    """

    def __init__(self):
        """Inicializa o controlador.

        Responsabilidades:
        - Instanciar o roteador
        - Registrar as rotas disponíveis
        """
        self.roteador = APIRouter()
        self.roteador.add_api_route(
            path="/conselho",
            endpoint=self._consultar,
            methods=["POST"],
            response_model=PaginaConselho,
            summary="Resultados dos alunos da turma para o conselho",
        )
        self.roteador.add_api_route(
            path="/conselho/deliberacoes",
            endpoint=self._deliberar,
            methods=["POST"],
            response_model=dict,
            summary="Registra decisões do conselho",
        )

    @staticmethod
    async def _consultar(
        requisicao: RequisicaoConselho,
        servico: ServicoConselho = Depends(obter_servico_conselho),
        registro: RegistroDeliberacoes = Depends(obter_registro_deliberacoes),
    ):
        """Página do conselho com deliberações registradas sobrepostas.

        Parâmetros:
        - requisicao (RequisicaoConselho): filtro e página
        - servico (ServicoConselho): serviço injetado
        - registro (RegistroDeliberacoes): registro de deliberações

        Retorno:
        - PaginaConselho: disciplinas, linhas e totais

        Exceções:
        - HTTPException: 404 para turma inexistente
        """
        filtro = requisicao.filtro
        try:
            deliberacoes = registro.carregar(filtro.year, filtro.class_id)
            return servico.paginar(filtro, requisicao.pagina, deliberacoes)
        except EntidadeNaoEncontrada as erro:
            raise HTTPException(status_code=404, detail=str(erro))
        except (ValueError, TypeError, KeyError) as erro:
            raise HTTPException(status_code=400, detail=str(erro))

    @staticmethod
    async def _deliberar(
        requisicao: RequisicaoDeliberacoes,
        dados: DadosEscolares = Depends(obter_dados_escolares),
        registro: RegistroDeliberacoes = Depends(obter_registro_deliberacoes),
    ):
        """Registra as deliberações de uma turma.

        Exceções:
        - HTTPException: 404 para turma inexistente, 503 se o registro falhar
        """
        if requisicao.class_id not in dados.turmas_por_id:
            raise HTTPException(status_code=404, detail=f"Turma {requisicao.class_id} não encontrada.")

        try:
            lote_id = registro.registrar(requisicao.year, requisicao.class_id, requisicao.deliberacoes)
        except RuntimeError as erro:
            raise HTTPException(status_code=503, detail=str(erro))

        return {"batch_id": lote_id, "registradas": len(requisicao.deliberacoes)}
