"""Controlador de recarga do snapshot escolar.

Responsabilidades:
- Recarregar as tabelas da origem configurada sob demanda
"""

import requests
from fastapi import APIRouter, Depends, HTTPException

from sei.api.dependencias import obter_repositorio
from sei.infrastructure.data.repositorio_escolar import RepositorioEscolar
from sei.util.logger import logger


class ControladorSnapshot:
    """Controlador do snapshot.

    Responsabilidades:
    - Registrar a rota de recarga
    - Traduzir falhas de carga em respostas HTTP
    """

    def __init__(self):
        self.roteador = APIRouter()
        self.roteador.add_api_route(
            path="/snapshot/reload",
            endpoint=self._recarregar,
            methods=["POST"],
            response_model=dict,
            summary="Relê as tabelas e substitui o snapshot em memória",
        )

    @staticmethod
    async def _recarregar(repositorio: RepositorioEscolar = Depends(obter_repositorio)):
        """Recarrega o snapshot.

        Retorno:
        - dict: status e quantidade de registros por coleção

        Exceções:
        - HTTPException: 400 para contrato violado, 503 para origem indisponível
        """
        try:
            dados = repositorio.recarregar()
        except ValueError as erro:
            logger.error(f"Falha ao recarregar snapshot: {erro}")
            raise HTTPException(status_code=400, detail=str(erro))
        except (RuntimeError, OSError, requests.RequestException) as erro:
            logger.error(f"Falha ao recarregar snapshot: {erro}")
            raise HTTPException(status_code=503, detail=str(erro))

        return {
            "status": "ok",
            "estudantes": len(dados.estudantes),
            "turmas": len(dados.turmas),
            "disciplinas": len(dados.disciplinas),
            "notas": len(dados.notas),
        }
