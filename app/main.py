"""Ponto de entrada da API do SEI Notas.

Responsabilidades:
- Montar a aplicação com os controladores de notas, conselho e indicadores
- Carregar o snapshot escolar no startup
"""

import os

import uvicorn
from fastapi import FastAPI, HTTPException

from sei.api.analise_controller import ControladorAnalise
from sei.api.avaliacao_controller import ControladorAvaliacao
from sei.api.boletim_controller import ControladorBoletim
from sei.api.conselho_controller import ControladorConselho
from sei.api.notas_controller import ControladorNotas
from sei.api.painel_controller import ControladorPainel
from sei.api.snapshot_controller import ControladorSnapshot
from sei.config.settings import Configuracoes
from sei.infrastructure.data.repositorio_escolar import RepositorioEscolar
from sei.util.logger import logger

app = FastAPI(
    title="SEI Notas",
    description="Avaliação de notas, conselho de classe, boletins e indicadores acadêmicos",
    version="1.0.0",
)

CONTROLADORES = [
    (ControladorAvaliacao, "Avaliação"),
    (ControladorNotas, "Notas"),
    (ControladorConselho, "Conselho de Classe"),
    (ControladorAnalise, "Análise"),
    (ControladorPainel, "Painel"),
    (ControladorBoletim, "Boletim"),
    (ControladorSnapshot, "Snapshot"),
]

for classe_controlador, etiqueta in CONTROLADORES:
    app.include_router(classe_controlador().roteador, prefix="/api/v1", tags=[etiqueta])


@app.on_event("startup")
async def evento_inicializacao():
    """Lê as tabelas escolares da origem configurada.

    Falhas de carga não derrubam a API: o repositório registra o erro e as
    rotas respondem 503 até um `POST /api/v1/snapshot/reload` bem-sucedido.
    """
    logger.info(f"Carregando snapshot escolar (origem: {Configuracoes.SNAPSHOT_SOURCE})...")
    RepositorioEscolar()


@app.get("/health", tags=["Snapshot"])
def checar_saude():
    """Health check com o tamanho do snapshot carregado.

    Retorno:
    - dict: status, origem e total de registros

    Exceções:
    - HTTPException: 503 enquanto nenhum snapshot estiver carregado
    """
    try:
        dados = RepositorioEscolar().obter_dados()
    except RuntimeError as erro:
        raise HTTPException(status_code=503, detail=str(erro))
    return {"status": "ok", "origem": Configuracoes.SNAPSHOT_SOURCE, "registros": len(dados)}


if __name__ == "__main__":
    porta = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=porta)
