"""Fábrica de logger da aplicação.

Responsabilidades:
- Configurar o logger raiz da aplicação uma única vez
- Espelhar a saída em arquivo rotativo quando LOG_FILE estiver definido
- Fornecer loggers filhos por componente
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from sei.config.settings import Configuracoes

NOME_RAIZ = "SEI_NOTAS_APP"
FORMATO = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class FabricaLogger:
    """Fornece instâncias de Logger configuradas.

    Responsabilidades:
    - Console em stdout (Docker) e arquivo opcional
    - Não duplicar handlers entre importações
    """

    @classmethod
    def configurar(cls, nome: str = NOME_RAIZ, arquivo: str = None):
        """Configura o logger se ainda não houver handlers.

        Parâmetros:
        - nome (str): nome do logger
        - arquivo (str | None): caminho do log em disco; padrão LOG_FILE

        Retorno:
        - logging.Logger: logger configurado
        """
        instancia = logging.getLogger(nome)
        if instancia.handlers:
            return instancia

        instancia.setLevel(Configuracoes.LOG_LEVEL)
        formatador = logging.Formatter(fmt=FORMATO, datefmt="%Y-%m-%d %H:%M:%S")

        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatador)
        instancia.addHandler(console)

        arquivo = arquivo or Configuracoes.LOG_FILE
        if arquivo:
            Path(arquivo).parent.mkdir(parents=True, exist_ok=True)
            em_disco = RotatingFileHandler(
                arquivo, maxBytes=Configuracoes.LOG_MAX_BYTES, backupCount=3, encoding="utf-8"
            )
            em_disco.setFormatter(formatador)
            instancia.addHandler(em_disco)

        instancia.propagate = False
        return instancia

    @classmethod
    def componente(cls, nome: str) -> logging.Logger:
        """Logger filho do raiz (ex.: SEI_NOTAS_APP.importacao), herda os handlers."""
        return logging.getLogger(NOME_RAIZ).getChild(nome)


logger = FabricaLogger.configurar()
