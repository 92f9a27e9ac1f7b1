"""Configurações centrais do projeto.

Responsabilidades:
- Definir caminhos de arquivos
- Definir a origem do snapshot escolar
- Definir parâmetros de apresentação das análises
"""

import os
from pathlib import Path


class Configuracoes:
    """Centraliza configurações da aplicação.

    Responsabilidades:
    - Fornecer caminhos de diretórios
    - Declarar credenciais do backend hospedado
    - Declarar limites de paginação e ranking
    """

    BASE_DIR = Path(__file__).resolve().parents[2]
    DEFAULT_DATA_DIR = os.path.join(BASE_DIR, "data")
    DATA_DIR = os.path.abspath(os.getenv("DATA_DIR", DEFAULT_DATA_DIR))
    REGISTRO_DIR = os.path.join(BASE_DIR, "registros")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FILE = os.getenv("LOG_FILE")

    # "arquivos" lê CSV/XLSX de DATA_DIR; "supabase" consulta o PostgREST hospedado.
    SNAPSHOT_SOURCE = os.getenv("SNAPSHOT_SOURCE", "arquivos").strip().lower()
    SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
    SUPABASE_KEY = os.getenv("SUPABASE_KEY")
    HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "20"))
    # limite de linhas por resposta do PostgREST (max-rows do Supabase)
    SUPABASE_PAGE_SIZE = int(os.getenv("SUPABASE_PAGE_SIZE", "1000"))

    DELIBERACOES_PATH = os.getenv(
        "DELIBERACOES_PATH", os.path.join(REGISTRO_DIR, "deliberacoes.jsonl")
    )
    LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024)))

    ANO_LETIVO_PADRAO = os.getenv("ANO_LETIVO_PADRAO", "2026")
    STATUS_PADRAO = "Cursando"
    ITENS_POR_PAGINA = int(os.getenv("ITENS_POR_PAGINA", "20"))
    TOP_N_RANKING = int(os.getenv("TOP_N_RANKING", "15"))

    TABELAS_OBRIGATORIAS = ["students", "classes", "subjects", "grades"]
    TABELAS_OPCIONAIS = ["formations", "knowledge_areas", "sub_areas"]
