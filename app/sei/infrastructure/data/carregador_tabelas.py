"""Leitura das tabelas do snapshot escolar.

Responsabilidades:
- Ler exportações CSV/XLSX de uma pasta local
- Consultar as tabelas do backend PostgREST hospedado
- Padronizar nomes de colunas em snake_case
"""

import glob
import os
import re
from typing import Optional

import pandas as pd
import requests

from sei.config.settings import Configuracoes
from sei.util.logger import logger


def padronizar_colunas(df: pd.DataFrame) -> pd.DataFrame:
    """Converte nomes camelCase para snake_case ("subjectIds" -> "subject_ids").

    Parâmetros:
    - df (pd.DataFrame): tabela original

    Retorno:
    - pd.DataFrame: tabela com colunas padronizadas e sem duplicatas
    """
    novas_colunas = []
    for coluna in df.columns:
        coluna_limpa = str(coluna).strip()
        coluna_limpa = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", coluna_limpa)
        novas_colunas.append(re.sub(r"[\s\-]+", "_", coluna_limpa).lower())

    df.columns = novas_colunas
    if df.columns.duplicated().any():
        df = df.loc[:, ~df.columns.duplicated()]
    return df


class CarregadorArquivos:
    """Lê tabelas exportadas em CSV ou XLSX.

    Responsabilidades:
    - Localizar o arquivo de cada tabela em DATA_DIR
    - Detectar o separador dos CSVs
    """

    def __init__(self, diretorio: str = None):
        self.diretorio = diretorio or Configuracoes.DATA_DIR

    def carregar(self, tabela: str) -> Optional[pd.DataFrame]:
        """Lê uma tabela pelo nome.

        Parâmetros:
        - tabela (str): nome da tabela (ex.: "students")

        Retorno:
        - pd.DataFrame | None: tabela lida ou None quando não há arquivo
        """
        for extensao in ("csv", "xlsx"):
            caminho_busca = os.path.join(self.diretorio, f"{tabela}.{extensao}")
            arquivos = glob.glob(caminho_busca)
            if not arquivos:
                continue

            caminho_arquivo = arquivos[0]
            logger.info(f"Carregando tabela '{tabela}' de {caminho_arquivo}")
            if extensao == "xlsx":
                return self._ler_excel(caminho_arquivo)
            return self._ler_csv(caminho_arquivo)

        logger.warning(f"Nenhum arquivo encontrado para a tabela '{tabela}' em {self.diretorio}")
        return None

    @staticmethod
    def _ler_excel(caminho_arquivo: str) -> pd.DataFrame:
        """Lê a primeira aba de um arquivo Excel.

        Exceções:
        - Exception: quando a leitura falha
        """
        try:
            return pd.read_excel(caminho_arquivo, sheet_name=0, dtype=str)
        except Exception as erro:
            logger.error(f"Erro crítico ao ler o Excel: {erro}")
            raise erro

    @staticmethod
    def _ler_csv(caminho_arquivo: str) -> pd.DataFrame:
        """Lê um CSV separado por ';' ou ',' mantendo as células como texto ("001" segue "001")."""
        try:
            try:
                df = pd.read_csv(caminho_arquivo, sep=";", dtype=str)
                if len(df.columns) <= 1:
                    df = pd.read_csv(caminho_arquivo, sep=",", dtype=str)
            except pd.errors.ParserError:
                df = pd.read_csv(caminho_arquivo, sep=",", dtype=str)
            return df
        except Exception as erro:
            logger.error(f"Erro crítico ao ler o CSV: {erro}")
            raise erro


class CarregadorSupabase:
    """Consulta tabelas no PostgREST do Supabase.

    Responsabilidades:
    - Montar a URL e os cabeçalhos de autenticação
    - Paginar a leitura até obter todas as linhas da tabela
    - Converter a resposta JSON em DataFrame
    """

    def __init__(self, url: str = None, chave: str = None, timeout: float = None, tamanho_pagina: int = None):
        self.url = (url or Configuracoes.SUPABASE_URL).rstrip("/")
        self.chave = chave or Configuracoes.SUPABASE_KEY
        self.timeout = timeout or Configuracoes.HTTP_TIMEOUT
        self.tamanho_pagina = tamanho_pagina or Configuracoes.SUPABASE_PAGE_SIZE
        if not self.url or not self.chave:
            raise RuntimeError("SUPABASE_URL e SUPABASE_KEY são obrigatórios para a origem 'supabase'.")

    def _cabecalhos(self) -> dict:
        return {
            "apikey": self.chave,
            "Authorization": f"Bearer {self.chave}",
            "Accept": "application/json",
            "Prefer": "count=exact",
        }

    @staticmethod
    def _total_informado(resposta) -> Optional[int]:
        """Total de linhas do cabeçalho Content-Range ("0-999/2500"), se houver."""
        _, _, total = str(resposta.headers.get("Content-Range", "")).partition("/")
        return int(total) if total.isdigit() else None

    def carregar(self, tabela: str) -> Optional[pd.DataFrame]:
        """Busca todos os registros de uma tabela, página a página.

        O servidor pode devolver menos linhas que o `limit` pedido (max-rows),
        por isso o deslocamento avança pelo tamanho da página recebida.

        Parâmetros:
        - tabela (str): nome da tabela

        Retorno:
        - pd.DataFrame | None: registros ou None quando a tabela não existe

        Exceções:
        - requests.RequestException: falha de rede ou resposta de erro
        """
        url = f"{self.url}/rest/v1/{tabela}"
        registros = []
        deslocamento = 0

        while True:
            resposta = requests.get(
                url,
                headers=self._cabecalhos(),
                params={"select": "*", "limit": self.tamanho_pagina, "offset": deslocamento},
                timeout=self.timeout,
            )
            if resposta.status_code == 404:
                logger.warning(f"Tabela '{tabela}' não encontrada no Supabase.")
                return None

            resposta.raise_for_status()
            pagina = resposta.json()
            registros.extend(pagina)
            deslocamento += len(pagina)

            total = self._total_informado(resposta)
            if not pagina:
                break
            if total is not None:
                if deslocamento >= total:
                    break
            elif len(pagina) < self.tamanho_pagina:
                break

        logger.info(f"Tabela '{tabela}' carregada do Supabase com {len(registros)} registros.")
        return pd.DataFrame.from_records(registros)


def criar_carregador():
    """Instancia o carregador conforme SNAPSHOT_SOURCE.

    Exceções:
    - ValueError: origem desconhecida
    """
    if Configuracoes.SNAPSHOT_SOURCE == "arquivos":
        return CarregadorArquivos()
    if Configuracoes.SNAPSHOT_SOURCE == "supabase":
        return CarregadorSupabase()
    raise ValueError(f"SNAPSHOT_SOURCE inválido: {Configuracoes.SNAPSHOT_SOURCE}")
