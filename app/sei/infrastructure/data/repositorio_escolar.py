"""Repositório do snapshot escolar.

Responsabilidades:
- Carregar as tabelas da origem configurada
- Normalizar identificadores e listas de disciplinas
- Manter o snapshot imutável em memória
"""

import json
import re
import threading
from typing import List, Optional, Type

import pandas as pd
from pydantic import BaseModel, ValidationError

from sei.config.settings import Configuracoes
from sei.domain.entidades import (
    AreaConhecimento,
    DadosEscolares,
    Disciplina,
    Estudante,
    Nota,
    SubArea,
    TipoFormacao,
    Turma,
)
from sei.infrastructure.data.carregador_tabelas import criar_carregador, padronizar_colunas
from sei.infrastructure.data.data_contract import CONTRATOS
from sei.util.logger import logger

COLUNAS_TEXTO = ("id", "year", "semester", "registration_number", "code")
MODELOS = {
    "students": Estudante,
    "classes": Turma,
    "subjects": Disciplina,
    "grades": Nota,
    "formations": TipoFormacao,
    "knowledge_areas": AreaConhecimento,
    "sub_areas": SubArea,
}


def _limpar_valor(valor):
    if isinstance(valor, (list, tuple, dict)):
        return valor
    try:
        if pd.isna(valor):
            return None
    except (TypeError, ValueError):
        return valor
    # escalares numpy viram tipos nativos
    return valor.item() if hasattr(valor, "item") and not isinstance(valor, str) else valor


def _texto_id(valor) -> Optional[str]:
    """Converte ids numéricos lidos como float ("12.0") em texto ("12")."""
    valor = _limpar_valor(valor)
    if valor is None:
        return None
    return re.sub(r"\.0$", "", str(valor).strip())


def interpretar_lista_ids(valor) -> List[str]:
    """Lê `subject_ids` como lista JSON ou texto separado por ';', ',' ou '|'.

    Parâmetros:
    - valor (Any): conteúdo da célula

    Retorno:
    - list[str]: ids normalizados
    """
    valor = _limpar_valor(valor)
    if valor is None:
        return []
    if isinstance(valor, (list, tuple)):
        itens = valor
    else:
        texto = str(valor).strip()
        if texto.startswith("["):
            try:
                itens = json.loads(texto)
            except json.JSONDecodeError:
                itens = re.split(r"[;,|]", texto.strip("[]"))
        else:
            itens = re.split(r"[;,|]", texto)

    return [_texto_id(str(item).strip().strip("\"'")) for item in itens if str(item).strip().strip("\"'")]


def preparar_tabela(tabela: str, df: Optional[pd.DataFrame]) -> pd.DataFrame:
    """Padroniza colunas, valida o contrato e normaliza ids.

    Parâmetros:
    - tabela (str): nome da tabela
    - df (pd.DataFrame | None): tabela bruta

    Retorno:
    - pd.DataFrame: tabela pronta para conversão em modelos

    Exceções:
    - ValueError: quando o contrato é violado
    """
    if df is None:
        return pd.DataFrame()

    df = padronizar_colunas(df)
    df = CONTRATOS[tabela].validar(df)

    for coluna in df.columns:
        if coluna in COLUNAS_TEXTO or coluna.endswith("_id"):
            # coluna object: ids ausentes seguem None mesmo em colunas float
            df[coluna] = pd.Series([_texto_id(valor) for valor in df[coluna]], index=df.index, dtype=object)

    if "subject_ids" in df.columns:
        df["subject_ids"] = df["subject_ids"].map(interpretar_lista_ids)

    return df


def converter_registros(tabela: str, df: pd.DataFrame, modelo: Type[BaseModel]) -> list:
    """Converte as linhas em modelos, ignorando registros inválidos.

    Colunas vazias são omitidas para que os valores padrão do modelo se apliquem.
    """
    registros = []
    invalidos = 0
    for linha in df.to_dict(orient="records"):
        dados = {chave: _limpar_valor(valor) for chave, valor in linha.items()}
        dados = {chave: valor for chave, valor in dados.items() if valor is not None}
        try:
            registros.append(modelo.model_validate(dados))
        except ValidationError as erro:
            invalidos += 1
            logger.debug(f"Registro inválido em '{tabela}': {erro}")

    if invalidos:
        logger.warning(f"{invalidos} registros inválidos ignorados na tabela '{tabela}'.")
    return registros


class RepositorioEscolar:
    """Repositório singleton do snapshot escolar.

    Responsabilidades:
    - Manter o snapshot carregado em memória
    - Recarregar sob demanda trocando a referência inteira
    - Sinalizar indisponibilidade com RuntimeError
    """

    _instancia = None
    _lock = threading.Lock()
    _dados: Optional[DadosEscolares] = None

    def __new__(cls):
        """Cria ou reutiliza a instância única.

        Retorno:
        - RepositorioEscolar: instância singleton
        """
        if cls._instancia is None:
            with cls._lock:
                if cls._instancia is None:
                    cls._instancia = super(RepositorioEscolar, cls).__new__(cls)
                    try:
                        cls._instancia.recarregar()
                    except Exception as erro:
                        logger.error(f"Snapshot escolar indisponível: {erro}")
        return cls._instancia

    def recarregar(self) -> DadosEscolares:
        """Lê todas as tabelas e substitui o snapshot.

        Retorno:
        - DadosEscolares: novo snapshot

        Exceções:
        - RuntimeError: tabela obrigatória ausente
        - ValueError: contrato de dados violado
        - requests.RequestException: falha no backend hospedado
        """
        logger.info(f"Carregando snapshot escolar (origem: {Configuracoes.SNAPSHOT_SOURCE})...")
        carregador = criar_carregador()

        tabelas = {}
        for tabela in Configuracoes.TABELAS_OBRIGATORIAS + Configuracoes.TABELAS_OPCIONAIS:
            bruta = carregador.carregar(tabela)
            if bruta is None and tabela in Configuracoes.TABELAS_OBRIGATORIAS:
                raise RuntimeError(f"Tabela obrigatória '{tabela}' não encontrada.")
            df = preparar_tabela(tabela, bruta)
            tabelas[tabela] = converter_registros(tabela, df, MODELOS[tabela])

        dados = DadosEscolares(
            estudantes=tabelas["students"],
            turmas=tabelas["classes"],
            disciplinas=tabelas["subjects"],
            notas=tabelas["grades"],
            formacoes=tabelas["formations"],
            areas=tabelas["knowledge_areas"],
            subareas=tabelas["sub_areas"],
        )
        RepositorioEscolar._dados = dados
        logger.info(
            f"Snapshot carregado: {len(dados.estudantes)} alunos, {len(dados.turmas)} turmas, "
            f"{len(dados.disciplinas)} disciplinas, {len(dados.notas)} notas."
        )
        return dados

    def obter_dados(self) -> DadosEscolares:
        """Retorna o snapshot atual.

        Exceções:
        - RuntimeError: snapshot ainda não carregado
        """
        if self._dados is None:
            raise RuntimeError("Snapshot escolar não carregado. Verifique a origem de dados.")
        return self._dados

    @property
    def disponivel(self) -> bool:
        return self._dados is not None
