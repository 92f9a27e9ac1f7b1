"""Validação de contrato das tabelas do snapshot.

Responsabilidades:
- Validar presença de colunas obrigatórias
- Converter colunas numéricas
- Falhar explicitamente se contrato for violado
"""

from typing import Dict, List

import pandas as pd

from sei.util.logger import logger


class ContratoDataFrame:
    """Define e valida contrato de dados para uma tabela.

    Responsabilidades:
    - Declarar colunas obrigatórias
    - Validar tipos numéricos esperados
    - Falhar com mensagem clara se violado
    """

    def __init__(self, tabela: str, colunas_obrigatorias: List[str], tipos_esperados: Dict[str, type] = None):
        """Inicializa o contrato.

        Parâmetros:
        - tabela (str): nome da tabela validada
        - colunas_obrigatorias (list): colunas que devem estar presentes
        - tipos_esperados (dict): mapeamento coluna -> int | float
        """
        self.tabela = tabela
        self.colunas_obrigatorias = colunas_obrigatorias
        self.tipos_esperados = tipos_esperados or {}

    def validar(self, df: pd.DataFrame) -> pd.DataFrame:
        """Valida a tabela contra o contrato.

        Tabelas vazias são aceitas. Colunas `int` não aceitam valores
        inválidos; colunas `float` mantêm inválidos como ausentes.

        Parâmetros:
        - df (pd.DataFrame): tabela a validar

        Retorno:
        - pd.DataFrame: tabela com colunas numéricas convertidas

        Exceções:
        - ValueError: quando contrato é violado
        """
        if df is None:
            raise ValueError(f"Tabela '{self.tabela}' nula. Impossível validar contrato.")

        if df.empty and len(df.columns) == 0:
            return df

        colunas_faltantes = [c for c in self.colunas_obrigatorias if c not in df.columns]
        if colunas_faltantes:
            raise ValueError(
                f"Contrato da tabela '{self.tabela}' violado: colunas obrigatórias ausentes: {colunas_faltantes}. "
                f"Colunas disponíveis: {list(df.columns)}"
            )

        df = df.copy()
        for coluna, tipo_esperado in self.tipos_esperados.items():
            if coluna not in df.columns:
                continue

            originais = df[coluna].notna()
            convertida = pd.to_numeric(df[coluna], errors="coerce")
            invalidos = int((originais & convertida.isna()).sum())

            if tipo_esperado is int:
                if invalidos or convertida.isna().any():
                    raise ValueError(
                        f"Contrato da tabela '{self.tabela}' violado: coluna '{coluna}' "
                        f"possui valores ausentes ou não inteiros."
                    )
                df[coluna] = convertida.astype(int)
            else:
                if invalidos:
                    logger.warning(
                        f"Coluna '{coluna}' da tabela '{self.tabela}' contém {invalidos} valores "
                        f"não numéricos. Serão tratados como ausentes."
                    )
                df[coluna] = convertida

        logger.info(f"Contrato da tabela '{self.tabela}' validado. {len(df)} registros.")
        return df


CONTRATOS = {
    "students": ContratoDataFrame("students", ["id", "name"]),
    "classes": ContratoDataFrame("classes", ["id", "name", "year"]),
    "subjects": ContratoDataFrame("subjects", ["id", "name", "year"]),
    "grades": ContratoDataFrame(
        "grades",
        ["student_id", "subject_id", "term", "value"],
        tipos_esperados={"term": int, "value": float},
    ),
    "formations": ContratoDataFrame("formations", ["id", "name"]),
    "knowledge_areas": ContratoDataFrame("knowledge_areas", ["id", "name"]),
    "sub_areas": ContratoDataFrame("sub_areas", ["id", "name"]),
}
