"""Utilitários de texto para ordenação e casamento de nomes."""

import re
import unicodedata


def normalizar_nome(valor) -> str:
    """Remove acentos, espaços extras e caixa de um nome.

    Parâmetros:
    - valor (Any): texto original

    Retorno:
    - str: nome normalizado em caixa alta
    """
    if valor is None:
        return ""
    texto = unicodedata.normalize("NFKD", str(valor)).encode("ASCII", "ignore").decode("utf-8")
    return re.sub(r"\s+", " ", texto).strip().upper()


def chave_alfabetica(valor) -> str:
    """Chave de ordenação alfabética insensível a acentos e caixa."""
    return normalizar_nome(valor).casefold()


def chave_natural(valor) -> tuple:
    """Chave de ordenação natural ("1A" < "2A" < "10A")."""
    partes = re.split(r"(\d+)", chave_alfabetica(valor))
    return tuple((0, int(parte), "") if parte.isdigit() else (1, 0, parte) for parte in partes if parte)
