"""Dependências compartilhadas pelos controladores.

Responsabilidades:
- Resolver o snapshot escolar carregado
- Traduzir indisponibilidade do snapshot em HTTP 503
"""

from fastapi import HTTPException

from sei.domain.entidades import DadosEscolares
from sei.infrastructure.data.repositorio_escolar import RepositorioEscolar
from sei.infrastructure.registro.deliberacoes import RegistroDeliberacoes


def obter_repositorio() -> RepositorioEscolar:
    """Dependência para obter o repositório singleton do snapshot."""
    return RepositorioEscolar()


def obter_dados_escolares() -> DadosEscolares:
    """Dependência para obter o snapshot escolar atual.

    Retorno:
    - DadosEscolares: snapshot imutável

    Exceções:
    - HTTPException: quando o snapshot não está disponível
    """
    try:
        return RepositorioEscolar().obter_dados()
    except RuntimeError as erro:
        raise HTTPException(status_code=503, detail=f"Snapshot escolar indisponível. {str(erro)}")


def obter_registro_deliberacoes() -> RegistroDeliberacoes:
    return RegistroDeliberacoes()
