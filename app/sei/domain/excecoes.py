"""Exceções de domínio."""


class EntidadeNaoEncontrada(LookupError):
    """Turma, aluno ou disciplina inexistente no snapshot."""
