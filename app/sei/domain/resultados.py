"""Modelos de resultado produzidos pelo motor de notas.

Responsabilidades:
- Declarar as situações, desempenhos e resultados gerais
- Estruturar as saídas por disciplina, aluno, turma e coorte
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Situacao(str, Enum):
    """Situação do aluno em uma disciplina."""

    APROVADO = "Aprovado"
    REPROVADO = "Reprovado"
    EM_CURSO = "Em Curso"
    RECUPERACAO = "Recuperação"


class Desempenho(str, Enum):
    """Faixa de desempenho derivada da média final."""

    INSUFICIENTE = "Insuficiente"
    REGULAR = "Regular"
    BOM = "Bom"
    OTIMO = "Ótimo"
    INDEFINIDO = "-"


class ResultadoGeral(str, Enum):
    """Resultado consolidado do aluno no conselho de classe."""

    APROVADO = "Aprovado"
    REPROVADO = "Reprovado"
    PENDENTE = "Pendente"


class _Resultado(BaseModel):
    model_config = ConfigDict(frozen=True)


class ResultadoDisciplina(_Resultado):
    """Avaliação de um aluno em uma disciplina."""

    pontos: float
    mg: float
    mf: float
    situacao: Situacao
    recuperado: bool
    desempenho: Desempenho
    completo: bool
    precisa: str


class ResultadoEstudante(_Resultado):
    """Agregado do aluno sobre as disciplinas da turma."""

    estudante_id: str
    resultados: Dict[str, ResultadoDisciplina]
    medias_acima_5: int
    medias_abaixo_5: int
    resultado_geral: ResultadoGeral
    disciplinas_retidas: List[str]


class MediaGrupo(_Resultado):
    nome: str
    media: float
    quantidade: int


class SerieTurma(_Resultado):
    turma: str
    medias: List[float] = Field(..., min_length=4, max_length=4)


class RelatorioAnalise(_Resultado):
    """Estatísticas da coorte filtrada."""

    media_global: float
    taxa_aprovacao: float
    total_estudantes: int
    estudantes_com_notas: int
    estudantes_aprovados: int
    medias_por_disciplina: List[MediaGrupo]
    medias_por_area: List[MediaGrupo]
    medias_por_subarea: List[MediaGrupo]
    evolucao_turmas: List[SerieTurma]


class SituacaoTurma(_Resultado):
    """Cartão de situação acadêmica de uma turma (regra de soma de pontos)."""

    turma_id: str
    turma: str
    aprovados: int
    reprovados: int
    pendentes: int
    matriculas: Dict[str, int]


class ContagemStatus(_Resultado):
    quantidade: int
    percentual: int


class PainelInstitucional(_Resultado):
    ano: str
    total_estudantes: int
    cursando: ContagemStatus
    transferidos: ContagemStatus
    evadidos: ContagemStatus
    aprovados: int
    recuperacao: int
    em_curso: int
    media_global: float
    turmas_ativas: int
    turmas: List[SituacaoTurma]


class LinhaConselho(_Resultado):
    estudante_id: str
    nome: str
    matricula: str
    resultados: Dict[str, ResultadoDisciplina]
    medias_acima_5: int
    medias_abaixo_5: int
    resultado_geral: ResultadoGeral
    disciplinas_retidas: List[str]
    decisao_conselho: str = "-"
    resultado_final: ResultadoGeral


class ColunaDisciplina(_Resultado):
    id: str
    nome: str
    periodicidade: str


class PaginaConselho(_Resultado):
    turma_id: str
    turma: str
    disciplinas: List[ColunaDisciplina]
    linhas: List[LinhaConselho]
    pagina: int
    total_paginas: int
    total_linhas: int


class LinhaBoletim(_Resultado):
    disciplina_id: str
    disciplina: str
    b1: Optional[float] = None
    b2: Optional[float] = None
    b3: Optional[float] = None
    b4: Optional[float] = None
    rf: Optional[float] = None
    resultado: ResultadoDisciplina
    exibicao: Dict[str, str]


class Boletim(_Resultado):
    estudante_id: str
    nome: str
    matricula: str
    turma: Optional[str] = None
    ano: Optional[str] = None
    linhas: List[LinhaBoletim]


class LinhaLancamento(_Resultado):
    estudante_id: str
    nome: str
    matricula: str
    status: str
    b1: Optional[float] = None
    b2: Optional[float] = None
    b3: Optional[float] = None
    b4: Optional[float] = None
    rf: Optional[float] = None
    resultado: ResultadoDisciplina
    recuperacao_habilitada: bool


class AtualizacaoNota(_Resultado):
    student_id: str
    subject_id: str
    term: int
    value: Optional[float] = None


class ResultadoImportacao(_Resultado):
    atualizacoes: List[AtualizacaoNota]
    estudantes_atualizados: int
    nao_encontrados: List[str]
    ambiguos: List[str]


class OpcaoBoletim(_Resultado):
    """Aluno na lista de emissão de boletins, com vizinhos para navegação."""

    estudante_id: str
    nome: str
    matricula: str
    turma_id: Optional[str] = None
    anterior: Optional[str] = None
    proximo: Optional[str] = None
