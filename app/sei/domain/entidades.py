"""Modelos de domínio das entidades escolares.

Responsabilidades:
- Validar registros lidos do snapshot
- Normalizar identificadores e status
- Oferecer o snapshot imutável consumido pelo motor de notas
"""

from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


class StatusMatricula(str, Enum):
    """Situação de matrícula do aluno."""

    CURSANDO = "Cursando"
    TRANSFERENCIA = "Transferência"
    EVASAO = "Evasão"
    OUTRO = "Outro"


class Periodicidade(str, Enum):
    """Periodicidade de oferta da disciplina."""

    ANUAL = "Anual"
    SEMESTRAL = "Semestral"


class _Entidade(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True, populate_by_name=True)


class TipoFormacao(_Entidade):
    id: str
    name: str


class AreaConhecimento(_Entidade):
    id: str
    name: str
    formation_type_id: Optional[str] = None


class SubArea(_Entidade):
    id: str
    name: str
    knowledge_area_id: Optional[str] = None


class Disciplina(_Entidade):
    """Componente curricular vinculado à hierarquia SubÁrea → Área → Formação."""

    id: str
    name: str
    sub_area_id: Optional[str] = None
    periodicity: Periodicidade = Periodicidade.ANUAL
    semester: Optional[str] = None
    year: str
    code: Optional[str] = None


class Turma(_Entidade):
    """Turma de um ano letivo com as disciplinas que lhe foram atribuídas."""

    id: str
    name: str
    year: str
    enrollment_type: Optional[str] = None
    shift: Optional[str] = None
    subject_ids: Tuple[str, ...] = ()

    @field_validator("subject_ids", mode="before")
    @classmethod
    def _normalizar_ids(cls, valor):
        if valor is None:
            return ()
        return tuple(str(item) for item in valor)


class Estudante(_Entidade):
    """Aluno matriculado. Status vazio equivale a "Cursando"."""

    id: str
    name: str
    class_id: Optional[str] = None
    registration_number: str = ""
    status: str = StatusMatricula.CURSANDO.value

    @field_validator("status", mode="before")
    @classmethod
    def _status_padrao(cls, valor):
        if valor is None or str(valor).strip() in ("", "nan", "None"):
            return StatusMatricula.CURSANDO.value
        return str(valor).strip()

    @field_validator("registration_number", mode="before")
    @classmethod
    def _matricula_texto(cls, valor):
        return "" if valor is None else str(valor)


class Nota(_Entidade):
    """Nota de um aluno em uma disciplina. Bimestres 1-4; 5 é a recuperação final."""

    id: Optional[str] = None
    student_id: str
    subject_id: str
    term: int = Field(..., ge=1, le=5)
    value: Optional[float] = None


NotasPorBimestre = Mapping[int, float]


class DadosEscolares:
    """Snapshot imutável das entidades escolares.

    Responsabilidades:
    - Guardar as coleções na ordem em que foram lidas
    - Indexar registros por id
    - Indexar notas por (aluno, disciplina)
    """

    def __init__(
        self,
        estudantes: List[Estudante] = (),
        turmas: List[Turma] = (),
        disciplinas: List[Disciplina] = (),
        notas: List[Nota] = (),
        formacoes: List[TipoFormacao] = (),
        areas: List[AreaConhecimento] = (),
        subareas: List[SubArea] = (),
    ):
        self.estudantes = tuple(estudantes)
        self.turmas = tuple(turmas)
        self.disciplinas = tuple(disciplinas)
        self.notas = tuple(notas)
        self.formacoes = tuple(formacoes)
        self.areas = tuple(areas)
        self.subareas = tuple(subareas)

        self.estudantes_por_id = _indexar(self.estudantes)
        self.turmas_por_id = _indexar(self.turmas)
        self.disciplinas_por_id = _indexar(self.disciplinas)
        self.formacoes_por_id = _indexar(self.formacoes)
        self.areas_por_id = _indexar(self.areas)
        self.subareas_por_id = _indexar(self.subareas)
        self._indice_notas = self._indexar_notas(self.notas)

    @staticmethod
    def _indexar_notas(notas) -> Dict[Tuple[str, str], Mapping[int, float]]:
        """Agrupa notas por (aluno, disciplina) mantendo o primeiro registro de cada bimestre."""
        indice: Dict[Tuple[str, str], Dict[int, float]] = {}
        for nota in notas:
            if nota.value is None:
                continue
            por_bimestre = indice.setdefault((nota.student_id, nota.subject_id), {})
            por_bimestre.setdefault(nota.term, float(nota.value))
        return {chave: MappingProxyType(valor) for chave, valor in indice.items()}

    def notas_de(self, estudante_id: str, disciplina_id: str) -> NotasPorBimestre:
        """Retorna as notas do aluno na disciplina (mapeamento vazio se não houver)."""
        return self._indice_notas.get((str(estudante_id), str(disciplina_id)), MappingProxyType({}))

    def possui_notas(self, estudante_id: str, disciplina_id: str) -> bool:
        return (str(estudante_id), str(disciplina_id)) in self._indice_notas

    def disciplinas_da_turma(self, turma: Turma) -> List[Disciplina]:
        """Disciplinas atribuídas à turma; ids sem cadastro são ignorados."""
        ids = set(turma.subject_ids)
        return [disciplina for disciplina in self.disciplinas if disciplina.id in ids]

    def estudantes_da_turma(self, turma_id: str, status: Optional[str] = None) -> List[Estudante]:
        """Alunos da turma, opcionalmente filtrados por status ("all" desativa o filtro)."""
        return [
            estudante
            for estudante in self.estudantes
            if estudante.class_id == str(turma_id) and status_confere(estudante, status)
        ]

    def resolver_hierarquia(self, disciplina: Disciplina):
        """Resolve a cadeia SubÁrea → Área → Formação da disciplina.

        Retorno:
        - tuple: (SubArea | None, AreaConhecimento | None, TipoFormacao | None)
        """
        subarea = self.subareas_por_id.get(disciplina.sub_area_id)
        area = self.areas_por_id.get(subarea.knowledge_area_id) if subarea else None
        formacao = self.formacoes_por_id.get(area.formation_type_id) if area else None
        return subarea, area, formacao

    def __len__(self):
        return len(self.estudantes) + len(self.turmas) + len(self.disciplinas) + len(self.notas)


def status_confere(estudante: Estudante, status: Optional[str]) -> bool:
    """Verifica o status do aluno; None ou "all" aceitam qualquer status."""
    if status is None or status == "all":
        return True
    return estudante.status == status


def _indexar(registros) -> Mapping[str, object]:
    indice = {}
    for registro in registros:
        indice.setdefault(registro.id, registro)
    return MappingProxyType(indice)
