"""Contextos de filtro e entradas das telas de análise.

Responsabilidades:
- Representar filtros como objetos imutáveis
- Validar valores aceitos por bimestre e status
"""

from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sei.config.settings import Configuracoes
from sei.domain.resultados import ResultadoGeral


class _Filtro(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)


class FiltroAnalise(_Filtro):
    """Filtro da análise de rendimento da coorte.

    "all" desativa o filtro correspondente; `term` "all" usa a média anual.
    """

    year: str = Field(default_factory=lambda: Configuracoes.ANO_LETIVO_PADRAO)
    status: str = Configuracoes.STATUS_PADRAO
    term: Union[Literal["all"], int] = "all"
    class_id: str = "all"
    formation_id: str = "all"
    area_id: str = "all"
    sub_area_id: str = "all"
    subject_id: str = "all"

    @field_validator("term", mode="before")
    @classmethod
    def _validar_bimestre(cls, valor):
        if valor is None or str(valor).strip().lower() == "all":
            return "all"
        bimestre = int(valor)
        if bimestre not in (1, 2, 3, 4):
            raise ValueError("Bimestre deve ser 'all' ou um valor entre 1 e 4.")
        return bimestre


class FiltroConselho(_Filtro):
    """Filtro do conselho de classe."""

    year: str = Field(default_factory=lambda: Configuracoes.ANO_LETIVO_PADRAO)
    class_id: str
    status: str = Configuracoes.STATUS_PADRAO
    formation_id: str = "all"
    min_acima: Optional[int] = Field(None, ge=0)
    min_abaixo: Optional[int] = Field(None, ge=0)


class Deliberacao(_Filtro):
    """Decisão do conselho sobre o resultado de um aluno."""

    student_id: str
    conselho: Literal["Sim", "-"] = "Sim"
    resultado: ResultadoGeral


class RequisicaoConselho(BaseModel):
    filtro: FiltroConselho
    pagina: int = Field(1, ge=1)


class RequisicaoDeliberacoes(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    year: str
    class_id: str
    deliberacoes: List[Deliberacao] = Field(..., min_length=1)


class EntradaAvaliacao(BaseModel):
    """Notas brutas de uma disciplina para avaliação avulsa."""

    b1: Optional[float] = None
    b2: Optional[float] = None
    b3: Optional[float] = None
    b4: Optional[float] = None
    rf: Optional[float] = None
    recuperacao_encerrada: bool = False


class RequisicaoImportacao(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    class_id: str
    subject_id: str
    texto: str
    status: str = Configuracoes.STATUS_PADRAO
    bimestres: Dict[int, bool] = Field(default_factory=lambda: {1: True, 2: False, 3: False, 4: False})

    @field_validator("bimestres")
    @classmethod
    def _validar_bimestres(cls, valor):
        invalidos = [bimestre for bimestre in valor if bimestre not in (1, 2, 3, 4)]
        if invalidos:
            raise ValueError(f"Bimestres inválidos para importação: {invalidos}")
        if not any(valor.values()):
            raise ValueError("Selecione ao menos um bimestre para importação.")
        return valor
