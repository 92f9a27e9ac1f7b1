"""Motor de avaliação de notas por disciplina.

Responsabilidades:
- Calcular média bimestral (MG) e média final (MF)
- Classificar situação e desempenho do aluno
- Consultar a tabela de pontos necessários na recuperação ("Precisa")
- Expor as políticas de aprovação usadas por cada tela
"""

import math
from typing import Mapping, Optional

from sei.domain.resultados import Desempenho, ResultadoDisciplina, Situacao

MEDIA_APROVACAO = 6.0
MEDIA_APROVACAO_RECUPERACAO = 5.0
PONTOS_APROVACAO = 24.0
PESO_MEDIA = 6
PESO_RECUPERACAO = 4
BIMESTRES = (1, 2, 3, 4)
BIMESTRE_RECUPERACAO = 5

PRECISA_INAPTO = "Inapto"
PRECISA_SEM_CONSULTA = "----"

# Nota de recuperação necessária por total de pontos nos quatro bimestres.
# Dado de referência da secretaria: difere da fórmula fechada em 17.5 e 23.1.
TABELA_PRECISA = {
    "10.0": "8.8", "10.1": "8.7", "10.2": "8.7", "10.3": "8.6", "10.4": "8.6", "10.5": "8.6", "10.6": "8.5", "10.7": "8.5", "10.8": "8.5", "10.9": "8.4",
    "11.0": "8.4", "11.1": "8.3", "11.2": "8.3", "11.3": "8.3", "11.4": "8.2", "11.5": "8.2", "11.6": "8.2", "11.7": "8.1", "11.8": "8.1", "11.9": "8.0",
    "12.0": "8.0", "12.1": "8.0", "12.2": "7.9", "12.3": "7.9", "12.4": "7.9", "12.5": "7.8", "12.6": "7.8", "12.7": "7.7", "12.8": "7.7", "12.9": "7.7",
    "13.0": "7.6", "13.1": "7.6", "13.2": "7.6", "13.3": "7.5", "13.4": "7.5", "13.5": "7.4", "13.6": "7.4", "13.7": "7.4", "13.8": "7.3", "13.9": "7.3",
    "14.0": "7.3", "14.1": "7.2", "14.2": "7.2", "14.3": "7.1", "14.4": "7.1", "14.5": "7.1", "14.6": "7.0", "14.7": "7.0", "14.8": "7.0", "14.9": "6.9",
    "15.0": "6.9", "15.1": "6.8", "15.2": "6.8", "15.3": "6.8", "15.4": "6.7", "15.5": "6.7", "15.6": "6.7", "15.7": "6.6", "15.8": "6.6", "15.9": "6.5",
    "16.0": "6.5", "16.1": "6.5", "16.2": "6.4", "16.3": "6.4", "16.4": "6.4", "16.5": "6.3", "16.6": "6.3", "16.7": "6.2", "16.8": "6.2", "16.9": "6.2",
    "17.0": "6.1", "17.1": "6.1", "17.2": "6.1", "17.3": "6.0", "17.4": "6.0", "17.5": "6.0", "17.6": "5.9", "17.7": "5.9", "17.8": "5.8", "17.9": "5.8",
    "18.0": "5.8", "18.1": "5.7", "18.2": "5.7", "18.3": "5.6", "18.4": "5.6", "18.5": "5.6", "18.6": "5.5", "18.7": "5.5", "18.8": "5.5", "18.9": "5.4",
    "19.0": "5.4", "19.1": "5.3", "19.2": "5.3", "19.3": "5.3", "19.4": "5.2", "19.5": "5.2", "19.6": "5.2", "19.7": "5.1", "19.8": "5.1", "19.9": "5.0",
    "20.0": "5.0", "20.1": "5.0", "20.2": "4.9", "20.3": "4.9", "20.4": "4.9", "20.5": "4.8", "20.6": "4.8", "20.7": "4.7", "20.8": "4.7", "20.9": "4.7",
    "21.0": "4.6", "21.1": "4.6", "21.2": "4.6", "21.3": "4.5", "21.4": "4.5", "21.5": "4.4", "21.6": "4.4", "21.7": "4.4", "21.8": "4.3", "21.9": "4.3",
    "22.0": "4.3", "22.1": "4.2", "22.2": "4.2", "22.3": "4.1", "22.4": "4.1", "22.5": "4.1", "22.6": "4.0", "22.7": "4.0", "22.8": "4.0", "22.9": "3.9",
    "23.0": "3.9", "23.1": "3.9", "23.2": "3.8", "23.3": "3.8", "23.4": "3.7", "23.5": "3.7", "23.6": "3.7", "23.7": "3.6", "23.8": "3.6", "23.9": "3.5",
    "24.0": "3.5", "24.1": "3.5", "24.2": "3.4", "24.3": "3.4", "24.4": "3.4", "24.5": "3.3", "24.6": "3.3", "24.7": "3.2", "24.8": "3.2", "24.9": "3.2",
}


def arredondar_uma_casa(valor: float) -> float:
    """Arredonda para uma casa decimal com meio para cima (6.25 -> 6.3)."""
    return math.floor(valor * 10 + 0.5) / 10


def formatar_nota(valor: Optional[float]) -> str:
    """Formata uma nota para exibição; ausência vira "-"."""
    if valor is None:
        return "-"
    return f"{arredondar_uma_casa(valor):.1f}"


def aprovado_por_pontos(notas: Mapping[int, float]) -> Optional[bool]:
    """Regra dos cartões de turma: soma dos quatro bimestres >= 24.

    Retorno:
    - bool | None: None quando faltam bimestres
    """
    valores = [notas[bimestre] for bimestre in BIMESTRES if notas.get(bimestre) is not None]
    if len(valores) < len(BIMESTRES):
        return None
    return arredondar_uma_casa(sum(valores)) >= PONTOS_APROVACAO


def aprovado_por_media(media: float) -> bool:
    """Regra da análise e da aprovação direta: média >= 6.0."""
    return media >= MEDIA_APROVACAO


def aprovado_pos_recuperacao(media_final: float) -> bool:
    """Regra do conselho e do boletim: média final arredondada >= 5.0."""
    return arredondar_uma_casa(media_final) >= MEDIA_APROVACAO_RECUPERACAO


class MotorAvaliacao:
    """Aplica as regras de avaliação de uma disciplina.

    Responsabilidades:
    - Calcular MG, MF e recuperação
    - Classificar situação, desempenho e "Precisa"
    - Calcular o valor anual usado nas análises
    """

    @staticmethod
    def avaliar_disciplina(
        b1: Optional[float] = None,
        b2: Optional[float] = None,
        b3: Optional[float] = None,
        b4: Optional[float] = None,
        rf: Optional[float] = None,
        recuperacao_encerrada: bool = False,
    ) -> ResultadoDisciplina:
        """Avalia as notas de um aluno em uma disciplina.

        Parâmetros:
        - b1..b4 (float | None): notas dos bimestres
        - rf (float | None): nota da recuperação final
        - recuperacao_encerrada (bool): quando True, a ausência de rf é definitiva

        Retorno:
        - ResultadoDisciplina: médias, situação e desempenho
        """
        validos = [valor for valor in (b1, b2, b3, b4) if valor is not None]
        completo = len(validos) == len(BIMESTRES)

        if not validos:
            return ResultadoDisciplina(
                pontos=0.0,
                mg=0.0,
                mf=0.0,
                situacao=Situacao.EM_CURSO,
                recuperado=False,
                desempenho=Desempenho.INDEFINIDO,
                completo=False,
                precisa=PRECISA_SEM_CONSULTA,
            )

        pontos = sum(validos)
        mg = pontos / len(BIMESTRES)

        recuperado = False
        if aprovado_por_media(mg):
            mf_bruta = mg
        else:
            nota_recuperacao = rf if rf is not None else 0.0
            mf_bruta = (mg * PESO_MEDIA + nota_recuperacao * PESO_RECUPERACAO) / 10
            recuperado = rf is not None

        mf = arredondar_uma_casa(mf_bruta)

        return ResultadoDisciplina(
            pontos=arredondar_uma_casa(pontos),
            mg=mg,
            mf=mf,
            situacao=MotorAvaliacao._classificar_situacao(completo, mg, mf, rf, recuperacao_encerrada),
            recuperado=recuperado,
            desempenho=MotorAvaliacao.classificar_desempenho(mf),
            completo=completo,
            precisa=MotorAvaliacao.consultar_precisa(pontos),
        )

    @staticmethod
    def avaliar_notas(notas: Mapping[int, float], recuperacao_encerrada: bool = False) -> ResultadoDisciplina:
        """Avalia a partir de um mapeamento bimestre -> nota."""
        return MotorAvaliacao.avaliar_disciplina(
            *(notas.get(bimestre) for bimestre in BIMESTRES),
            rf=notas.get(BIMESTRE_RECUPERACAO),
            recuperacao_encerrada=recuperacao_encerrada,
        )

    @staticmethod
    def _classificar_situacao(
        completo: bool, mg: float, mf: float, rf: Optional[float], recuperacao_encerrada: bool
    ) -> Situacao:
        if not completo:
            return Situacao.EM_CURSO
        if aprovado_por_media(mg):
            return Situacao.APROVADO
        if rf is None and not recuperacao_encerrada:
            return Situacao.RECUPERACAO
        return Situacao.APROVADO if aprovado_pos_recuperacao(mf) else Situacao.REPROVADO

    @staticmethod
    def classificar_desempenho(mf: float) -> Desempenho:
        """Classifica a média final em faixas de desempenho.

        Parâmetros:
        - mf (float): média final arredondada

        Retorno:
        - Desempenho: faixa correspondente
        """
        if mf < MEDIA_APROVACAO_RECUPERACAO:
            return Desempenho.INSUFICIENTE
        if mf < MEDIA_APROVACAO:
            return Desempenho.REGULAR
        if mf < 8.0:
            return Desempenho.BOM
        return Desempenho.OTIMO

    @staticmethod
    def consultar_precisa(pontos: float) -> str:
        """Nota necessária na recuperação final para o total de pontos informado.

        Parâmetros:
        - pontos (float): soma dos bimestres lançados

        Retorno:
        - str: nota da tabela, "Inapto" abaixo de 10 pontos ou "----" sem consulta
        """
        arredondados = arredondar_uma_casa(pontos)
        if arredondados < 10:
            return PRECISA_INAPTO
        return TABELA_PRECISA.get(f"{arredondados:.1f}", PRECISA_SEM_CONSULTA)

    @staticmethod
    def valor_anual(notas: Mapping[int, float]) -> float:
        """Valor anual de uma disciplina para as análises de rendimento.

        Bimestres ausentes contam como zero na média; a recuperação só entra
        quando a média está abaixo de 6.0 e a nota de recuperação existe.
        """
        mg = sum(notas.get(bimestre) or 0.0 for bimestre in BIMESTRES) / len(BIMESTRES)
        rf = notas.get(BIMESTRE_RECUPERACAO)
        if not aprovado_por_media(mg) and rf is not None:
            return arredondar_uma_casa((mg * PESO_MEDIA + rf * PESO_RECUPERACAO) / 10)
        return arredondar_uma_casa(mg)
