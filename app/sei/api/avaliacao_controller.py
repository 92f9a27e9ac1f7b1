"""Controlador de avaliação avulsa de disciplina.

Responsabilidades:
- Expor a regra de avaliação para notas informadas
- Expor a consulta da tabela "precisa"
"""

from fastapi import APIRouter, HTTPException, Query

from sei.application.avaliacao_service import MotorAvaliacao
from sei.domain.filtros import EntradaAvaliacao
from sei.domain.resultados import ResultadoDisciplina


class ControladorAvaliacao:
    """Controlador de avaliação.

    Responsabilidades:
    - Registrar rotas de avaliação
    - Traduzir erros de entrada em HTTP 400
    """

    def __init__(self):
        self.roteador = APIRouter()
        self.roteador.add_api_route(
            path="/avaliacao/disciplina",
            endpoint=self._avaliar_disciplina,
            methods=["POST"],
            response_model=ResultadoDisciplina,
            summary="Avalia as notas de uma disciplina",
        )
        self.roteador.add_api_route(
            path="/avaliacao/precisa",
            endpoint=self._consultar_precisa,
            methods=["GET"],
            response_model=dict,
            summary="Nota de recuperação necessária para os pontos informados",
        )

    @staticmethod
    async def _avaliar_disciplina(entrada: EntradaAvaliacao):
        """Avalia b1-b4 e recuperação final.

        Parâmetros:
        - entrada (EntradaAvaliacao): notas brutas

        Retorno:
        - ResultadoDisciplina: pontos, médias, situação e desempenho
        """
        try:
            return MotorAvaliacao.avaliar_disciplina(
                entrada.b1,
                entrada.b2,
                entrada.b3,
                entrada.b4,
                entrada.rf,
                recuperacao_encerrada=entrada.recuperacao_encerrada,
            )
        except (ValueError, TypeError, KeyError) as erro:
            raise HTTPException(status_code=400, detail=str(erro))

    @staticmethod
    async def _consultar_precisa(pontos: float = Query(..., ge=0)):
        return {"pontos": pontos, "precisa": MotorAvaliacao.consultar_precisa(pontos)}
