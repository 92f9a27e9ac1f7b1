"""Serviço de boletim escolar.

Responsabilidades:
- Montar as linhas do boletim de um aluno
- Listar alunos para emissão com busca e navegação entre vizinhos
"""

from typing import List, Optional

from sei.application.avaliacao_service import BIMESTRE_RECUPERACAO, BIMESTRES, MotorAvaliacao, formatar_nota
from sei.application.conselho_service import ordenar_disciplinas
from sei.domain.entidades import DadosEscolares, Estudante
from sei.domain.excecoes import EntidadeNaoEncontrada
from sei.domain.resultados import Boletim, LinhaBoletim, OpcaoBoletim
from sei.util.texto import chave_alfabetica


class ServicoBoletim:
    """Emissão de boletins.

    Responsabilidades:
    - Avaliar cada disciplina da turma do aluno
    - Formatar valores para exibição
    - Ordenar e navegar pela lista de alunos
    """

    def __init__(self, dados: DadosEscolares):
        self.dados = dados

    def gerar_boletim(self, estudante_id: str) -> Boletim:
        """Gera o boletim de um aluno.

        Parâmetros:
        - estudante_id (str): id do aluno

        Retorno:
        - Boletim: linhas por disciplina (vazio se o aluno não tiver turma)

        Exceções:
        - EntidadeNaoEncontrada: aluno inexistente
        """
        estudante = self.dados.estudantes_por_id.get(str(estudante_id))
        if estudante is None:
            raise EntidadeNaoEncontrada(f"Aluno {estudante_id} não encontrado.")

        turma = self.dados.turmas_por_id.get(estudante.class_id)
        linhas = []
        if turma is not None:
            for disciplina in ordenar_disciplinas(self.dados.disciplinas_da_turma(turma)):
                notas = self.dados.notas_de(estudante.id, disciplina.id)
                resultado = MotorAvaliacao.avaliar_notas(notas)
                valores = {f"b{bimestre}": notas.get(bimestre) for bimestre in BIMESTRES}
                rf = notas.get(BIMESTRE_RECUPERACAO)
                exibicao = {chave: formatar_nota(valor) for chave, valor in valores.items()}
                exibicao.update(
                    rf=formatar_nota(rf),
                    mg=formatar_nota(resultado.mg),
                    mf=formatar_nota(resultado.mf),
                    desempenho=resultado.desempenho.value,
                    situacao=resultado.situacao.value,
                )
                linhas.append(
                    LinhaBoletim(
                        disciplina_id=disciplina.id,
                        disciplina=disciplina.name,
                        rf=rf,
                        resultado=resultado,
                        exibicao=exibicao,
                        **valores,
                    )
                )

        return Boletim(
            estudante_id=estudante.id,
            nome=estudante.name,
            matricula=estudante.registration_number,
            turma=turma.name if turma else None,
            ano=turma.year if turma else None,
            linhas=linhas,
        )

    def listar_estudantes(self, ano: str, turma_id: str = "all", busca: str = "") -> List[Estudante]:
        """Alunos das turmas do ano, filtrados por turma e busca por nome ou matrícula."""
        ids_turmas = {turma.id for turma in self.dados.turmas if turma.year == str(ano)}
        termo = (busca or "").strip().lower()
        encontrados = [
            estudante
            for estudante in self.dados.estudantes
            if estudante.class_id in ids_turmas
            and (turma_id == "all" or estudante.class_id == str(turma_id))
            and (termo in estudante.name.lower() or termo in estudante.registration_number)
        ]
        return sorted(encontrados, key=lambda estudante: chave_alfabetica(estudante.name))

    def opcoes(self, ano: str, turma_id: str = "all", busca: str = "") -> List[OpcaoBoletim]:
        """Lista de emissão com o aluno anterior e o próximo de cada item.

        Parâmetros:
        - ano (str): ano letivo
        - turma_id (str): id da turma ou "all"
        - busca (str): trecho do nome ou da matrícula

        Retorno:
        - list[OpcaoBoletim]: alunos ordenados por nome
        """
        estudantes = self.listar_estudantes(ano, turma_id, busca)
        opcoes = []
        for posicao, estudante in enumerate(estudantes):
            anterior: Optional[Estudante] = estudantes[posicao - 1] if posicao > 0 else None
            proximo: Optional[Estudante] = estudantes[posicao + 1] if posicao + 1 < len(estudantes) else None
            opcoes.append(
                OpcaoBoletim(
                    estudante_id=estudante.id,
                    nome=estudante.name,
                    matricula=estudante.registration_number,
                    turma_id=estudante.class_id,
                    anterior=anterior.id if anterior else None,
                    proximo=proximo.id if proximo else None,
                )
            )
        return opcoes
