"""Serviço de lançamento e importação de notas.

Responsabilidades:
- Higienizar valores digitados ou colados
- Montar a folha de lançamento de uma disciplina
- Interpretar colagens tabuladas e produzir as atualizações de notas
"""

import re
from typing import Dict, List, Optional

from sei.application.avaliacao_service import (
    BIMESTRE_RECUPERACAO,
    BIMESTRES,
    PRECISA_INAPTO,
    PRECISA_SEM_CONSULTA,
    MotorAvaliacao,
)
from sei.config.settings import Configuracoes
from sei.domain.entidades import DadosEscolares, Estudante
from sei.domain.excecoes import EntidadeNaoEncontrada
from sei.domain.filtros import RequisicaoImportacao
from sei.domain.resultados import AtualizacaoNota, LinhaLancamento, ResultadoImportacao
from sei.util.logger import FabricaLogger
from sei.util.texto import chave_alfabetica, normalizar_nome

logger = FabricaLogger.componente("importacao")

NOTA_MAXIMA = 10.0
SEPARADOR_COLUNAS = "\t"


def formatar_entrada_nota(texto: Optional[str]) -> str:
    """Higieniza o texto de uma nota.

    Troca a primeira vírgula por ponto, remove caracteres não numéricos,
    mantém apenas o primeiro ponto e limita valores acima de 10 a "10.0".

    Parâmetros:
    - texto (str | None): valor digitado

    Retorno:
    - str: valor higienizado ("" quando vazio)
    """
    if not texto:
        return ""
    limpo = re.sub(r"[^0-9.]", "", texto.replace(",", ".", 1))
    partes = limpo.split(".")
    if len(partes) > 2:
        limpo = partes[0] + "." + "".join(partes[1:])

    valor = _para_valor(limpo)
    if valor is not None and valor > NOTA_MAXIMA:
        return f"{NOTA_MAXIMA:.1f}"
    return limpo


def _para_valor(texto: str) -> Optional[float]:
    if not re.search(r"\d", texto or ""):
        return None
    return float(texto)


class ServicoImportacao:
    """Folha de lançamento e importação em lote de uma turma.

    Responsabilidades:
    - Avaliar as linhas da folha com a recuperação em aberto
    - Casar nomes colados com a lista da turma
    - Relatar nomes não encontrados e homônimos
    """

    def __init__(self, dados: DadosEscolares):
        self.dados = dados

    def _turma(self, turma_id: str):
        turma = self.dados.turmas_por_id.get(str(turma_id))
        if turma is None:
            raise EntidadeNaoEncontrada(f"Turma {turma_id} não encontrada.")
        return turma

    def _disciplina(self, disciplina_id: str):
        disciplina = self.dados.disciplinas_por_id.get(str(disciplina_id))
        if disciplina is None:
            raise EntidadeNaoEncontrada(f"Disciplina {disciplina_id} não encontrada.")
        return disciplina

    def folha_lancamento(
        self, turma_id: str, disciplina_id: str, status: str = Configuracoes.STATUS_PADRAO
    ) -> List[LinhaLancamento]:
        """Linhas da folha de lançamento de notas.

        Parâmetros:
        - turma_id (str): id da turma
        - disciplina_id (str): id da disciplina
        - status (str): status dos alunos ("all" para todos)

        Retorno:
        - list[LinhaLancamento]: uma linha por aluno, ordenada por nome

        Exceções:
        - EntidadeNaoEncontrada: turma ou disciplina inexistente
        """
        turma = self._turma(turma_id)
        disciplina = self._disciplina(disciplina_id)

        linhas = []
        estudantes = sorted(
            self.dados.estudantes_da_turma(turma.id, status), key=lambda e: chave_alfabetica(e.name)
        )
        for estudante in estudantes:
            notas = self.dados.notas_de(estudante.id, disciplina.id)
            resultado = MotorAvaliacao.avaliar_notas(notas)
            linhas.append(
                LinhaLancamento(
                    estudante_id=estudante.id,
                    nome=estudante.name,
                    matricula=estudante.registration_number,
                    status=estudante.status,
                    rf=notas.get(BIMESTRE_RECUPERACAO),
                    resultado=resultado,
                    recuperacao_habilitada=resultado.precisa not in (PRECISA_SEM_CONSULTA, PRECISA_INAPTO),
                    **{f"b{bimestre}": notas.get(bimestre) for bimestre in BIMESTRES},
                )
            )
        return linhas

    def importar(self, requisicao: RequisicaoImportacao) -> ResultadoImportacao:
        """Interpreta uma colagem `NOME<TAB>v1<TAB>v2...` para os bimestres marcados.

        Nenhuma nota é gravada: o resultado lista as atualizações a aplicar.

        Parâmetros:
        - requisicao (RequisicaoImportacao): turma, disciplina, status, texto e bimestres alvo

        Retorno:
        - ResultadoImportacao: atualizações, nomes não encontrados e homônimos

        Exceções:
        - EntidadeNaoEncontrada: turma ou disciplina inexistente
        """
        turma = self._turma(requisicao.class_id)
        disciplina = self._disciplina(requisicao.subject_id)
        bimestres_alvo = sorted(b for b, marcado in requisicao.bimestres.items() if marcado)

        por_nome: Dict[str, List[Estudante]] = {}
        # mesmos alunos da folha de lançamento exibida
        for estudante in self.dados.estudantes_da_turma(turma.id, requisicao.status):
            por_nome.setdefault(normalizar_nome(estudante.name), []).append(estudante)

        atualizacoes = []
        atualizados = set()
        nao_encontrados = []
        ambiguos = []

        for linha in requisicao.texto.splitlines():
            colunas = linha.split(SEPARADOR_COLUNAS)
            if len(colunas) < 2 or not colunas[0].strip():
                continue

            nome = colunas[0].strip()
            candidatos = por_nome.get(normalizar_nome(nome), [])
            if not candidatos:
                nao_encontrados.append(nome)
                continue
            if len(candidatos) > 1:
                ambiguos.append(nome)
                continue

            estudante = candidatos[0]
            valores = colunas[1:]
            for bimestre, bruto in zip(bimestres_alvo, valores):
                atualizacoes.append(
                    AtualizacaoNota(
                        student_id=estudante.id,
                        subject_id=disciplina.id,
                        term=bimestre,
                        value=_para_valor(formatar_entrada_nota(bruto)),
                    )
                )
            atualizados.add(estudante.id)

        if ambiguos:
            logger.warning(f"Importação na turma {turma.name}: nomes ambíguos ignorados {ambiguos}")

        return ResultadoImportacao(
            atualizacoes=atualizacoes,
            estudantes_atualizados=len(atualizados),
            nao_encontrados=nao_encontrados,
            ambiguos=ambiguos,
        )
