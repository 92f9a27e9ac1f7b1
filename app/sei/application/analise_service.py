"""Serviço de análise de rendimento da coorte.

Responsabilidades:
- Resolver turmas, alunos e disciplinas a partir do filtro
- Acumular médias por aluno, disciplina, subárea e área
- Calcular taxa de aprovação, rankings e evolução das turmas
"""

from typing import Dict, List, Optional

from sei.application.avaliacao_service import BIMESTRES, MotorAvaliacao, aprovado_por_media, arredondar_uma_casa
from sei.config.settings import Configuracoes
from sei.domain.entidades import DadosEscolares, Disciplina, status_confere
from sei.domain.filtros import FiltroAnalise
from sei.domain.resultados import MediaGrupo, RelatorioAnalise, SerieTurma
from sei.util.logger import logger
from sei.util.texto import chave_natural

NOME_DESCONHECIDO = "?"


class _Acumulador:
    """Soma e contagem de um grupo."""

    __slots__ = ("soma", "quantidade")

    def __init__(self):
        self.soma = 0.0
        self.quantidade = 0

    def adicionar(self, valor: float) -> None:
        self.soma += valor
        self.quantidade += 1

    @property
    def media(self) -> float:
        return self.soma / self.quantidade if self.quantidade > 0 else 0.0


class ServicoAnalise:
    """Calcula o relatório de rendimento da coorte filtrada.

    Responsabilidades:
    - Aplicar o filtro hierárquico de disciplinas
    - Evitar contagem dupla de notas
    - Proteger todas as divisões contra grupos vazios
    """

    def __init__(self, dados: DadosEscolares, top_n: Optional[int] = None):
        """Inicializa o serviço.

        Parâmetros:
        - dados (DadosEscolares): snapshot das entidades
        - top_n (int | None): tamanho dos rankings de disciplinas e subáreas
        """
        self.dados = dados
        self.top_n = top_n or Configuracoes.TOP_N_RANKING

    def disciplinas_alvo(self, filtro: FiltroAnalise) -> List[Disciplina]:
        """Resolve a cadeia Formação → Área → SubÁrea → Disciplina do filtro.

        Parâmetros:
        - filtro (FiltroAnalise): filtro da análise

        Retorno:
        - list[Disciplina]: disciplinas do ano que atendem todos os níveis
        """
        alvo = []
        for disciplina in self.dados.disciplinas:
            if disciplina.year != filtro.year:
                continue
            if filtro.subject_id != "all" and disciplina.id != filtro.subject_id:
                continue

            subarea, area, formacao = self.dados.resolver_hierarquia(disciplina)
            if filtro.sub_area_id != "all" and (subarea is None or subarea.id != filtro.sub_area_id):
                continue
            if filtro.area_id != "all" and (area is None or area.id != filtro.area_id):
                continue
            if filtro.formation_id != "all" and (formacao is None or formacao.id != filtro.formation_id):
                continue

            alvo.append(disciplina)
        return alvo

    def calcular(self, filtro: FiltroAnalise) -> RelatorioAnalise:
        """Calcula o relatório de rendimento.

        Parâmetros:
        - filtro (FiltroAnalise): filtro da análise

        Retorno:
        - RelatorioAnalise: médias, taxa de aprovação, rankings e evolução
        """
        turmas = [
            turma
            for turma in self.dados.turmas
            if turma.year == filtro.year and (filtro.class_id == "all" or turma.id == filtro.class_id)
        ]
        ids_turmas = {turma.id for turma in turmas}
        estudantes = [
            estudante
            for estudante in self.dados.estudantes
            if estudante.class_id in ids_turmas and status_confere(estudante, filtro.status)
        ]
        disciplinas = self.disciplinas_alvo(filtro)

        por_disciplina: Dict[str, _Acumulador] = {}
        por_subarea: Dict[str, _Acumulador] = {}
        por_area: Dict[str, _Acumulador] = {}
        medias_estudantes = []

        for estudante in estudantes:
            acumulador_estudante = _Acumulador()
            for disciplina in disciplinas:
                if not self.dados.possui_notas(estudante.id, disciplina.id):
                    continue
                notas = self.dados.notas_de(estudante.id, disciplina.id)
                if filtro.term == "all":
                    valor = MotorAvaliacao.valor_anual(notas)
                else:
                    valor = notas.get(filtro.term) or 0.0

                if valor <= 0:
                    continue

                acumulador_estudante.adicionar(valor)
                por_disciplina.setdefault(disciplina.id, _Acumulador()).adicionar(valor)
                subarea, area, _ = self.dados.resolver_hierarquia(disciplina)
                if area is not None:
                    por_area.setdefault(area.id, _Acumulador()).adicionar(valor)
                if subarea is not None:
                    por_subarea.setdefault(subarea.id, _Acumulador()).adicionar(valor)

            if acumulador_estudante.quantidade > 0:
                medias_estudantes.append(acumulador_estudante.media)

        aprovados = sum(1 for media in medias_estudantes if aprovado_por_media(media))
        media_global = sum(medias_estudantes) / len(medias_estudantes) if medias_estudantes else 0.0
        taxa_aprovacao = aprovados / len(medias_estudantes) * 100 if medias_estudantes else 0.0

        logger.info(
            f"Análise {filtro.year}: {len(estudantes)} alunos, {len(disciplinas)} disciplinas, "
            f"{len(medias_estudantes)} com notas."
        )

        return RelatorioAnalise(
            media_global=arredondar_uma_casa(media_global),
            taxa_aprovacao=arredondar_uma_casa(taxa_aprovacao),
            total_estudantes=len(estudantes),
            estudantes_com_notas=len(medias_estudantes),
            estudantes_aprovados=aprovados,
            medias_por_disciplina=self._ranking(por_disciplina, self.dados.disciplinas_por_id, self.top_n),
            medias_por_area=self._ranking(por_area, self.dados.areas_por_id),
            medias_por_subarea=self._ranking(por_subarea, self.dados.subareas_por_id, self.top_n),
            evolucao_turmas=self._evolucao_turmas(turmas, [d.id for d in disciplinas], filtro.status),
        )

    @staticmethod
    def _ranking(grupos: Dict[str, _Acumulador], catalogo, limite: Optional[int] = None) -> List[MediaGrupo]:
        """Ordena grupos com notas pela média decrescente.

        Parâmetros:
        - grupos (dict): acumuladores por id
        - catalogo (Mapping): registros por id para obter o nome
        - limite (int | None): quantidade máxima de grupos

        Retorno:
        - list[MediaGrupo]: grupos ranqueados
        """
        com_notas = [(grupo_id, acc) for grupo_id, acc in grupos.items() if acc.quantidade > 0]
        com_notas.sort(key=lambda item: item[1].media, reverse=True)
        if limite is not None:
            com_notas = com_notas[:limite]

        ranking = []
        for grupo_id, acc in com_notas:
            registro = catalogo.get(grupo_id)
            ranking.append(
                MediaGrupo(
                    nome=registro.name if registro is not None else NOME_DESCONHECIDO,
                    media=arredondar_uma_casa(acc.media),
                    quantidade=acc.quantidade,
                )
            )
        return ranking

    def _evolucao_turmas(self, turmas, ids_disciplinas: List[str], status: str) -> List[SerieTurma]:
        """Média bruta por bimestre de cada turma, em ordem natural de nome."""
        series = []
        for turma in sorted(turmas, key=lambda t: chave_natural(t.name)):
            acumuladores = {bimestre: _Acumulador() for bimestre in BIMESTRES}
            for estudante in self.dados.estudantes_da_turma(turma.id, status):
                for disciplina_id in ids_disciplinas:
                    notas = self.dados.notas_de(estudante.id, disciplina_id)
                    for bimestre in BIMESTRES:
                        valor = notas.get(bimestre)
                        if valor is not None and valor > 0:
                            acumuladores[bimestre].adicionar(valor)
            series.append(
                SerieTurma(
                    turma=turma.name,
                    medias=[arredondar_uma_casa(acumuladores[b].media) for b in BIMESTRES],
                )
            )
        return series
