"""Registro de deliberações do conselho em JSONL.

Responsabilidades:
- Registrar deliberações com segurança de thread
- Recuperar a deliberação mais recente de cada aluno
"""

import glob
import json
import os
import threading
import uuid
from datetime import datetime
from typing import Dict, Iterable, List

from pydantic import ValidationError

from sei.config.settings import Configuracoes
from sei.domain.filtros import Deliberacao
from sei.util.logger import FabricaLogger

logger = FabricaLogger.componente("deliberacoes")


class RegistroDeliberacoes:
    """Registro thread-safe das decisões do conselho de classe.

    Responsabilidades:
    - Garantir instância única
    - Escrever uma linha por deliberação
    - Rotacionar o arquivo sem perder o histórico
    """

    _instancia = None
    _lock = threading.Lock()

    def __new__(cls):
        """Cria ou reutiliza a instância única.

        Retorno:
        - RegistroDeliberacoes: instância singleton
        """
        if cls._instancia is None:
            with cls._lock:
                if cls._instancia is None:
                    cls._instancia = super(RegistroDeliberacoes, cls).__new__(cls)
        return cls._instancia

    def registrar(self, ano: str, turma_id: str, deliberacoes: Iterable[Deliberacao]) -> str:
        """Acrescenta as deliberações ao registro.

        Parâmetros:
        - ano (str): ano letivo
        - turma_id (str): id da turma
        - deliberacoes (Iterable[Deliberacao]): decisões do conselho

        Retorno:
        - str: id do lote registrado

        Exceções:
        - RuntimeError: falha ao escrever no registro
        """
        lote_id = str(uuid.uuid4())
        timestamp = datetime.now().isoformat()
        linhas = [
            json.dumps(
                {
                    "batch_id": lote_id,
                    "timestamp": timestamp,
                    "year": str(ano),
                    "class_id": str(turma_id),
                    "student_id": deliberacao.student_id,
                    "conselho": deliberacao.conselho,
                    "resultado": deliberacao.resultado.value,
                },
                ensure_ascii=False,
            )
            for deliberacao in deliberacoes
        ]

        with self._lock:
            try:
                os.makedirs(os.path.dirname(Configuracoes.DELIBERACOES_PATH), exist_ok=True)
                self._rotacionar_se_necessario()
                with open(Configuracoes.DELIBERACOES_PATH, "a", encoding="utf-8") as arquivo:
                    arquivo.write("".join(linha + "\n" for linha in linhas))
            except OSError as erro:
                logger.error(f"Falha Crítica ao escrever no registro de deliberações: {erro}")
                raise RuntimeError("Registro de deliberações indisponível.") from erro

        logger.info(f"{len(linhas)} deliberações registradas para a turma {turma_id} ({ano}).")
        return lote_id

    def carregar(self, ano: str, turma_id: str) -> Dict[str, Deliberacao]:
        """Deliberação mais recente de cada aluno da turma.

        Parâmetros:
        - ano (str): ano letivo
        - turma_id (str): id da turma

        Retorno:
        - dict[str, Deliberacao]: deliberações por id de aluno
        """
        deliberacoes = {}
        with self._lock:
            for caminho in self._arquivos():
                for entrada in self._ler(caminho):
                    if entrada.get("year") != str(ano) or entrada.get("class_id") != str(turma_id):
                        continue
                    try:
                        deliberacao = Deliberacao(
                            student_id=entrada["student_id"],
                            conselho=entrada.get("conselho", "Sim"),
                            resultado=entrada["resultado"],
                        )
                    except (KeyError, ValidationError) as erro:
                        logger.warning(f"Deliberação fora do formato em {caminho} ignorada: {erro}")
                        continue
                    deliberacoes[deliberacao.student_id] = deliberacao
        return deliberacoes

    @staticmethod
    def _arquivos() -> List[str]:
        """Arquivos rotacionados em ordem cronológica, seguidos do arquivo atual."""
        caminhos = sorted(glob.glob(f"{Configuracoes.DELIBERACOES_PATH}.*.bak"))
        if os.path.exists(Configuracoes.DELIBERACOES_PATH):
            caminhos.append(Configuracoes.DELIBERACOES_PATH)
        return caminhos

    @staticmethod
    def _ler(caminho: str) -> List[dict]:
        entradas = []
        with open(caminho, "r", encoding="utf-8") as arquivo:
            for numero, linha in enumerate(arquivo, start=1):
                if not linha.strip():
                    continue
                try:
                    entrada = json.loads(linha)
                except json.JSONDecodeError:
                    logger.warning(f"Linha {numero} inválida em {caminho} ignorada.")
                    continue
                if isinstance(entrada, dict):
                    entradas.append(entrada)
                else:
                    logger.warning(f"Linha {numero} de {caminho} não é um objeto JSON e foi ignorada.")
        return entradas

    @staticmethod
    def _rotacionar_se_necessario() -> None:
        """Rotaciona o arquivo quando atinge o tamanho máximo."""
        try:
            if not os.path.exists(Configuracoes.DELIBERACOES_PATH):
                return
            tamanho_atual = os.path.getsize(Configuracoes.DELIBERACOES_PATH)
            if tamanho_atual < Configuracoes.LOG_MAX_BYTES:
                return
            timestamp = datetime.now().strftime("%Y%m%d%H%M%S%f")
            novo_nome = f"{Configuracoes.DELIBERACOES_PATH}.{timestamp}.bak"
            os.replace(Configuracoes.DELIBERACOES_PATH, novo_nome)
        except OSError as erro:
            logger.warning(f"Falha ao rotacionar registro de deliberações: {erro}")
