## contatos/infrastructure/contato_repository.py

import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, List, Optional
from uuid import UUID

import psycopg2

from cadastro_contatos.config import Settings
from cadastro_contatos.exceptions import FalhaPersistencia
from cadastro_contatos.infrastructure.database_connection import conectar_banco, fechar_conexao
from cadastro_contatos.logs.logging_factory import LoggerFactory
from contatos.domain.entities import Contato

logger = LoggerFactory.get_logger("contato_repository")


class ContatoRepository(ABC):
    """
    Persistência de contatos. Cada operação é atômica.
    `atualizar` e `remover` retornam False quando o id não existe.
    """

    @abstractmethod
    def inserir(self, contato: Contato) -> None: ...

    @abstractmethod
    def buscar_por_id(self, contato_id: UUID) -> Optional[Contato]: ...

    @abstractmethod
    def listar(self) -> List[Contato]: ...

    @abstractmethod
    def atualizar(self, contato: Contato) -> bool: ...

    @abstractmethod
    def remover(self, contato_id: UUID) -> bool: ...


class MemoriaContatoRepository(ContatoRepository):
    def __init__(self):
        self._contatos: Dict[UUID, Contato] = {}
        self._lock = threading.Lock()

    def inserir(self, contato: Contato) -> None:
        with self._lock:
            if contato.id in self._contatos:
                raise FalhaPersistencia(f"Contato {contato.id} já existe")
            self._contatos[contato.id] = replace(contato)

    def buscar_por_id(self, contato_id: UUID) -> Optional[Contato]:
        with self._lock:
            contato = self._contatos.get(contato_id)
            return replace(contato) if contato else None

    def listar(self) -> List[Contato]:
        with self._lock:
            return [replace(c) for c in self._contatos.values()]

    def atualizar(self, contato: Contato) -> bool:
        with self._lock:
            if contato.id not in self._contatos:
                return False
            self._contatos[contato.id] = replace(contato)
            return True

    def remover(self, contato_id: UUID) -> bool:
        with self._lock:
            return self._contatos.pop(contato_id, None) is not None


class PostgresContatoRepository(ContatoRepository):
    def __init__(self, settings: Settings):
        self.settings = settings

    @staticmethod
    def _para_contato(row) -> Contato:
        contato_id, nome, telefone, tipo_contato = row
        return Contato(
            id=UUID(str(contato_id)),
            nome=nome,
            telefone=telefone,
            tipo_contato=tipo_contato,
        )

    def _executar_escrita(self, query: str, params: tuple, operacao: str) -> int:
        conn = conectar_banco(self.settings)
        try:
            with conn.cursor() as cur:
                cur.execute(query, params)
                afetados = cur.rowcount
            conn.commit()
            return afetados
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"❌ Erro ao {operacao} contato: {e}")
            raise FalhaPersistencia(f"Erro ao {operacao} contato") from e
        finally:
            fechar_conexao(conn)

    def _executar_leitura(self, query: str, params: tuple = ()) -> list:
        conn = conectar_banco(self.settings)
        try:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return cur.fetchall()
        except psycopg2.Error as e:
            logger.error(f"❌ Erro ao consultar contatos: {e}")
            raise FalhaPersistencia("Erro ao consultar contatos") from e
        finally:
            fechar_conexao(conn)

    def inserir(self, contato: Contato) -> None:
        afetados = self._executar_escrita("""
            INSERT INTO contatos (id, nome, telefone, tipo_contato)
            VALUES (%s, %s, %s, %s)
        """, (str(contato.id), contato.nome, contato.telefone, contato.tipo_contato), "inserir")
        if afetados == 0:
            raise FalhaPersistencia("Nenhuma linha gravada")

    def buscar_por_id(self, contato_id: UUID) -> Optional[Contato]:
        rows = self._executar_leitura(
            "SELECT id, nome, telefone, tipo_contato FROM contatos WHERE id = %s",
            (str(contato_id),),
        )
        return self._para_contato(rows[0]) if rows else None

    def listar(self) -> List[Contato]:
        rows = self._executar_leitura("SELECT id, nome, telefone, tipo_contato FROM contatos")
        return [self._para_contato(r) for r in rows]

    def atualizar(self, contato: Contato) -> bool:
        afetados = self._executar_escrita("""
            UPDATE contatos SET nome = %s, telefone = %s, tipo_contato = %s
            WHERE id = %s
        """, (contato.nome, contato.telefone, contato.tipo_contato, str(contato.id)), "atualizar")
        return afetados > 0

    def remover(self, contato_id: UUID) -> bool:
        afetados = self._executar_escrita(
            "DELETE FROM contatos WHERE id = %s", (str(contato_id),), "remover"
        )
        return afetados > 0
