# authentication/infrastructure/auth_repository.py

import copy
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Dict, Optional

import psycopg2
from psycopg2 import errors as pg_errors

from authentication.domain.entities import Usuario
from cadastro_contatos.config import Settings
from cadastro_contatos.exceptions import ErroCriacaoUsuario, FalhaPersistencia, NaoEncontrado
from cadastro_contatos.infrastructure.database_connection import conectar_banco, fechar_conexao
from cadastro_contatos.logs.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("auth_repository")

ERRO_EMAIL_DUPLICADO = {
    "code": "DuplicateUserName",
    "description": "Este email já está em uso.",
}


class UsuarioRepository(ABC):
    """Armazenamento de identidades: email, hash de senha, estado de bloqueio e claims."""

    @abstractmethod
    def buscar_por_email(self, email: str) -> Optional[Usuario]: ...

    @abstractmethod
    def criar(self, usuario: Usuario) -> None: ...

    @abstractmethod
    def salvar_estado_login(self, usuario: Usuario) -> None:
        """Persiste tentativas_falhas e bloqueado_ate."""

    @abstractmethod
    def registrar_falha_login(
        self, usuario: Usuario, max_tentativas: int, duracao_bloqueio: timedelta, agora: datetime
    ) -> Usuario:
        """
        Incrementa tentativas_falhas de forma atômica e bloqueia a conta ao atingir max_tentativas.
        Enquanto um bloqueio vigente existir, o estado não é alterado.
        Retorna o usuário com o estado gravado.
        """

    @abstractmethod
    def adicionar_claim(self, email: str, tipo: str, valor: str) -> None: ...


class MemoriaUsuarioRepository(UsuarioRepository):
    def __init__(self):
        self._usuarios: Dict[str, Usuario] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _chave(email: str) -> str:
        return email.strip().lower()

    def buscar_por_email(self, email: str) -> Optional[Usuario]:
        with self._lock:
            usuario = self._usuarios.get(self._chave(email))
            return copy.deepcopy(usuario) if usuario else None

    def criar(self, usuario: Usuario) -> None:
        with self._lock:
            chave = self._chave(usuario.email)
            if chave in self._usuarios:
                raise ErroCriacaoUsuario([ERRO_EMAIL_DUPLICADO])
            self._usuarios[chave] = copy.deepcopy(usuario)

    def salvar_estado_login(self, usuario: Usuario) -> None:
        with self._lock:
            atual = self._usuarios.get(self._chave(usuario.email))
            if atual is None:
                raise NaoEncontrado(f"Usuário {usuario.email} não encontrado")
            atual.tentativas_falhas = usuario.tentativas_falhas
            atual.bloqueado_ate = usuario.bloqueado_ate

    def registrar_falha_login(self, usuario, max_tentativas, duracao_bloqueio, agora) -> Usuario:
        with self._lock:
            atual = self._usuarios.get(self._chave(usuario.email))
            if atual is None:
                raise NaoEncontrado(f"Usuário {usuario.email} não encontrado")
            if not atual.esta_bloqueado(agora):
                atual.tentativas_falhas += 1
                if atual.tentativas_falhas >= max_tentativas:
                    atual.tentativas_falhas = 0
                    atual.bloqueado_ate = agora + duracao_bloqueio
            return copy.deepcopy(atual)

    def adicionar_claim(self, email: str, tipo: str, valor: str) -> None:
        with self._lock:
            atual = self._usuarios.get(self._chave(email))
            if atual is None:
                raise NaoEncontrado(f"Usuário {email} não encontrado")
            atual.claims.add((tipo, valor))


class PostgresUsuarioRepository(UsuarioRepository):
    def __init__(self, settings: Settings):
        self.settings = settings

    def buscar_por_email(self, email: str) -> Optional[Usuario]:
        query = """
        SELECT id, email, senha_hash, email_confirmado, tentativas_falhas, bloqueado_ate
        FROM usuarios
        WHERE lower(email) = lower(%s)
        LIMIT 1
        """
        conn = conectar_banco(self.settings)
        try:
            with conn.cursor() as cur:
                cur.execute(query, (email,))
                row = cur.fetchone()
                if not row:
                    return None
                usuario = Usuario(*row)
                cur.execute(
                    "SELECT tipo, valor FROM usuario_claims WHERE usuario_id = %s",
                    (usuario.id,),
                )
                usuario.claims = {(tipo, valor) for tipo, valor in cur.fetchall()}
                return usuario
        except psycopg2.Error as e:
            logger.error(f"❌ Erro ao buscar usuário: {e}")
            raise FalhaPersistencia("Erro ao buscar usuário") from e
        finally:
            fechar_conexao(conn)

    def criar(self, usuario: Usuario) -> None:
        conn = conectar_banco(self.settings)
        try:
            with conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO usuarios (id, email, senha_hash, email_confirmado, tentativas_falhas, bloqueado_ate)
                    VALUES (%s, %s, %s, %s, %s, %s)
                """, (
                    usuario.id,
                    usuario.email,
                    usuario.senha_hash,
                    usuario.email_confirmado,
                    usuario.tentativas_falhas,
                    usuario.bloqueado_ate,
                ))
                for tipo, valor in sorted(usuario.claims):
                    cur.execute(
                        "INSERT INTO usuario_claims (usuario_id, tipo, valor) VALUES (%s, %s, %s)",
                        (usuario.id, tipo, valor),
                    )
            conn.commit()
        except pg_errors.UniqueViolation as e:
            conn.rollback()
            raise ErroCriacaoUsuario([ERRO_EMAIL_DUPLICADO]) from e
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"❌ Erro ao criar usuário: {e}")
            raise FalhaPersistencia("Erro ao criar usuário") from e
        finally:
            fechar_conexao(conn)

    def salvar_estado_login(self, usuario: Usuario) -> None:
        conn = conectar_banco(self.settings)
        try:
            with conn.cursor() as cur:
                cur.execute("""
                    UPDATE usuarios SET tentativas_falhas = %s, bloqueado_ate = %s
                    WHERE id = %s
                """, (usuario.tentativas_falhas, usuario.bloqueado_ate, usuario.id))
                if cur.rowcount == 0:
                    raise NaoEncontrado(f"Usuário {usuario.email} não encontrado")
            conn.commit()
        except NaoEncontrado:
            conn.rollback()
            raise
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"❌ Erro ao salvar estado de login: {e}")
            raise FalhaPersistencia("Erro ao salvar estado de login") from e
        finally:
            fechar_conexao(conn)

    def registrar_falha_login(self, usuario, max_tentativas, duracao_bloqueio, agora) -> Usuario:
        # Expressões do SET enxergam a linha antiga; o lock de linha serializa tentativas concorrentes
        query = """
        UPDATE usuarios SET
            tentativas_falhas = CASE
                WHEN bloqueado_ate > %(agora)s THEN tentativas_falhas
                WHEN tentativas_falhas + 1 >= %(max)s THEN 0
                ELSE tentativas_falhas + 1
            END,
            bloqueado_ate = CASE
                WHEN bloqueado_ate > %(agora)s THEN bloqueado_ate
                WHEN tentativas_falhas + 1 >= %(max)s THEN %(ate)s
                ELSE bloqueado_ate
            END
        WHERE id = %(id)s
        RETURNING tentativas_falhas, bloqueado_ate
        """
        conn = conectar_banco(self.settings)
        try:
            with conn.cursor() as cur:
                cur.execute(query, {
                    "agora": agora,
                    "max": max_tentativas,
                    "ate": agora + duracao_bloqueio,
                    "id": usuario.id,
                })
                row = cur.fetchone()
                if not row:
                    raise NaoEncontrado(f"Usuário {usuario.email} não encontrado")
            conn.commit()
        except NaoEncontrado:
            conn.rollback()
            raise
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"❌ Erro ao registrar falha de login: {e}")
            raise FalhaPersistencia("Erro ao registrar falha de login") from e
        finally:
            fechar_conexao(conn)

        usuario.tentativas_falhas, usuario.bloqueado_ate = row
        return usuario

    def adicionar_claim(self, email: str, tipo: str, valor: str) -> None:
        conn = conectar_banco(self.settings)
        try:
            with conn.cursor() as cur:
                cur.execute("SELECT id FROM usuarios WHERE lower(email) = lower(%s)", (email,))
                row = cur.fetchone()
                if not row:
                    raise NaoEncontrado(f"Usuário {email} não encontrado")
                cur.execute("""
                    INSERT INTO usuario_claims (usuario_id, tipo, valor)
                    VALUES (%s, %s, %s)
                    ON CONFLICT DO NOTHING
                """, (row[0], tipo, valor))
            conn.commit()
        except NaoEncontrado:
            conn.rollback()
            raise
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"❌ Erro ao adicionar claim: {e}")
            raise FalhaPersistencia("Erro ao adicionar claim") from e
        finally:
            fechar_conexao(conn)
