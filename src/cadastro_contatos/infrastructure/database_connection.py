#cadastro_contatos/infrastructure/database_connection.py

from pathlib import Path

import psycopg2

from cadastro_contatos.config import Settings
from cadastro_contatos.exceptions import FalhaPersistencia
from cadastro_contatos.logs.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("database")


def conectar_banco(settings: Settings):
    try:
        conn = psycopg2.connect(
            dbname=settings.DB_DATABASE,
            user=settings.DB_USER,
            password=settings.DB_PASS,
            host=settings.DB_HOST,
            port=settings.DB_PORT,
        )
        return conn
    except psycopg2.Error as e:
        logger.error(f"❌ Erro ao conectar ao banco de dados: {e}")
        raise FalhaPersistencia("Não foi possível conectar ao banco de dados") from e


def fechar_conexao(conn):
    if conn:
        conn.close()


def criar_tabelas(settings: Settings) -> None:
    schema = Path(__file__).resolve().parent / "schema.sql"
    conn = conectar_banco(settings)
    try:
        with conn.cursor() as cur:
            cur.execute(schema.read_text(encoding="utf-8"))
        conn.commit()
        logger.info("✅ Tabelas criadas/verificadas com sucesso.")
    except psycopg2.Error as e:
        conn.rollback()
        logger.error(f"❌ Erro ao criar tabelas: {e}")
        raise FalhaPersistencia("Erro ao criar tabelas") from e
    finally:
        fechar_conexao(conn)
