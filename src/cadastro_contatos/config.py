#cadastro_contatos/config.py

import re
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # JWT
    JWT_SECRET_KEY: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRACAO_HORAS: int = 2
    JWT_EMISSOR: str = "CadastroContatos"
    JWT_VALIDO_EM: str = "https://localhost"

    # Bloqueio de conta
    LOCKOUT_MAX_TENTATIVAS: int = 5
    LOCKOUT_DURACAO_MINUTOS: int = 5

    # Política de senha
    SENHA_TAMANHO_MINIMO: int = 6
    SENHA_EXIGE_DIGITO: bool = True
    SENHA_EXIGE_MINUSCULA: bool = True
    SENHA_EXIGE_MAIUSCULA: bool = True
    SENHA_EXIGE_ESPECIAL: bool = True

    # Contatos
    TELEFONE_PADRAO: Optional[str] = None   # regex opcional, ex: r"^\d+$"

    # Persistência: "postgres" ou "memoria"
    REPOSITORIO: str = "postgres"
    DB_DATABASE: Optional[str] = None
    DB_USER: Optional[str] = None
    DB_PASS: Optional[str] = None
    DB_HOST: Optional[str] = None
    DB_PORT: Optional[str] = None

    LOG_DIR: Optional[str] = None   # quando definido, grava logs em arquivo

    @field_validator("TELEFONE_PADRAO")
    @classmethod
    def _validar_padrao_telefone(cls, valor: Optional[str]) -> Optional[str]:
        if valor:
            try:
                re.compile(valor)
            except re.error as e:
                raise ValueError(f"TELEFONE_PADRAO não é uma expressão regular válida: {e}") from e
        return valor

    class Config:
        env_file = ".env"


def carregar_settings() -> Settings:
    return Settings()
