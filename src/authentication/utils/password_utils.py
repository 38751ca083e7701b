# authentication/utils/password_utils.py

import bcrypt

# bcrypt só considera os primeiros 72 bytes; versões recentes recusam entradas maiores
BCRYPT_MAX_BYTES = 72


def _senha_bytes(senha: str) -> bytes:
    return senha.encode("utf-8")[:BCRYPT_MAX_BYTES]


def gerar_hash_senha(senha: str) -> str:
    return bcrypt.hashpw(_senha_bytes(senha), bcrypt.gensalt()).decode("utf-8")


def verificar_senha(senha: str, senha_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_senha_bytes(senha), senha_hash.encode("utf-8"))
    except ValueError:
        # hash corrompido no banco
        return False
