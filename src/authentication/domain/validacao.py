#authentication/domain/validacao.py

from typing import Dict, List, Optional

from email_validator import EmailNotValidError, validate_email

from cadastro_contatos.config import Settings

SENHA_TAMANHO_MINIMO_CAMPO = 6
SENHA_TAMANHO_MAXIMO = 100


def _validar_email_senha(
    email: Optional[str], senha: Optional[str], config: Settings
) -> Dict[str, List[str]]:
    erros: Dict[str, List[str]] = {}

    if not email or not email.strip():
        erros.setdefault("email", []).append("O campo email é obrigatório.")
    else:
        try:
            validate_email(email.strip(), check_deliverability=False)
        except EmailNotValidError as e:
            erros.setdefault("email", []).append(f"O campo email está em formato inválido: {e}")

    # A política configurada pode aceitar senhas mais curtas que o mínimo do campo
    minimo = min(SENHA_TAMANHO_MINIMO_CAMPO, config.SENHA_TAMANHO_MINIMO)
    if not senha:
        erros.setdefault("senha", []).append("O campo senha é obrigatório.")
    elif not minimo <= len(senha) <= SENHA_TAMANHO_MAXIMO:
        erros.setdefault("senha", []).append(
            f"O campo senha precisa ter entre {minimo} e {SENHA_TAMANHO_MAXIMO} caracteres."
        )

    return erros


def validar_registro(
    email: Optional[str],
    senha: Optional[str],
    confirmacao_senha: Optional[str],
    config: Settings,
) -> Dict[str, List[str]]:
    erros = _validar_email_senha(email, senha, config)
    if senha and confirmacao_senha != senha:
        erros.setdefault("confirmacao_senha", []).append("As senhas não conferem.")
    return erros


def validar_login(email: Optional[str], senha: Optional[str], config: Settings) -> Dict[str, List[str]]:
    return _validar_email_senha(email, senha, config)


def verificar_politica_senha(senha: str, config: Settings) -> List[dict]:
    """
    Aplica a política de senha configurada.
    Retorna a lista de violações no formato {code, description}; vazia quando a senha é aceita.
    """
    violacoes = []

    if len(senha) < config.SENHA_TAMANHO_MINIMO:
        violacoes.append({
            "code": "PasswordTooShort",
            "description": f"A senha deve ter pelo menos {config.SENHA_TAMANHO_MINIMO} caracteres.",
        })
    if config.SENHA_EXIGE_ESPECIAL and all(c.isalnum() for c in senha):
        violacoes.append({
            "code": "PasswordRequiresNonAlphanumeric",
            "description": "A senha deve ter pelo menos um caractere especial.",
        })
    if config.SENHA_EXIGE_DIGITO and not any(c.isdigit() for c in senha):
        violacoes.append({
            "code": "PasswordRequiresDigit",
            "description": "A senha deve ter pelo menos um dígito ('0'-'9').",
        })
    if config.SENHA_EXIGE_MINUSCULA and not any(c.islower() for c in senha):
        violacoes.append({
            "code": "PasswordRequiresLower",
            "description": "A senha deve ter pelo menos uma letra minúscula ('a'-'z').",
        })
    if config.SENHA_EXIGE_MAIUSCULA and not any(c.isupper() for c in senha):
        violacoes.append({
            "code": "PasswordRequiresUpper",
            "description": "A senha deve ter pelo menos uma letra maiúscula ('A'-'Z').",
        })

    return violacoes
