# authentication/infrastructure/token_service.py
import hashlib
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

import jwt

from authentication.domain.entities import Claim, TokenEmitido, Usuario
from cadastro_contatos.config import Settings
from cadastro_contatos.exceptions import ErroAssinatura, NaoAutenticado


def _claims_ordenadas(usuario: Usuario, claims_extras: Iterable[Claim]) -> list:
    todas = set(usuario.claims) | set(claims_extras)
    return [{"type": tipo, "value": valor} for tipo, valor in sorted(todas)]


def montar_payload(
    usuario: Usuario,
    claims_extras: Iterable[Claim],
    agora: datetime,
    config: Settings,
) -> dict:
    """Payload ainda não assinado; função pura de (usuario, claims, agora, config)."""
    if agora.tzinfo is None:
        agora = agora.replace(tzinfo=timezone.utc)
    iat = int(agora.timestamp())
    exp = agora + timedelta(hours=config.JWT_EXPIRACAO_HORAS)

    return {
        "sub": usuario.id,
        "email": usuario.email,
        "jti": hashlib.sha256(f"{usuario.id}:{iat}".encode("utf-8")).hexdigest()[:32],
        "iat": iat,
        "nbf": iat,
        "exp": int(exp.timestamp()),
        "iss": config.JWT_EMISSOR,
        "aud": config.JWT_VALIDO_EM,
        "claims": _claims_ordenadas(usuario, claims_extras),
    }


def gerar_token(
    usuario: Usuario,
    config: Settings,
    claims_extras: Iterable[Claim] = (),
    agora: Optional[datetime] = None,
) -> TokenEmitido:
    if not config.JWT_SECRET_KEY:
        raise ErroAssinatura("JWT_SECRET_KEY não configurada")

    agora = agora or datetime.now(timezone.utc)
    payload = montar_payload(usuario, claims_extras, agora, config)

    try:
        token = jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)
    except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as e:
        raise ErroAssinatura(f"Falha ao assinar token: {e}") from e

    return TokenEmitido(
        access_token=token,
        expires_in=config.JWT_EXPIRACAO_HORAS * 3600,
        usuario_id=usuario.id,
        email=usuario.email,
        claims=payload["claims"],
    )


def verificar_token(token: str, config: Settings) -> dict:
    try:
        return jwt.decode(
            token,
            config.JWT_SECRET_KEY,
            algorithms=[config.JWT_ALGORITHM],
            audience=config.JWT_VALIDO_EM,
            issuer=config.JWT_EMISSOR,
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise NaoAutenticado("Token expirado") from e
    except jwt.PyJWTError as e:
        raise NaoAutenticado("Token inválido") from e
