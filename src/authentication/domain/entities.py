#authentication/domain/entities.py

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Set, Tuple

Claim = Tuple[str, str]  # (tipo, valor)


@dataclass
class Usuario:
    id: str
    email: str
    senha_hash: str
    email_confirmado: bool = False
    tentativas_falhas: int = 0
    bloqueado_ate: Optional[datetime] = None
    claims: Set[Claim] = field(default_factory=set)

    def esta_bloqueado(self, agora: datetime) -> bool:
        return self.bloqueado_ate is not None and self.bloqueado_ate > agora


@dataclass
class TokenEmitido:
    access_token: str
    expires_in: int  # segundos
    usuario_id: str
    email: str
    claims: List[dict]

    def to_dict(self) -> dict:
        return {
            "access_token": self.access_token,
            "token_type": "bearer",
            "expires_in": self.expires_in,
            "usuario": {
                "id": self.usuario_id,
                "email": self.email,
                "claims": self.claims,
            },
        }
