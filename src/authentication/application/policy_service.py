# authentication/application/policy_service.py

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from authentication.infrastructure.token_service import verificar_token
from cadastro_contatos.config import Settings
from cadastro_contatos.exceptions import NaoAutenticado


class Decisao(str, Enum):
    PERMITIDO = "permitido"
    ANONIMO_PERMITIDO = "anonimo_permitido"
    NAO_AUTENTICADO = "nao_autenticado"
    PROIBIDO = "proibido"


@dataclass(frozen=True)
class Politica:
    nome: str
    exige_autenticacao: bool = True
    claim_exigida: Optional[str] = None


POLITICA_ANONIMO = "anonimo"
POLITICA_AUTENTICADO = "autenticado"
POLITICA_EXCLUIR_CONTATO = "ExcluirContato"

POLITICAS: Dict[str, Politica] = {
    POLITICA_ANONIMO: Politica(POLITICA_ANONIMO, exige_autenticacao=False),
    POLITICA_AUTENTICADO: Politica(POLITICA_AUTENTICADO),
    POLITICA_EXCLUIR_CONTATO: Politica(POLITICA_EXCLUIR_CONTATO, claim_exigida="ExcluirContato"),
}


def possui_claim(payload: dict, tipo: str) -> bool:
    return any(c.get("type") == tipo for c in payload.get("claims") or [])


def autorizar(token: Optional[str], nome_politica: str, config: Settings) -> Decisao:
    """
    Decide se o token satisfaz a política nomeada.
    Rotas sem exigência aceitam chamadas anônimas; nas demais o token precisa ser
    válido, não expirado e assinado com a chave configurada. Uma política com
    claim exige a presença do tipo de claim, com qualquer valor.
    """
    politica = POLITICAS[nome_politica]

    if not politica.exige_autenticacao:
        return Decisao.ANONIMO_PERMITIDO

    if not token:
        return Decisao.NAO_AUTENTICADO

    try:
        payload = verificar_token(token, config)
    except NaoAutenticado:
        return Decisao.NAO_AUTENTICADO

    if politica.claim_exigida and not possui_claim(payload, politica.claim_exigida):
        return Decisao.PROIBIDO

    return Decisao.PERMITIDO
