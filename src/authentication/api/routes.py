# authentication/api/routes.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from authentication.application.auth_service import AuthService
from authentication.utils.dependencies import obter_auth_service
from cadastro_contatos.api.respostas import problema_validacao
from cadastro_contatos.exceptions import (
    CredenciaisInvalidas,
    ErroAssinatura,
    ErroCriacaoUsuario,
    ErroValidacao,
    FalhaPersistencia,
    NaoEncontrado,
    UsuarioBloqueado,
)
from cadastro_contatos.logs.logging_factory import LoggerFactory

router = APIRouter(tags=["Usuario"])
logger = LoggerFactory.get_logger("authentication_routes")


# --------
# Models
# --------
class RegistroRequest(BaseModel):
    email: Optional[str] = None
    senha: Optional[str] = None
    confirmacao_senha: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    senha: Optional[str] = None


def _erro_assinatura(e: ErroAssinatura) -> HTTPException:
    logger.error(f"❌ Falha ao emitir token: {e}")
    return HTTPException(status_code=500, detail="Erro interno ao emitir token")


# --------
# Endpoints
# --------
@router.post("/registro", summary="Registrar usuário e obter token JWT")
def registrar(
    request: Optional[RegistroRequest] = None,
    service: AuthService = Depends(obter_auth_service),
):
    if request is None:
        raise HTTPException(status_code=400, detail="Usuário não informado")

    try:
        token = service.registrar(request.email, request.senha, request.confirmacao_senha)
        return token.to_dict()
    except ErroValidacao as e:
        raise problema_validacao(e)
    except ErroCriacaoUsuario as e:
        raise HTTPException(status_code=400, detail=e.erros)
    except FalhaPersistencia:
        raise HTTPException(status_code=400, detail="Houve um problema ao salvar o registro")
    except ErroAssinatura as e:
        raise _erro_assinatura(e)


@router.post("/login", summary="Realizar login e obter token JWT")
def login(
    request: Optional[LoginRequest] = None,
    service: AuthService = Depends(obter_auth_service),
):
    if request is None:
        raise HTTPException(status_code=400, detail="Usuário não informado")

    try:
        token = service.login(request.email, request.senha)
        return token.to_dict()
    except ErroValidacao as e:
        raise problema_validacao(e)
    except UsuarioBloqueado:
        raise HTTPException(status_code=400, detail="Usuário bloqueado")
    except (CredenciaisInvalidas, NaoEncontrado):
        raise HTTPException(status_code=400, detail="Usuário ou senha inválidos")
    except FalhaPersistencia:
        raise HTTPException(status_code=400, detail="Houve um problema ao acessar o armazenamento")
    except ErroAssinatura as e:
        raise _erro_assinatura(e)
