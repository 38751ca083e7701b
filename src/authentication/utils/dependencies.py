# authentication/utils/dependencies.py

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from authentication.application.auth_service import AuthService
from authentication.application.policy_service import Decisao, autorizar
from cadastro_contatos.config import Settings

# Instância global de HTTPBearer; a ausência de token é tratada pela política
bearer_scheme = HTTPBearer(auto_error=False)


def obter_settings(request: Request) -> Settings:
    return request.app.state.settings


def obter_auth_service(request: Request) -> AuthService:
    return AuthService(request.app.state.usuario_repo, request.app.state.settings)


def exigir_politica(nome_politica: str):
    """
    Cria uma dependência que aplica a política antes do handler.
    Levanta HTTP 401 sem token válido e HTTP 403 quando falta a claim exigida.
    """

    def _dependencia(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        settings: Settings = Depends(obter_settings),
    ) -> Decisao:
        token = credentials.credentials if credentials else None
        decisao = autorizar(token, nome_politica, settings)

        if decisao == Decisao.NAO_AUTENTICADO:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token inválido, expirado ou ausente.",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if decisao == Decisao.PROIBIDO:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permissão '{nome_politica}' necessária.",
            )
        return decisao

    return _dependencia
