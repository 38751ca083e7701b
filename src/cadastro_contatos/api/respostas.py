# cadastro_contatos/api/respostas.py

from typing import Dict, List, Sequence

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cadastro_contatos.exceptions import (
    CredenciaisInvalidas,
    ErroAssinatura,
    ErroCadastro,
    ErroCriacaoUsuario,
    ErroValidacao,
    FalhaPersistencia,
    NaoAutenticado,
    NaoEncontrado,
    Proibido,
    UsuarioBloqueado,
)
from cadastro_contatos.logs.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("respostas")

TITULO_VALIDACAO = "Um ou mais erros de validação ocorreram."
CAMPO_CORPO = "corpo"


def _corpo_validacao(erros: Dict[str, List[str]]) -> dict:
    return {
        "title": TITULO_VALIDACAO,
        "status": status.HTTP_400_BAD_REQUEST,
        "errors": erros,
    }


def erros_por_campo(erros_pydantic: Sequence[dict]) -> Dict[str, List[str]]:
    """Converte a lista de erros do pydantic/FastAPI em campo -> mensagens."""
    erros: Dict[str, List[str]] = {}
    for erro in erros_pydantic:
        if erro.get("type") == "json_invalid":
            # loc traz a posição do erro no texto, não um campo
            campo = CAMPO_CORPO
        else:
            loc = [str(p) for p in erro.get("loc", ()) if p not in ("body", "path", "query")]
            campo = ".".join(loc) or CAMPO_CORPO
        erros.setdefault(campo, []).append(erro.get("msg", "Valor inválido"))
    return erros


def problema_validacao(erro: ErroValidacao) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=_corpo_validacao(erro.erros),
    )


async def tratar_erro_requisicao(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Parâmetro de rota inválido vira o mesmo 400 de validação."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": _corpo_validacao(erros_por_campo(exc.errors()))},
    )


def _resposta_erro(exc: ErroCadastro):
    if isinstance(exc, ErroValidacao):
        return status.HTTP_400_BAD_REQUEST, _corpo_validacao(exc.erros), None
    if isinstance(exc, ErroCriacaoUsuario):
        return status.HTTP_400_BAD_REQUEST, exc.erros, None
    if isinstance(exc, NaoEncontrado):
        return status.HTTP_404_NOT_FOUND, "Registro não encontrado", None
    if isinstance(exc, NaoAutenticado):
        return status.HTTP_401_UNAUTHORIZED, "Token inválido, expirado ou ausente.", {"WWW-Authenticate": "Bearer"}
    if isinstance(exc, Proibido):
        return status.HTTP_403_FORBIDDEN, "Permissão insuficiente.", None
    if isinstance(exc, UsuarioBloqueado):
        return status.HTTP_400_BAD_REQUEST, "Usuário bloqueado", None
    if isinstance(exc, CredenciaisInvalidas):
        return status.HTTP_400_BAD_REQUEST, "Usuário ou senha inválidos", None
    if isinstance(exc, FalhaPersistencia):
        return status.HTTP_400_BAD_REQUEST, "Houve um problema ao acessar o armazenamento", None
    if isinstance(exc, ErroAssinatura):
        return status.HTTP_500_INTERNAL_SERVER_ERROR, "Erro interno ao emitir token", None
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "Erro interno", None


async def tratar_erro_cadastro(request: Request, exc: ErroCadastro) -> JSONResponse:
    """Erros de domínio que escapam das rotas viram a mesma resposta estruturada."""
    status_code, detail, headers = _resposta_erro(exc)
    if status_code >= 500 or isinstance(exc, FalhaPersistencia):
        logger.error(f"❌ {type(exc).__name__} em {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=status_code, content={"detail": detail}, headers=headers)
