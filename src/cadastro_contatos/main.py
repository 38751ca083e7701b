# cadastro_contatos/main.py

from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from authentication.api.routes import router as auth_router
from authentication.infrastructure.auth_repository import (
    MemoriaUsuarioRepository,
    PostgresUsuarioRepository,
    UsuarioRepository,
)
from cadastro_contatos.api.respostas import tratar_erro_cadastro, tratar_erro_requisicao
from cadastro_contatos.config import Settings, carregar_settings
from cadastro_contatos.exceptions import ErroCadastro
from cadastro_contatos.logs.logging_factory import LoggerFactory
from contatos.api.routes import router as contatos_router
from contatos.infrastructure.contato_repository import (
    ContatoRepository,
    MemoriaContatoRepository,
    PostgresContatoRepository,
)

logger = LoggerFactory.get_logger("cadastro_contatos")


def _repositorios_padrao(settings: Settings):
    if settings.REPOSITORIO == "memoria":
        logger.warning("⚠️ Usando repositórios em memória: os dados não serão persistidos.")
        return MemoriaUsuarioRepository(), MemoriaContatoRepository()
    if settings.REPOSITORIO == "postgres":
        return PostgresUsuarioRepository(settings), PostgresContatoRepository(settings)
    raise ValueError(f"REPOSITORIO inválido: {settings.REPOSITORIO!r} (use 'postgres' ou 'memoria')")


def criar_app(
    settings: Optional[Settings] = None,
    usuario_repo: Optional[UsuarioRepository] = None,
    contato_repo: Optional[ContatoRepository] = None,
) -> FastAPI:
    if settings is None:
        settings = carregar_settings()
    if usuario_repo is None or contato_repo is None:
        usuario_padrao, contato_padrao = _repositorios_padrao(settings)
        usuario_repo = usuario_repo if usuario_repo is not None else usuario_padrao
        contato_repo = contato_repo if contato_repo is not None else contato_padrao

    LoggerFactory.configurar(settings.LOG_DIR)

    if not settings.JWT_SECRET_KEY:
        logger.error("❌ JWT_SECRET_KEY não configurada: emissão de tokens irá falhar.")

    app = FastAPI(
        title="Cadastro de Contatos",
        version="1.0.0",
        docs_url="/swagger",
        redoc_url="/redoc",
        swagger_ui_parameters={"persistAuthorization": True},
    )

    app.state.settings = settings
    app.state.usuario_repo = usuario_repo
    app.state.contato_repo = contato_repo

    app.add_exception_handler(RequestValidationError, tratar_erro_requisicao)
    app.add_exception_handler(ErroCadastro, tratar_erro_cadastro)

    app.include_router(auth_router)
    app.include_router(contatos_router)

    @app.get("/health", tags=["Health"])
    def healthcheck():
        """Verifica se o serviço está ativo."""
        return {"status": "ok", "service": "cadastro_contatos"}

    return app


def criar_app_do_ambiente() -> FastAPI:
    """Ponto de entrada do uvicorn: `uvicorn cadastro_contatos.main:criar_app_do_ambiente --factory`."""
    load_dotenv(override=False)
    return criar_app()
