# authentication/application/auth_service.py

import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from authentication.domain.entities import TokenEmitido, Usuario
from authentication.domain.validacao import validar_login, validar_registro, verificar_politica_senha
from authentication.infrastructure.auth_repository import ERRO_EMAIL_DUPLICADO, UsuarioRepository
from authentication.infrastructure.token_service import gerar_token
from authentication.utils.password_utils import gerar_hash_senha, verificar_senha
from cadastro_contatos.config import Settings
from cadastro_contatos.exceptions import (
    CredenciaisInvalidas,
    ErroCriacaoUsuario,
    ErroValidacao,
    UsuarioBloqueado,
)
from cadastro_contatos.logs.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("auth_service")


def _agora_utc() -> datetime:
    return datetime.now(timezone.utc)


class AuthService:
    def __init__(
        self,
        repo: UsuarioRepository,
        settings: Settings,
        relogio: Optional[Callable[[], datetime]] = None,
    ):
        self.repo = repo
        self.settings = settings
        self.relogio = relogio or _agora_utc

    def registrar(self, email: str, senha: str, confirmacao_senha: str) -> TokenEmitido:
        erros = validar_registro(email, senha, confirmacao_senha, self.settings)
        if erros:
            raise ErroValidacao(erros)

        email = email.strip()
        falhas = []
        if self.repo.buscar_por_email(email):
            falhas.append(ERRO_EMAIL_DUPLICADO)
        falhas.extend(verificar_politica_senha(senha, self.settings))
        if falhas:
            logger.warning(f"⚠️ Registro recusado para {email}: {[f['code'] for f in falhas]}")
            raise ErroCriacaoUsuario(falhas)

        novo_usuario = Usuario(
            id=str(uuid.uuid4()),
            email=email,
            senha_hash=gerar_hash_senha(senha),
            email_confirmado=True,
        )
        self.repo.criar(novo_usuario)
        logger.info(f"✅ Usuário {email} registrado.")

        return gerar_token(novo_usuario, self.settings, agora=self.relogio())

    def login(self, email: str, senha: str) -> TokenEmitido:
        erros = validar_login(email, senha, self.settings)
        if erros:
            raise ErroValidacao(erros)

        usuario = self.repo.buscar_por_email(email.strip())
        if not usuario:
            raise CredenciaisInvalidas("Usuário ou senha inválidos")

        agora = self.relogio()
        if usuario.esta_bloqueado(agora):
            logger.warning(f"🔒 Tentativa de login em conta bloqueada: {usuario.email}")
            raise UsuarioBloqueado("Usuário bloqueado")

        if not verificar_senha(senha, usuario.senha_hash):
            self._registrar_falha(usuario, agora)

        if usuario.tentativas_falhas or usuario.bloqueado_ate:
            usuario.tentativas_falhas = 0
            usuario.bloqueado_ate = None
            self.repo.salvar_estado_login(usuario)

        logger.info(f"✅ Login realizado: {usuario.email}")
        return gerar_token(usuario, self.settings, agora=agora)

    def _registrar_falha(self, usuario: Usuario, agora: datetime) -> None:
        """Contabiliza a falha; sempre termina levantando CredenciaisInvalidas ou UsuarioBloqueado."""
        gravado = self.repo.registrar_falha_login(
            usuario,
            self.settings.LOCKOUT_MAX_TENTATIVAS,
            timedelta(minutes=self.settings.LOCKOUT_DURACAO_MINUTOS),
            agora,
        )

        if gravado.esta_bloqueado(agora):
            logger.warning(f"🔒 Conta {usuario.email} bloqueada até {gravado.bloqueado_ate.isoformat()}")
            raise UsuarioBloqueado("Usuário bloqueado")

        logger.warning(f"⚠️ Senha inválida para {usuario.email} ({gravado.tentativas_falhas} tentativa(s))")
        raise CredenciaisInvalidas("Usuário ou senha inválidos")
