from datetime import datetime, timedelta, timezone

import threading

import pytest

from authentication.application.auth_service import AuthService
from authentication.infrastructure.auth_repository import MemoriaUsuarioRepository
from cadastro_contatos.exceptions import (
    CredenciaisInvalidas,
    ErroCriacaoUsuario,
    ErroValidacao,
    UsuarioBloqueado,
)

SENHA = "Senha@123"


class RelogioFake:
    def __init__(self):
        self.agora = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.agora

    def avancar(self, **kwargs):
        self.agora += timedelta(**kwargs)


@pytest.fixture
def relogio():
    return RelogioFake()


@pytest.fixture
def repo():
    return MemoriaUsuarioRepository()


@pytest.fixture
def service(repo, settings, relogio):
    return AuthService(repo, settings, relogio=relogio)


def test_registro_confirma_email_e_guarda_hash(service, repo):
    token = service.registrar("ana@exemplo.com", SENHA, SENHA)

    usuario = repo.buscar_por_email("ana@exemplo.com")
    assert usuario.email_confirmado is True
    assert usuario.senha_hash != SENHA
    assert token.email == "ana@exemplo.com"
    assert token.access_token


def test_registro_email_duplicado(service):
    service.registrar("ana@exemplo.com", SENHA, SENHA)

    with pytest.raises(ErroCriacaoUsuario) as exc:
        service.registrar("ana@exemplo.com", SENHA, SENHA)
    assert exc.value.erros[0]["code"] == "DuplicateUserName"


def test_registro_senha_fora_da_politica(service):
    with pytest.raises(ErroCriacaoUsuario) as exc:
        service.registrar("ana@exemplo.com", "senhafraca", "senhafraca")

    codigos = {e["code"] for e in exc.value.erros}
    assert "PasswordRequiresDigit" in codigos
    assert "PasswordRequiresUpper" in codigos


@pytest.mark.parametrize("email,senha,confirmacao,campo", [
    ("", SENHA, SENHA, "email"),
    ("sem-arroba", SENHA, SENHA, "email"),
    ("a@b", SENHA, SENHA, "email"),
    ("ana@@exemplo.com", SENHA, SENHA, "email"),
    ("ana@exemplo.com", "", "", "senha"),
    ("ana@exemplo.com", "Ab@1", "Ab@1", "senha"),
    ("ana@exemplo.com", SENHA, "Outra@123", "confirmacao_senha"),
])
def test_registro_validacao_de_campos(service, email, senha, confirmacao, campo):
    with pytest.raises(ErroValidacao) as exc:
        service.registrar(email, senha, confirmacao)
    assert campo in exc.value.erros


def test_login_sucesso_zera_tentativas(service, repo):
    service.registrar("ana@exemplo.com", SENHA, SENHA)
    with pytest.raises(CredenciaisInvalidas):
        service.login("ana@exemplo.com", "Errada@123")
    assert repo.buscar_por_email("ana@exemplo.com").tentativas_falhas == 1

    token = service.login("ana@exemplo.com", SENHA)

    assert token.access_token
    assert repo.buscar_por_email("ana@exemplo.com").tentativas_falhas == 0


def test_login_usuario_inexistente(service):
    with pytest.raises(CredenciaisInvalidas):
        service.login("ninguem@exemplo.com", SENHA)


def test_bloqueio_apos_tentativas_configuradas(service, repo, settings, relogio):
    service.registrar("ana@exemplo.com", SENHA, SENHA)

    for _ in range(settings.LOCKOUT_MAX_TENTATIVAS - 1):
        with pytest.raises(CredenciaisInvalidas):
            service.login("ana@exemplo.com", "Errada@123")

    with pytest.raises(UsuarioBloqueado):
        service.login("ana@exemplo.com", "Errada@123")

    # senha correta continua bloqueada enquanto o bloqueio vale
    relogio.avancar(minutes=settings.LOCKOUT_DURACAO_MINUTOS - 1)
    with pytest.raises(UsuarioBloqueado):
        service.login("ana@exemplo.com", SENHA)

    relogio.avancar(minutes=2)
    token = service.login("ana@exemplo.com", SENHA)
    assert token.access_token

    usuario = repo.buscar_por_email("ana@exemplo.com")
    assert usuario.bloqueado_ate is None
    assert usuario.tentativas_falhas == 0


def test_login_token_traz_claims_do_usuario(service, repo):
    service.registrar("ana@exemplo.com", SENHA, SENHA)
    repo.adicionar_claim("ana@exemplo.com", "ExcluirContato", "ExcluirContato")

    token = service.login("ana@exemplo.com", SENHA)

    assert {"type": "ExcluirContato", "value": "ExcluirContato"} in token.claims


def test_falhas_concorrentes_contam_todas_e_bloqueiam(service, repo, settings):
    service.registrar("ana@exemplo.com", SENHA, SENHA)
    total = settings.LOCKOUT_MAX_TENTATIVAS
    barreira = threading.Barrier(total)
    resultados = []
    trava = threading.Lock()

    def tentar():
        barreira.wait()
        try:
            service.login("ana@exemplo.com", "Errada@123")
        except (CredenciaisInvalidas, UsuarioBloqueado) as e:
            with trava:
                resultados.append(type(e).__name__)

    threads = [threading.Thread(target=tentar) for _ in range(total)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(resultados) == ["CredenciaisInvalidas"] * (total - 1) + ["UsuarioBloqueado"]
    assert repo.buscar_por_email("ana@exemplo.com").bloqueado_ate is not None
    with pytest.raises(UsuarioBloqueado):
        service.login("ana@exemplo.com", SENHA)


def test_falha_durante_bloqueio_nao_altera_estado(service, repo, settings, relogio):
    service.registrar("ana@exemplo.com", SENHA, SENHA)
    usuario = repo.buscar_por_email("ana@exemplo.com")
    for _ in range(settings.LOCKOUT_MAX_TENTATIVAS):
        gravado = repo.registrar_falha_login(usuario, settings.LOCKOUT_MAX_TENTATIVAS,
                                             timedelta(minutes=5), relogio())
    bloqueado_ate = gravado.bloqueado_ate

    gravado = repo.registrar_falha_login(usuario, settings.LOCKOUT_MAX_TENTATIVAS,
                                         timedelta(minutes=5), relogio())

    assert gravado.bloqueado_ate == bloqueado_ate
    assert gravado.tentativas_falhas == 0


def test_tamanho_minimo_de_senha_segue_configuracao(repo, settings, relogio):
    settings.SENHA_TAMANHO_MINIMO = 4
    settings.SENHA_EXIGE_DIGITO = False
    settings.SENHA_EXIGE_MINUSCULA = False
    settings.SENHA_EXIGE_MAIUSCULA = False
    settings.SENHA_EXIGE_ESPECIAL = False
    service = AuthService(repo, settings, relogio=relogio)

    token = service.registrar("ana@exemplo.com", "abcd", "abcd")

    assert token.access_token
    assert service.login("ana@exemplo.com", "abcd").access_token
