import pytest
from fastapi.testclient import TestClient

from authentication.infrastructure.auth_repository import MemoriaUsuarioRepository
from cadastro_contatos.config import Settings
from cadastro_contatos.main import criar_app
from contatos.infrastructure.contato_repository import MemoriaContatoRepository

SENHA_VALIDA = "Senha@123"


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        JWT_SECRET_KEY="chave-de-teste-com-tamanho-suficiente-para-hs256",
        REPOSITORIO="memoria",
        LOCKOUT_MAX_TENTATIVAS=3,
        LOCKOUT_DURACAO_MINUTOS=5,
    )


@pytest.fixture
def usuario_repo():
    return MemoriaUsuarioRepository()


@pytest.fixture
def contato_repo():
    return MemoriaContatoRepository()


@pytest.fixture
def client(settings, usuario_repo, contato_repo):
    app = criar_app(settings, usuario_repo=usuario_repo, contato_repo=contato_repo)
    return TestClient(app)


def _registrar(client, email):
    resp = client.post("/registro", json={
        "email": email,
        "senha": SENHA_VALIDA,
        "confirmacao_senha": SENHA_VALIDA,
    })
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


@pytest.fixture
def token_header(client):
    token = _registrar(client, "ana@exemplo.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_header(client, usuario_repo):
    # 🔹 claim concedida fora da API, como faz o manage_users
    _registrar(client, "admin@exemplo.com")
    usuario_repo.adicionar_claim("admin@exemplo.com", "ExcluirContato", "ExcluirContato")
    resp = client.post("/login", json={"email": "admin@exemplo.com", "senha": SENHA_VALIDA})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}
