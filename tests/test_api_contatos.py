import uuid
from datetime import datetime, timedelta, timezone

from authentication.domain.entities import Usuario
from authentication.infrastructure.token_service import gerar_token
from cadastro_contatos.exceptions import FalhaPersistencia

CONTATO = {"nome": "Ana Silva", "telefone": "11999999999", "tipoContato": "P"}


def _criar(client, headers, corpo=None):
    resp = client.post("/contato", json=corpo or CONTATO, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_cenario_completo(client, token_header, admin_header):
    criado = _criar(client, token_header)
    contato_id = criado["id"]
    uuid.UUID(contato_id)

    resp = client.get(f"/contato/{contato_id}", headers=token_header)
    assert resp.status_code == 200
    assert resp.json() == {"id": contato_id, **CONTATO}

    resp = client.delete(f"/contato/{contato_id}", headers=token_header)
    assert resp.status_code == 403

    resp = client.delete(f"/contato/{contato_id}", headers=admin_header)
    assert resp.status_code == 204

    resp = client.get(f"/contato/{contato_id}", headers=token_header)
    assert resp.status_code == 404


def test_criar_retorna_location(client, token_header):
    resp = client.post("/contato", json=CONTATO, headers=token_header)

    assert resp.status_code == 201
    assert resp.headers["location"].endswith(f"/contato/{resp.json()['id']}")


def test_listar_e_anonimo(client, token_header):
    _criar(client, token_header)
    _criar(client, token_header, {"nome": "Bruno", "telefone": "1133334444", "tipoContato": "C"})

    resp = client.get("/contato")

    assert resp.status_code == 200
    assert {c["nome"] for c in resp.json()} == {"Ana Silva", "Bruno"}


def test_rotas_autenticadas_sem_token(client):
    contato_id = uuid.uuid4()

    assert client.get(f"/contato/{contato_id}").status_code == 401
    assert client.post("/contato", json=CONTATO).status_code == 401
    assert client.put(f"/contato/{contato_id}", json=CONTATO).status_code == 401
    assert client.delete(f"/contato/{contato_id}").status_code == 401


def test_token_invalido(client):
    resp = client.get(f"/contato/{uuid.uuid4()}", headers={"Authorization": "Bearer mocktoken"})
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


def test_sem_token_rejeitado_antes_da_validacao(client):
    resp = client.post("/contato", json={"nome": "", "telefone": "", "tipoContato": ""})
    assert resp.status_code == 401


def test_criar_invalido(client, token_header):
    resp = client.post(
        "/contato",
        json={"nome": "a" * 201, "telefone": "1" * 15, "tipoContato": ""},
        headers=token_header,
    )

    assert resp.status_code == 400
    erros = resp.json()["detail"]["errors"]
    assert set(erros) == {"nome", "telefone", "tipoContato"}


def test_corpo_com_tipo_errado_vira_400(client, token_header):
    resp = client.post("/contato", json={"nome": 123, "telefone": "1", "tipoContato": "P"}, headers=token_header)

    assert resp.status_code == 400
    assert "nome" in resp.json()["detail"]["errors"]


def test_atualizar(client, token_header):
    contato_id = _criar(client, token_header)["id"]
    novo = {"nome": "Ana Souza", "telefone": "1133334444", "tipoContato": "C"}

    resp = client.put(f"/contato/{contato_id}", json=novo, headers=token_header)
    assert resp.status_code == 204

    resp = client.get(f"/contato/{contato_id}", headers=token_header)
    assert resp.json() == {"id": contato_id, **novo}


def test_atualizar_inexistente_e_invalido(client, token_header):
    resp = client.put(f"/contato/{uuid.uuid4()}", json=CONTATO, headers=token_header)
    assert resp.status_code == 404

    contato_id = _criar(client, token_header)["id"]
    resp = client.put(
        f"/contato/{contato_id}",
        json={**CONTATO, "telefone": "1" * 15},
        headers=token_header,
    )
    assert resp.status_code == 400
    assert "telefone" in resp.json()["detail"]["errors"]


def test_remover_inexistente(client, admin_header):
    resp = client.delete(f"/contato/{uuid.uuid4()}", headers=admin_header)
    assert resp.status_code == 404


def test_id_malformado(client, token_header):
    resp = client.get("/contato/nao-e-uuid", headers=token_header)
    assert resp.status_code == 400


def test_json_malformado_sem_token_e_401(client):
    cabecalho = {"Content-Type": "application/json"}
    contato_id = uuid.uuid4()

    assert client.post("/contato", content=b"{nao json", headers=cabecalho).status_code == 401
    assert client.put(f"/contato/{contato_id}", content=b"{nao json", headers=cabecalho).status_code == 401


def test_json_malformado_com_token_e_400(client, token_header):
    resp = client.post(
        "/contato",
        content=b"{nao json",
        headers={**token_header, "Content-Type": "application/json"},
    )

    assert resp.status_code == 400
    assert list(resp.json()["detail"]["errors"]) == ["corpo"]


def test_token_expirado_e_401(client, settings):
    usuario = Usuario(id="u-1", email="ana@exemplo.com", senha_hash="x")
    antigo = datetime.now(timezone.utc) - timedelta(hours=settings.JWT_EXPIRACAO_HORAS + 1)
    token = gerar_token(usuario, settings, agora=antigo).access_token

    resp = client.get(f"/contato/{uuid.uuid4()}", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401


def test_falha_do_armazenamento_na_leitura(client, contato_repo, token_header, monkeypatch):
    def falhar(*args, **kwargs):
        raise FalhaPersistencia("banco fora do ar")

    monkeypatch.setattr(contato_repo, "listar", falhar)
    monkeypatch.setattr(contato_repo, "buscar_por_id", falhar)

    resp = client.get("/contato")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Houve um problema ao acessar o armazenamento"

    resp = client.get(f"/contato/{uuid.uuid4()}", headers=token_header)
    assert resp.status_code == 400
