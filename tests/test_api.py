from __future__ import annotations

import base64
import io

from src.gestao_system.gestao_system.entities.store import Entity

PASTED = "EnNo\tName\tDateTime\n7\tJoao\t2025-01-02 08:00:00\n7\tJoao\t2025-01-02 17:00:00\n"


def test_health(client):
    assert client.get("/api/health").get_json() == {"success": True, "status": "ok"}


def test_login_and_me(client, auth_headers):
    resp = client.get("/api/auth/me", headers=auth_headers)

    assert resp.status_code == 200
    assert resp.get_json()["user"]["role"] == "admin"


def test_login_failure(client):
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "x"})

    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "error": "Usuário ou senha inválidos"}


def test_routes_require_token(client):
    assert client.post("/api/ponto/preview", json={"conteudo_colado": PASTED}).status_code == 401
    assert client.get("/api/errors").status_code == 401
    assert client.get("/api/cadastros/Cliente", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_error_capture_works_without_session(client, store):
    resp = client.post("/api/errors", json={"message": "Failed to fetch"}, headers={"User-Agent": "pytest"})

    assert resp.status_code == 200
    assert resp.get_json()["category"] == "network"
    (record,) = store.list(Entity.ERROR_LOG)
    assert record["user_agent"] == "pytest"


def test_error_capture_requires_message(client):
    resp = client.post("/api/errors", json={})

    assert resp.status_code == 400


def test_import_flow_preview_confirm_duplicate(client, auth_headers, store):
    store.create(Entity.FUNCIONARIO, {"nome": "Joao", "user_id_relogio": "7"})
    file_data = "data:text/plain;base64," + base64.b64encode(PASTED.encode("utf-8")).decode("ascii")

    preview = client.post("/api/ponto/preview", json={"file_data": file_data, "nome_arquivo": "AttendLog.txt"}, headers=auth_headers)
    body = preview.get_json()
    assert preview.status_code == 200
    assert body["stats"]["validos"] == 2

    payload = {"registros_normalizados": body["registros"], "arquivo_nome": "AttendLog.txt"}
    confirm = client.post("/api/ponto/confirmar", json=payload, headers=auth_headers)
    assert confirm.status_code == 200
    assert confirm.get_json()["total_inseridos"] == 2

    again = client.post("/api/ponto/confirmar", json=payload, headers=auth_headers)
    assert again.status_code == 409
    assert again.get_json()["error"] == "Arquivo duplicado"

    listing = client.get("/api/ponto/importacoes", headers=auth_headers).get_json()
    assert len(listing["importacoes"]) == 1


def test_preview_rejects_unknown_extension(client, auth_headers):
    resp = client.post("/api/ponto/preview", json={"file_data": "eA==", "nome_arquivo": "x.doc"}, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Formato não suportado. Use TXT, XLSX ou XML."


def test_direct_import_multipart(client, auth_headers):
    data = {"file": (io.BytesIO(PASTED.encode("utf-8")), "AttendLog.txt")}

    resp = client.post("/api/ponto/importar", data=data, headers=auth_headers, content_type="multipart/form-data")

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["ids_sem_mapeamento"] == ["7"]


def test_apurar_and_saldo(client, auth_headers):
    resp = client.post("/api/ponto/apurar", json={"funcionario_id": "f1", "mes_referencia": "2025-02"}, headers=auth_headers)
    assert resp.get_json()["total_dias"] == 28

    client.post("/api/banco-horas/recalcular", json={"funcionario_id": "f1", "mes_referencia": "2025-02"}, headers=auth_headers)
    saldo = client.get("/api/banco-horas/f1/saldo", headers=auth_headers).get_json()
    assert saldo["saldo_min"] == -20 * 480

    assert client.post("/api/ponto/apurar", json={}, headers=auth_headers).status_code == 400


def test_espelho_csv(client, auth_headers):
    client.post("/api/ponto/apurar", json={"funcionario_id": "f1", "mes_referencia": "2025-02"}, headers=auth_headers)

    resp = client.get("/api/relatorios/espelho?start=2025-02-01&end=2025-02-28&format=csv", headers=auth_headers)

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert resp.data.startswith(b"\xef\xbb\xbf")
    assert len(resp.data.decode("utf-8-sig").strip().splitlines()) == 29


def test_espelho_bad_date(client, auth_headers):
    resp = client.get("/api/relatorios/espelho?start=01/02/2025", headers=auth_headers)

    assert resp.status_code == 400


def test_export_table_and_pdf(client, auth_headers):
    resp = client.post("/api/exportar/tabela", json={"entityName": "Orcamento"}, headers=auth_headers)
    assert resp.status_code == 200
    assert 'filename="relatorio_orcamentos.xlsx"' in resp.headers["Content-Disposition"]

    bad = client.post("/api/exportar/tabela", json={"entityName": "Cliente"}, headers=auth_headers)
    assert bad.status_code == 400

    pdf = client.post("/api/exportar/pdf", json={"colunas": ["A"], "linhas": [["1"]], "orientation": "landscape"}, headers=auth_headers)
    assert pdf.status_code == 200
    assert pdf.mimetype == "application/pdf"


def test_unexpected_failure_is_logged_to_error_log(client, auth_headers, app, store, monkeypatch):
    container = app.extensions["gestao_container"]

    def explode(*args, **kwargs):
        raise RuntimeError("disco cheio")

    monkeypatch.setattr(container.table_export_service, "export", explode)

    resp = client.post("/api/exportar/tabela", json={"entityName": "Orcamento"}, headers=auth_headers)

    assert resp.status_code == 500
    assert resp.get_json()["error"] == "disco cheio"
    (record,) = store.list(Entity.ERROR_LOG)
    assert record["source"] == "function:exportarTabela"


def test_cadastros_crud(client, auth_headers):
    created = client.post("/api/cadastros/Cliente", json={"nome": "Ana", "telefone": "1199"}, headers=auth_headers)
    assert created.status_code == 201
    record_id = created.get_json()["registro"]["id"]

    updated = client.put(f"/api/cadastros/Cliente/{record_id}", json={"uf": "rj"}, headers=auth_headers)
    assert updated.get_json()["registro"]["uf"] == "RJ"

    listing = client.get("/api/cadastros/Cliente?nome=Ana", headers=auth_headers).get_json()
    assert len(listing["registros"]) == 1

    assert client.delete(f"/api/cadastros/Cliente/{record_id}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/cadastros/Cliente/{record_id}", headers=auth_headers).status_code == 404
    assert client.post("/api/cadastros/Cliente", json={"nome": "Sem telefone"}, headers=auth_headers).status_code == 400


def test_admin_manages_users(client, auth_headers):
    created = client.post("/api/usuarios", json={"full_name": "Bia", "username": "bia", "password": "segredo1"}, headers=auth_headers)
    assert created.status_code == 201

    token = client.post("/api/auth/login", json={"username": "bia", "password": "segredo1"}).get_json()["token"]
    forbidden = client.get("/api/usuarios", headers={"Authorization": f"Bearer {token}"})
    assert forbidden.status_code == 403


def test_user_with_unknown_role_gets_json_error(client, store):
    (admin,) = store.filter(Entity.USER, {"username": "admin"})
    token = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"}).get_json()["token"]
    store.update(Entity.USER, admin["id"], {"role": "superuser"})

    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 500
    assert resp.get_json()["success"] is False
    (record,) = store.list(Entity.ERROR_LOG)
    assert record["source"] == "api:auth"


def test_store_failure_during_token_check_is_logged(client, auth_headers, app, store, monkeypatch):
    container = app.extensions["gestao_container"]

    def broken(user_id):
        raise ConnectionError("MySQL indisponível")

    monkeypatch.setattr(container.users_repo, "get_by_id", broken)

    resp = client.get("/api/cadastros/Cliente", headers=auth_headers)

    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "error": "MySQL indisponível"}
    (record,) = store.list(Entity.ERROR_LOG)
    assert "ConnectionError" in record["stack"]
