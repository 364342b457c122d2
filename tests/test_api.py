from academia.core.security import require_admin
from academia.main import app

CPF = "12345678901"
DOBRAS = {
    "triceps": 12,
    "subescapular": 15,
    "biceps": 6,
    "axilarMedia": 10,
    "suprailiaca": 14,
    "abdominal": 20,
    "coxa": 18,
}


def test_health(api):
    response = api.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_admin_token_required(api, identity):
    app.dependency_overrides.pop(require_admin)
    assert api.get("/api/clientes").status_code == 401

    uid = identity.create_account("staff@academia.com", "segredo123", "Staff")
    token = identity.issue_token(uid)
    headers = {"Authorization": f"Bearer {token}"}
    assert api.get("/api/clientes", headers=headers).status_code == 403

    identity.set_claims(uid, {"admin": True})
    response = api.get("/api/clientes", headers=headers)
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_verify_token(api, identity):
    uid = identity.create_account("staff@academia.com", "segredo123", "Staff")
    response = api.post("/api/auth/verify-token", json={"token": identity.issue_token(uid)})
    assert response.status_code == 200
    assert response.json()["data"] == {"uid": uid}
    assert api.post("/api/auth/verify-token", json={"token": "invalido"}).status_code == 401


def test_grant_admin_role(api, identity):
    uid = identity.create_account("staff@academia.com", "segredo123", "Staff")
    response = api.post("/api/auth/roles/admin", json={"uid": uid})
    assert response.status_code == 200
    assert identity.get_account(uid).claims == {"admin": True}
    assert api.post("/api/auth/roles/admin", json={"uid": "nao-existe"}).status_code == 404


def test_client_lifecycle(api, client_payload):
    response = api.post("/api/clientes", json=client_payload())
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["clienteId"] == CPF
    assert all(step["status"] == "done" for step in body["data"]["etapas"])

    duplicate = api.post("/api/clientes", json=client_payload())
    assert duplicate.status_code == 409
    assert duplicate.json() == {"success": False, "message": "CPF ja esta cadastrado no sistema.", "error": "conflict"}

    listed = api.get("/api/clientes").json()
    assert listed["message"] == "1 cliente encontrado"
    assert listed["data"][0]["cpf"] == CPF

    toggled = api.put(f"/api/clientes/{CPF}", json={"tipo": "status", "ativo": False})
    assert toggled.status_code == 200
    assert toggled.json()["message"] == "Cliente desativado com sucesso!"

    removed = api.delete(f"/api/clientes/{CPF}")
    assert removed.status_code == 200
    assert api.get(f"/api/clientes/{CPF}").status_code == 404


def test_invalid_client_payload(api, client_payload):
    response = api.post("/api/clientes", json=client_payload(cpf="123"))
    assert response.status_code == 400
    assert response.json()["error"] == "validation"


def test_reconciliation_and_payment(api, client_payload):
    api.post("/api/clientes", json=client_payload())

    response = api.post("/api/financas/processar", json={"mesAno": "02-2025"})
    assert response.status_code == 200
    assert response.json()["data"]["processados"] == 1

    receitas = api.get("/api/financas/receitas", params={"mesAno": "02/2025"}).json()["data"]
    assert [item["id"] for item in receitas] == [CPF]
    assert receitas[0]["dataVencimento"] == "2025-02-20"

    url = f"/api/financas/receitas/02-2025/{CPF}/pagamento"
    assert api.post(url, json={"dataPagamento": "2025-02-20"}).status_code == 200
    second = api.post(url, json={"dataPagamento": "2025-02-25"})
    assert second.status_code == 409
    assert second.json()["error"] == "conflict"

    rerun = api.post("/api/financas/processar", json={"mesAno": "02-2025"}).json()["data"]
    assert rerun["gravados"] == 0


def test_receivable_with_malformed_cpf(api):
    response = api.post(
        "/api/financas/receitas",
        json={
            "nome": "Maria Souza",
            "cpf": "123/456",
            "mesAno": "03-2025",
            "plano": "Mensal",
            "valorPlano": 90,
            "dataVencimento": "2025-03-10",
        },
    )
    assert response.status_code == 400
    assert response.json()["error"] == "validation"


def test_invalid_period(api):
    response = api.get("/api/financas/receitas", params={"mesAno": "2025-02"})
    assert response.status_code == 400


def test_expenses_and_balance(api):
    created = api.post(
        "/api/financas/despesas",
        json={"descricao": "Aluguel", "valor": 1500, "dataVencimento": "2025-03-05", "categoria": "Fixa"},
    )
    assert created.status_code == 201
    despesa_id = created.json()["data"]["id"]

    paid = api.post(f"/api/financas/despesas/03-2025/{despesa_id}/pagamento", json={"dataPagamento": "2025-03-05"})
    assert paid.status_code == 200

    balance = api.get("/api/financas/balanco", params={"mesAno": "03-2025"}).json()["data"]
    assert balance["despesas"]["pago"] == 1500.0
    assert balance["saldo"] == -1500.0

    export = api.get("/api/financas/balanco/export", params={"mesAno": "03-2025"})
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("application/vnd.openxmlformats")
    assert "balanco_03-2025.xlsx" in export.headers["content-disposition"]

    assert api.delete(f"/api/financas/despesas/03-2025/{despesa_id}").status_code == 200
    assert api.delete(f"/api/financas/despesas/03-2025/{despesa_id}").status_code == 404


def test_plans(api):
    created = api.post("/api/planos", json={"nome": "Mensal", "valor": 90, "periodo": 1})
    assert created.status_code == 201
    plano_id = created.json()["data"]["id"]
    assert api.post("/api/planos", json={"nome": "Gratis", "valor": 0, "periodo": 1}).status_code == 400
    assert [p["nome"] for p in api.get("/api/planos").json()["data"]] == ["Mensal"]
    assert api.delete(f"/api/planos/{plano_id}").status_code == 200
    assert api.delete(f"/api/planos/{plano_id}").status_code == 404


def test_subscriptions(api):
    payload = {
        "mesAno": "03-2025",
        "clienteId": CPF,
        "clienteNome": "Maria Souza",
        "planoId": "plano-1",
        "planoNome": "Mensal",
        "valorPlano": 90,
        "periodoPlano": 1,
        "dataInicio": "2025-03-01",
        "dataFim": "2025-03-31",
    }
    created = api.post("/api/assinaturas", json=payload)
    assert created.status_code == 201
    assert api.post("/api/assinaturas", json=payload).status_code == 409

    assinatura_id = created.json()["data"]["id"]
    patched = api.patch(f"/api/assinaturas/03-2025/{assinatura_id}", json={"status": "cancelada"})
    assert patched.json()["data"]["status"] == "cancelada"
    assert api.post("/api/assinaturas", json=payload).status_code == 201
    assert len(api.get("/api/assinaturas", params={"mesAno": "03-2025"}).json()["data"]) == 2
    assert api.delete(f"/api/assinaturas/03-2025/{assinatura_id}").status_code == 200


def test_assessments(api):
    created = api.post(
        f"/api/clientes/{CPF}/avaliacoes",
        json={"peso": 80, "altura": 180, "sexo": "masculino", "idade": 30, "dobras": DOBRAS},
    )
    assert created.status_code == 201
    resultados = created.json()["data"]["resultados"]
    assert resultados["imc"] == 24.7
    assert 0 < resultados["percentualGordura"] < 30

    listed = api.get(f"/api/clientes/{CPF}/avaliacoes").json()["data"]
    assert listed["total"] == 1
    assert listed["ultimaAvaliacao"]["dobras"]["soma"] == 95.0

    avaliacao_id = created.json()["data"]["avaliacaoId"]
    assert api.delete(f"/api/clientes/{CPF}/avaliacoes/{avaliacao_id}").status_code == 200


def test_settings(api):
    empty = api.get("/api/configuracoes").json()
    assert empty["data"]["nomeEstabelecimento"] == ""

    bad = api.put("/api/configuracoes", json={"nomeEstabelecimento": "Academia Forte", "email": "invalido"})
    assert bad.status_code == 400

    saved = api.put(
        "/api/configuracoes",
        json={"nomeEstabelecimento": "Academia Forte", "email": "contato@forte.com", "cidade": "Recife"},
    )
    assert saved.status_code == 200
    assert api.get("/api/configuracoes").json()["data"]["cidade"] == "Recife"
