from urllib.parse import unquote

from fastapi.testclient import TestClient

import models
from main import app
from storage import CHAVE_CARRINHO, CHAVE_CATEGORIAS


def test_catalogo_inicial(client):
    resp = client.get("/api/categorias")
    assert resp.status_code == 200, resp.text
    assert len(resp.json()) == 7

    resp = client.get("/api/produtos")
    assert [p["id"] for p in resp.json()] == ["101", "102", "103", "104", "105", "106"]
    assert resp.json()[0]["categoria_nome"] == "Hambúrgueres"


def test_produtos_filtrados(client):
    resp = client.get("/api/produtos", params={"categoria": "1", "busca": "baco"})
    assert [p["nome"] for p in resp.json()] == ["X-Bacon Supremo"]


def test_contato(client):
    resp = client.get("/api/contato")
    assert resp.json()["whatsapp_display"] == "+55 (11) 99999-9999"


def test_fluxo_do_carrinho_ate_o_pedido(client):
    client.post("/api/carrinho/itens", json={"produto_id": "102"})
    resp = client.post("/api/carrinho/itens", json={"produto_id": "102"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["contagem"] == 2
    assert resp.json()["total"] == "49.00"

    resp = client.put("/api/carrinho/itens/102/observacao", json={"texto": "sem cebola"})
    assert resp.json()["itens"][0]["observacao"] == "sem cebola"

    resp = client.post("/api/pedido", json={"nome_cliente": "Ana", "local": "Mesa 4", "forma_pagamento": "cash"})
    assert resp.status_code == 200, resp.text
    pedido = resp.json()
    assert "2x Smash Salad" in pedido["mensagem"]
    assert "*Pagamento:* Dinheiro" in pedido["mensagem"]
    assert pedido["url"].startswith("https://wa.me/5511999999999?text=")
    assert unquote(pedido["url"].split("?text=", 1)[1]) == pedido["mensagem"]


def test_pedido_sem_nome_rejeitado(client):
    client.post("/api/carrinho/itens", json={"produto_id": "101"})
    resp = client.post("/api/pedido", json={"nome_cliente": " ", "local": "Mesa 1"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Por favor, informe seu nome."
    assert client.get("/api/carrinho").json()["contagem"] == 1


def test_pedido_com_carrinho_vazio(client):
    resp = client.post("/api/pedido", json={"nome_cliente": "Ana", "local": "Mesa 1"})
    assert resp.status_code == 400


def test_quantidade_e_remocao(client):
    client.post("/api/carrinho/itens", json={"produto_id": "104"})
    resp = client.patch("/api/carrinho/itens/104/quantidade", json={"delta": 2})
    assert resp.json()["contagem"] == 3
    resp = client.patch("/api/carrinho/itens/104/quantidade", json={"delta": -3})
    assert resp.json()["itens"] == []

    client.post("/api/carrinho/itens", json={"produto_id": "104"})
    resp = client.delete("/api/carrinho/itens/104")
    assert resp.json()["itens"] == []


def test_limpar_carrinho(client):
    client.post("/api/carrinho/itens", json={"produto_id": "103"})
    resp = client.delete("/api/carrinho")
    assert resp.json() == {"itens": [], "total": "0", "contagem": 0}


def test_produto_inexistente(client):
    resp = client.post("/api/carrinho/itens", json={"produto_id": "999"})
    assert resp.status_code == 404


def test_carrinho_corrompido_retorna_503(client, arm):
    arm.gravar(CHAVE_CARRINHO, "isto não é um carrinho")
    resp = client.get("/api/carrinho")
    assert resp.status_code == 503
    assert CHAVE_CARRINHO in resp.json()["detail"]


# ----- Admin -----

def test_admin_exige_login(client):
    resp = client.post("/admin/categorias", json={"nome": "Bebidas"})
    assert resp.status_code == 401


def test_login_invalido(client):
    resp = client.post("/admin/login", data={"username": "admin@admin.com", "password": "errada"})
    assert resp.status_code == 401
    assert client.get("/admin/sessao").json() == {"autenticado": False}


def test_login_e_logout(admin):
    assert admin.get("/admin/sessao").json() == {"autenticado": True}
    admin.post("/admin/logout")
    assert admin.get("/admin/sessao").json() == {"autenticado": False}
    assert admin.post("/admin/categorias", json={"nome": "Bebidas"}).status_code == 401


def test_admin_categorias(admin):
    resp = admin.post("/admin/categorias", json={"nome": "Bebidas Quentes", "slug": "ignorado"})
    assert resp.status_code == 201, resp.text
    categoria = resp.json()
    assert categoria["slug"] == "bebidas-quentes"

    resp = admin.put(f"/admin/categorias/{categoria['id']}", json={"nome": "Cafés"})
    assert resp.json()["slug"] == "cafés"
    assert admin.get("/api/categorias").json()[-1]["nome"] == "Cafés"

    resp = admin.put("/admin/categorias/nao-existe", json={"nome": "Fantasma"})
    assert resp.status_code == 200
    assert resp.json() is None
    assert len(admin.get("/api/categorias").json()) == 8

    resp = admin.post("/admin/categorias", json={"nome": ""})
    assert resp.status_code == 400


def test_excluir_exige_confirmacao(admin):
    resp = admin.delete("/admin/categorias/1")
    assert resp.status_code == 400
    assert "1" in [c["id"] for c in admin.get("/api/categorias").json()]

    resp = admin.delete("/admin/categorias/1", params={"confirmar": "true"})
    assert resp.status_code == 204
    assert "1" not in [c["id"] for c in admin.get("/api/categorias").json()]

    produtos = admin.get("/api/produtos", params={"categoria": "1"}).json()
    assert {p["categoria_nome"] for p in produtos} == {"Sem categoria"}


def test_admin_produtos(admin):
    resp = admin.post("/admin/produtos", json={"nome": "Batata Frita", "preco": "18.5"})
    assert resp.status_code == 201, resp.text
    produto = resp.json()
    assert produto["categoria_id"] == "1"
    assert produto["disponivel"] is True

    resp = admin.post("/admin/produtos", json={"nome": "Sem preço"})
    assert resp.status_code == 400

    resp = admin.delete(f"/admin/produtos/{produto['id']}", params={"confirmar": "true"})
    assert resp.status_code == 204
    assert produto["id"] not in [p["id"] for p in admin.get("/api/produtos").json()]


def test_produto_indisponivel_nao_entra_no_carrinho(admin):
    resp = admin.put("/admin/produtos/105", json={
        "nome": "Coca-Cola Lata", "descricao": "350ml gelada.", "preco": "6.00",
        "categoria_id": "6", "disponivel": False,
    })
    assert resp.json()["disponivel"] is False
    resp = admin.post("/api/carrinho/itens", json={"produto_id": "105"})
    assert resp.status_code == 409


def test_edicao_nao_altera_item_no_carrinho(admin):
    admin.post("/api/carrinho/itens", json={"produto_id": "103"})
    admin.put("/admin/produtos/103", json={"nome": "Pizza Calabresa", "preco": "60.00", "categoria_id": "2"})
    carrinho = admin.get("/api/carrinho").json()
    assert carrinho["itens"][0]["preco"] == "45.00"


def test_restaurar_catalogo(admin):
    admin.delete("/admin/produtos/101", params={"confirmar": "true"})
    assert admin.post("/admin/restaurar").status_code == 400
    assert admin.post("/admin/restaurar", params={"confirmar": "true"}).status_code == 204
    assert len(admin.get("/api/produtos").json()) == 6


def test_limpar_descarta_carrinho_corrompido(client, arm):
    arm.gravar(CHAVE_CARRINHO, {"quebrado": True})
    assert client.delete("/api/carrinho").status_code == 200
    assert client.get("/api/carrinho").json()["itens"] == []


def test_app_sobe_com_catalogo_corrompido_e_admin_restaura(db):
    db.add(models.Documento(chave=CHAVE_CATEGORIAS, conteudo="[{quebrado"))
    db.commit()
    with TestClient(app) as c:
        assert c.get("/api/categorias").status_code == 503
        resp = c.post("/admin/login", data={"username": "admin@admin.com", "password": "123456"})
        assert resp.status_code == 200, resp.text
        assert c.post("/admin/restaurar", params={"confirmar": "true"}).status_code == 204
        assert len(c.get("/api/categorias").json()) == 7


def test_flag_admin_vale_para_qualquer_cliente(admin):
    outro = TestClient(app)
    assert outro.get("/admin/sessao").json() == {"autenticado": True}
    admin.post("/admin/logout")
    assert outro.post("/admin/categorias", json={"nome": "Bebidas"}).status_code == 401
