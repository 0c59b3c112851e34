import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["WHATSAPP_NUMERO"] = "5511999999999"
os.environ["NOME_LOJA"] = "KING BURGUER"
os.environ["ADMIN_USER"] = "admin@admin.com"
os.environ["ADMIN_PASSWORD"] = "123456"
os.environ["LIMITE_OBSERVACAO"] = "200"

import pytest
from fastapi.testclient import TestClient

import crud
import models  # noqa: F401  registra a tabela no Base
from database import Base, SessionLocal, engine
from main import app
from storage import Armazenamento


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def arm(db):
    return Armazenamento(db)


@pytest.fixture
def catalogo(arm):
    crud.inicializar_catalogo(arm)
    return arm


@pytest.fixture
def client(db):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin(client):
    resp = client.post("/admin/login", data={"username": "admin@admin.com", "password": "123456"})
    assert resp.status_code == 200, resp.text
    return client
