import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Request, Depends, HTTPException, Form, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

import auth, cardapio, crud, schemas
from carrinho import Carrinho
from config import CORS_ORIGINS, LOG_LEVEL, NOME_LOJA, WHATSAPP_NUMERO
from database import SessionLocal, init_db
from exceptions import ErroArmazenamento, ErroValidacao
from storage import Armazenamento
from utils import gerar_link_whatsapp, montar_mensagem_pedido, telefone_visivel

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


def init_db_and_seed():
    """Cria as tabelas e grava o catálogo inicial se o armazenamento estiver vazio."""
    init_db()
    db = SessionLocal()
    try:
        crud.inicializar_catalogo(Armazenamento(db))
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db_and_seed()
    yield


app = FastAPI(title="Cardápio King Burguer", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ErroValidacao)
async def erro_validacao_handler(request: Request, exc: ErroValidacao):
    return JSONResponse({"detail": exc.message}, status_code=status.HTTP_400_BAD_REQUEST)


@app.exception_handler(ErroArmazenamento)
async def erro_armazenamento_handler(request: Request, exc: ErroArmazenamento):
    logger.error("Erro de armazenamento em %s: %s", request.url.path, exc.message)
    return JSONResponse({"detail": exc.message}, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)


# DB dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_armazenamento(db: Session = Depends(get_db)) -> Armazenamento:
    return Armazenamento(db)

def get_carrinho(arm: Armazenamento = Depends(get_armazenamento)) -> Carrinho:
    return Carrinho(arm)

def carrinho_out(carrinho: Carrinho) -> schemas.CarrinhoOut:
    return schemas.CarrinhoOut(itens=carrinho.itens, total=carrinho.total(), contagem=carrinho.contagem())

def exigir_confirmacao(confirmar: bool):
    if not confirmar:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Confirme a operação com confirmar=true")


# ----- Cardápio público -----

@app.get("/api/categorias", response_model=List[schemas.Categoria])
def api_categorias(arm: Armazenamento = Depends(get_armazenamento)):
    return crud.get_categorias(arm)

@app.get("/api/produtos", response_model=List[schemas.ProdutoOut])
def api_produtos(categoria: str = cardapio.TODAS, busca: str = "", arm: Armazenamento = Depends(get_armazenamento)):
    return cardapio.montar_vitrine(crud.get_categorias(arm), crud.get_produtos(arm), categoria, busca)

@app.get("/api/contato")
def api_contato():
    return {
        "loja": NOME_LOJA,
        "whatsapp": WHATSAPP_NUMERO,
        "whatsapp_display": telefone_visivel(),
        "whatsapp_link": f"https://wa.me/{WHATSAPP_NUMERO}" if WHATSAPP_NUMERO else '',
    }


# ----- Carrinho -----

@app.get("/api/carrinho", response_model=schemas.CarrinhoOut)
def api_carrinho(carrinho: Carrinho = Depends(get_carrinho)):
    return carrinho_out(carrinho)

@app.post("/api/carrinho/itens", response_model=schemas.CarrinhoOut)
def api_carrinho_adicionar(dados: schemas.AdicionarItem, arm: Armazenamento = Depends(get_armazenamento), carrinho: Carrinho = Depends(get_carrinho)):
    produto = crud.get_produto(arm, dados.produto_id)
    if not produto:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Produto não encontrado")
    if not produto.disponivel:
        raise HTTPException(status.HTTP_409_CONFLICT, "Produto indisponível no momento")
    carrinho.adicionar(produto)
    return carrinho_out(carrinho)

@app.delete("/api/carrinho/itens/{produto_id}", response_model=schemas.CarrinhoOut)
def api_carrinho_remover(produto_id: str, carrinho: Carrinho = Depends(get_carrinho)):
    carrinho.remover(produto_id)
    return carrinho_out(carrinho)

@app.patch("/api/carrinho/itens/{produto_id}/quantidade", response_model=schemas.CarrinhoOut)
def api_carrinho_quantidade(produto_id: str, dados: schemas.AlterarQuantidade, carrinho: Carrinho = Depends(get_carrinho)):
    carrinho.alterar_quantidade(produto_id, dados.delta)
    return carrinho_out(carrinho)

@app.put("/api/carrinho/itens/{produto_id}/observacao", response_model=schemas.CarrinhoOut)
def api_carrinho_observacao(produto_id: str, dados: schemas.DefinirObservacao, carrinho: Carrinho = Depends(get_carrinho)):
    carrinho.definir_observacao(produto_id, dados.texto)
    return carrinho_out(carrinho)

@app.delete("/api/carrinho", response_model=schemas.CarrinhoOut)
def api_carrinho_limpar(arm: Armazenamento = Depends(get_armazenamento)):
    # Não lê o carrinho gravado: também serve para descartar um documento corrompido
    carrinho = Carrinho(arm, carregar=False)
    carrinho.limpar()
    return carrinho_out(carrinho)

@app.post("/api/pedido", response_model=schemas.PedidoOut)
def api_pedido(dados: schemas.PedidoCheckout, carrinho: Carrinho = Depends(get_carrinho)):
    if carrinho.is_empty():
        raise ErroValidacao("Seu carrinho está vazio.")
    mensagem = montar_mensagem_pedido(dados.nome_cliente, dados.local, dados.forma_pagamento, carrinho.itens)
    logger.info("Pedido montado: %s itens, total %s", carrinho.contagem(), carrinho.total())
    return schemas.PedidoOut(mensagem=mensagem, url=gerar_link_whatsapp(mensagem))


# ----- Admin -----

def verify_admin(arm: Armazenamento = Depends(get_armazenamento)):
    """Libera as rotas de admin enquanto a flag gravada existir.

    A flag fica no armazenamento único da loja, não em um cookie: depois de um
    login, qualquer cliente que acesse a API é tratado como admin até o logout.
    """
    if not auth.esta_autenticado(arm):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Unauthorized")
    return True

@app.post("/admin/login")
def admin_login(username: str = Form(...), password: str = Form(...), arm: Armazenamento = Depends(get_armazenamento)):
    if not auth.login(arm, username, password):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Credenciais inválidas. Tente novamente.")
    return {"autenticado": True}

@app.post("/admin/logout")
def admin_logout(arm: Armazenamento = Depends(get_armazenamento)):
    auth.logout(arm)
    return {"autenticado": False}

@app.get("/admin/sessao")
def admin_sessao(arm: Armazenamento = Depends(get_armazenamento)):
    return {"autenticado": auth.esta_autenticado(arm)}

@app.post("/admin/categorias", response_model=schemas.Categoria, status_code=status.HTTP_201_CREATED)
def admin_criar_categoria(rascunho: schemas.CategoriaRascunho, arm: Armazenamento = Depends(get_armazenamento), ok: bool = Depends(verify_admin)):
    rascunho.id = None
    return crud.salvar_categoria(arm, rascunho.para_categoria())

@app.put("/admin/categorias/{categoria_id}", response_model=Optional[schemas.Categoria])
def admin_atualizar_categoria(categoria_id: str, rascunho: schemas.CategoriaRascunho, arm: Armazenamento = Depends(get_armazenamento), ok: bool = Depends(verify_admin)):
    rascunho.id = categoria_id
    categoria = rascunho.para_categoria()
    # id desconhecido: nada muda
    if not any(c.id == categoria_id for c in crud.get_categorias(arm)):
        return None
    return crud.salvar_categoria(arm, categoria)

@app.delete("/admin/categorias/{categoria_id}", status_code=status.HTTP_204_NO_CONTENT)
def admin_excluir_categoria(categoria_id: str, confirmar: bool = False, arm: Armazenamento = Depends(get_armazenamento), ok: bool = Depends(verify_admin)):
    exigir_confirmacao(confirmar)
    crud.delete_categoria(arm, categoria_id)

@app.post("/admin/produtos", response_model=schemas.Produto, status_code=status.HTTP_201_CREATED)
def admin_criar_produto(rascunho: schemas.ProdutoRascunho, arm: Armazenamento = Depends(get_armazenamento), ok: bool = Depends(verify_admin)):
    rascunho.id = None
    return crud.salvar_produto(arm, rascunho.para_produto(categoria_padrao_de(arm)))

@app.put("/admin/produtos/{produto_id}", response_model=Optional[schemas.Produto])
def admin_atualizar_produto(produto_id: str, rascunho: schemas.ProdutoRascunho, arm: Armazenamento = Depends(get_armazenamento), ok: bool = Depends(verify_admin)):
    rascunho.id = produto_id
    produto = rascunho.para_produto(categoria_padrao_de(arm))
    if crud.get_produto(arm, produto_id) is None:
        return None
    return crud.salvar_produto(arm, produto)

@app.delete("/admin/produtos/{produto_id}", status_code=status.HTTP_204_NO_CONTENT)
def admin_excluir_produto(produto_id: str, confirmar: bool = False, arm: Armazenamento = Depends(get_armazenamento), ok: bool = Depends(verify_admin)):
    exigir_confirmacao(confirmar)
    crud.delete_produto(arm, produto_id)

@app.post("/admin/restaurar", status_code=status.HTTP_204_NO_CONTENT)
def admin_restaurar(confirmar: bool = False, arm: Armazenamento = Depends(get_armazenamento), ok: bool = Depends(verify_admin)):
    exigir_confirmacao(confirmar)
    crud.restaurar_catalogo(arm)

def categoria_padrao_de(arm: Armazenamento) -> str:
    categorias = crud.get_categorias(arm)
    return categorias[0].id if categorias else ""
