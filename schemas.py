import re
import uuid
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from exceptions import ErroValidacao

IMAGEM_PADRAO = "https://picsum.photos/400/300"


def gerar_slug(nome: str) -> str:
    """'Sucos Naturais' -> 'sucos-naturais'"""
    return re.sub(r"\s+", "-", nome.lower())


def novo_id() -> str:
    return str(uuid.uuid4())


class Categoria(BaseModel):
    id: str
    nome: str
    slug: str


class Produto(BaseModel):
    id: str
    nome: str
    descricao: str = ""
    preco: Decimal = Field(ge=0)
    imagem: str = IMAGEM_PADRAO
    categoria_id: str = ""
    disponivel: bool = True


class ProdutoOut(Produto):
    categoria_nome: str


class ItemCarrinho(Produto):
    """Cópia do produto no momento em que entrou no carrinho."""
    quantidade: int = Field(ge=1)
    observacao: Optional[str] = None

    @property
    def subtotal(self) -> Decimal:
        return self.preco * self.quantidade


# ----- Rascunhos (formulários do admin) -----

class CategoriaRascunho(BaseModel):
    id: Optional[str] = None
    nome: Optional[str] = None

    def para_categoria(self) -> Categoria:
        if not self.nome or not self.nome.strip():
            raise ErroValidacao("Informe o nome da categoria.")
        return Categoria(id=self.id or novo_id(), nome=self.nome, slug=gerar_slug(self.nome))


class ProdutoRascunho(BaseModel):
    id: Optional[str] = None
    nome: Optional[str] = None
    descricao: Optional[str] = None
    preco: Optional[Decimal] = None
    imagem: Optional[str] = None
    categoria_id: Optional[str] = None
    disponivel: Optional[bool] = None

    def para_produto(self, categoria_padrao: str = "") -> Produto:
        """Converte o formulário em Produto, completando os campos opcionais.

        Nome e preço são obrigatórios; sem categoria escolhida usa
        ``categoria_padrao`` (normalmente a primeira cadastrada).
        """
        if not self.nome or not self.nome.strip():
            raise ErroValidacao("Informe o nome do produto.")
        if self.preco is None:
            raise ErroValidacao("Informe o preço do produto.")
        if self.preco < 0:
            raise ErroValidacao("O preço não pode ser negativo.")
        if self.preco != self.preco.quantize(Decimal("0.01")):
            raise ErroValidacao("O preço aceita no máximo duas casas decimais.")
        return Produto(
            id=self.id or novo_id(),
            nome=self.nome,
            descricao=self.descricao or "",
            preco=self.preco,
            imagem=self.imagem or IMAGEM_PADRAO,
            categoria_id=self.categoria_id or categoria_padrao,
            disponivel=True if self.disponivel is None else self.disponivel,
        )


# ----- Carrinho / pedido -----

class FormaPagamento(str, Enum):
    PIX = "pix"
    CARTAO = "card"
    DINHEIRO = "cash"

    @property
    def rotulo(self) -> str:
        return {"pix": "PIX", "card": "Cartão", "cash": "Dinheiro"}[self.value]


class AdicionarItem(BaseModel):
    produto_id: str


class AlterarQuantidade(BaseModel):
    delta: int


class DefinirObservacao(BaseModel):
    texto: str = ""


class CarrinhoOut(BaseModel):
    itens: List[ItemCarrinho]
    total: Decimal
    contagem: int


class PedidoCheckout(BaseModel):
    nome_cliente: str = ""
    local: str = ""
    forma_pagamento: FormaPagamento = FormaPagamento.PIX


class PedidoOut(BaseModel):
    mensagem: str
    url: str
