import logging
from decimal import Decimal
from typing import List

import schemas
from storage import Armazenamento, CHAVE_CATEGORIAS, CHAVE_PRODUTOS

logger = logging.getLogger(__name__)

CATEGORIAS_INICIAIS = [
    schemas.Categoria(id="1", nome="Hambúrgueres", slug="hamburgueres"),
    schemas.Categoria(id="2", nome="Pizzas", slug="pizzas"),
    schemas.Categoria(id="3", nome="Salgados", slug="salgados"),
    schemas.Categoria(id="4", nome="Macarrão", slug="macarrao"),
    schemas.Categoria(id="5", nome="Sucos", slug="sucos"),
    schemas.Categoria(id="6", nome="Refrigerantes", slug="refrigerantes"),
    schemas.Categoria(id="7", nome="Cervejas", slug="cervejas"),
]

PRODUTOS_INICIAIS = [
    schemas.Produto(
        id="101",
        nome="X-Bacon Supremo",
        descricao="Pão brioche, 2 blends de 150g, muito bacon crocante, queijo cheddar e maionese da casa.",
        preco=Decimal("32.90"),
        imagem="https://picsum.photos/400/300?random=1",
        categoria_id="1",
    ),
    schemas.Produto(
        id="102",
        nome="Smash Salad",
        descricao="Pão de batata, blend de 100g, alface americana, tomate, cebola roxa e queijo prato.",
        preco=Decimal("24.50"),
        imagem="https://picsum.photos/400/300?random=2",
        categoria_id="1",
    ),
    schemas.Produto(
        id="103",
        nome="Pizza Calabresa",
        descricao="Massa fina, molho de tomate, mussarela, calabresa fatiada e cebola.",
        preco=Decimal("45.00"),
        imagem="https://picsum.photos/400/300?random=3",
        categoria_id="2",
    ),
    schemas.Produto(
        id="104",
        nome="Suco de Laranja Natural",
        descricao="500ml de suco espremido na hora. Sem açúcar.",
        preco=Decimal("12.00"),
        imagem="https://picsum.photos/400/300?random=4",
        categoria_id="5",
    ),
    schemas.Produto(
        id="105",
        nome="Coca-Cola Lata",
        descricao="350ml gelada.",
        preco=Decimal("6.00"),
        imagem="https://picsum.photos/400/300?random=5",
        categoria_id="6",
    ),
    schemas.Produto(
        id="106",
        nome="Heineken Long Neck",
        descricao="330ml. Produto para maiores de 18 anos.",
        preco=Decimal("14.00"),
        imagem="https://picsum.photos/400/300?random=6",
        categoria_id="7",
    ),
]


def inicializar_catalogo(arm: Armazenamento):
    """Grava os dados iniciais só nas chaves que ainda não existem."""
    if not arm.existe(CHAVE_CATEGORIAS):
        arm.gravar_lista(CHAVE_CATEGORIAS, CATEGORIAS_INICIAIS)
        logger.info("Categorias iniciais gravadas")
    if not arm.existe(CHAVE_PRODUTOS):
        arm.gravar_lista(CHAVE_PRODUTOS, PRODUTOS_INICIAIS)
        logger.info("Produtos iniciais gravados")


def restaurar_catalogo(arm: Armazenamento):
    arm.gravar_lista(CHAVE_CATEGORIAS, CATEGORIAS_INICIAIS)
    arm.gravar_lista(CHAVE_PRODUTOS, PRODUTOS_INICIAIS)
    logger.info("Catálogo restaurado para os dados iniciais")


def get_categorias(arm: Armazenamento) -> List[schemas.Categoria]:
    return arm.ler_lista(CHAVE_CATEGORIAS, schemas.Categoria) or []


def get_produtos(arm: Armazenamento) -> List[schemas.Produto]:
    return arm.ler_lista(CHAVE_PRODUTOS, schemas.Produto) or []


def get_produto(arm: Armazenamento, produto_id: str):
    return next((p for p in get_produtos(arm) if p.id == produto_id), None)


def salvar_categoria(arm: Armazenamento, categoria: schemas.Categoria) -> schemas.Categoria:
    # O slug vem sempre do nome, nunca do que foi enviado
    categoria = categoria.model_copy(update={"slug": schemas.gerar_slug(categoria.nome)})
    categorias = get_categorias(arm)
    for i, existente in enumerate(categorias):
        if existente.id == categoria.id:
            categorias[i] = categoria
            break
    else:
        categorias.append(categoria)
    arm.gravar_lista(CHAVE_CATEGORIAS, categorias)
    logger.info("Categoria salva: %s (%s)", categoria.nome, categoria.id)
    return categoria


def salvar_produto(arm: Armazenamento, produto: schemas.Produto) -> schemas.Produto:
    produtos = get_produtos(arm)
    for i, existente in enumerate(produtos):
        if existente.id == produto.id:
            produtos[i] = produto
            break
    else:
        produtos.append(produto)
    arm.gravar_lista(CHAVE_PRODUTOS, produtos)
    logger.info("Produto salvo: %s (%s)", produto.nome, produto.id)
    return produto


def delete_categoria(arm: Armazenamento, categoria_id: str):
    # Produtos da categoria ficam com categoria_id órfão
    categorias = get_categorias(arm)
    restantes = [c for c in categorias if c.id != categoria_id]
    arm.gravar_lista(CHAVE_CATEGORIAS, restantes)
    if len(restantes) != len(categorias):
        logger.info("Categoria excluída: %s", categoria_id)


def delete_produto(arm: Armazenamento, produto_id: str):
    produtos = get_produtos(arm)
    restantes = [p for p in produtos if p.id != produto_id]
    arm.gravar_lista(CHAVE_PRODUTOS, restantes)
    if len(restantes) != len(produtos):
        logger.info("Produto excluído: %s", produto_id)
