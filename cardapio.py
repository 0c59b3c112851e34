from typing import Iterable, List

import schemas

TODAS = "all"
SEM_CATEGORIA = "Sem categoria"


def filtrar_produtos(produtos: Iterable[schemas.Produto], categoria: str = TODAS, busca: str = "") -> List[schemas.Produto]:
    """Filtra por categoria e por texto no nome ou na descrição, mantendo a ordem do catálogo."""
    termo = (busca or "").lower()
    resultado = []
    for produto in produtos:
        if categoria != TODAS and produto.categoria_id != categoria:
            continue
        if termo not in produto.nome.lower() and termo not in produto.descricao.lower():
            continue
        resultado.append(produto)
    return resultado


def nome_categoria(categorias: Iterable[schemas.Categoria], categoria_id: str) -> str:
    for categoria in categorias:
        if categoria.id == categoria_id:
            return categoria.nome
    return SEM_CATEGORIA


def montar_vitrine(categorias, produtos, categoria: str = TODAS, busca: str = "") -> List[schemas.ProdutoOut]:
    categorias = list(categorias)
    return [
        schemas.ProdutoOut(**p.model_dump(), categoria_nome=nome_categoria(categorias, p.categoria_id))
        for p in filtrar_produtos(produtos, categoria, busca)
    ]
