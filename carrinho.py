import logging
from decimal import Decimal
from typing import List, Optional

from config import LIMITE_OBSERVACAO
from schemas import ItemCarrinho, Produto
from storage import Armazenamento, CHAVE_CARRINHO

logger = logging.getLogger(__name__)


class Carrinho:
    """
    Carrinho de compras persistido no armazenamento local.

    Cada produto aparece no máximo uma vez. Nome, preço e imagem são copiados
    do produto no primeiro ``adicionar`` e não acompanham edições posteriores
    do catálogo. Toda alteração grava o carrinho inteiro antes de retornar.
    """

    def __init__(self, arm: Armazenamento, limite_observacao: int = LIMITE_OBSERVACAO, carregar: bool = True):
        self.arm = arm
        self.limite_observacao = limite_observacao
        self.itens: List[ItemCarrinho] = []
        if carregar:
            self.itens = arm.ler_lista(CHAVE_CARRINHO, ItemCarrinho) or []

    # --- Persistência ---

    def _salvar(self):
        self.arm.gravar_lista(CHAVE_CARRINHO, self.itens)

    def get_item(self, produto_id: str) -> Optional[ItemCarrinho]:
        return next((item for item in self.itens if item.id == produto_id), None)

    # --- Manipulação ---

    def adicionar(self, produto: Produto) -> ItemCarrinho:
        """Adiciona uma unidade; se o produto já está no carrinho só soma 1."""
        item = self.get_item(produto.id)
        if item:
            item.quantidade += 1
        else:
            item = ItemCarrinho(**produto.model_dump(), quantidade=1)
            self.itens.append(item)
        self._salvar()
        return item

    def remover(self, produto_id: str):
        self.itens = [item for item in self.itens if item.id != produto_id]
        self._salvar()

    def alterar_quantidade(self, produto_id: str, delta: int):
        item = self.get_item(produto_id)
        if item is None:
            return
        nova_quantidade = max(0, item.quantidade + delta)
        if nova_quantidade == 0:
            self.itens.remove(item)
        else:
            item.quantidade = nova_quantidade
        self._salvar()

    def definir_observacao(self, produto_id: str, texto: str):
        item = self.get_item(produto_id)
        if item is None:
            return
        item.observacao = texto[: self.limite_observacao]
        self._salvar()

    def limpar(self):
        self.itens = []
        self._salvar()
        logger.info("Carrinho esvaziado")

    # --- Consultas ---

    def total(self) -> Decimal:
        return sum((item.subtotal for item in self.itens), Decimal("0"))

    def contagem(self) -> int:
        """Total de unidades (não de produtos distintos)."""
        return sum(item.quantidade for item in self.itens)

    def is_empty(self) -> bool:
        return not self.itens
