import json
import logging
from typing import Any, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import models
from exceptions import DocumentoCorrompido, ErroArmazenamento

logger = logging.getLogger(__name__)

CHAVE_CATEGORIAS = "burgerhub_categories"
CHAVE_PRODUTOS = "burgerhub_products"
CHAVE_CARRINHO = "burgerhub_cart"
CHAVE_ADMIN = "burgerhub_is_admin"

M = TypeVar("M", bound=BaseModel)


class Armazenamento:
    """Armazenamento chave -> documento JSON.

    Cada gravação substitui o documento inteiro e faz commit antes de
    retornar. Documentos ilegíveis levantam ``DocumentoCorrompido``; nada é
    recriado automaticamente.
    """

    def __init__(self, db: Session):
        self.db = db

    def ler(self, chave: str) -> Optional[Any]:
        try:
            doc = self.db.get(models.Documento, chave)
        except SQLAlchemyError:
            logger.exception("Erro ao ler a chave %s", chave)
            raise ErroArmazenamento(f"Não foi possível ler '{chave}'.")
        if doc is None:
            return None
        try:
            return json.loads(doc.conteudo)
        except ValueError:
            logger.error("Documento inválido na chave %s", chave)
            raise DocumentoCorrompido(chave)

    def gravar(self, chave: str, valor: Any) -> None:
        conteudo = json.dumps(valor, ensure_ascii=False)
        try:
            doc = self.db.get(models.Documento, chave)
            if doc is None:
                self.db.add(models.Documento(chave=chave, conteudo=conteudo))
            else:
                doc.conteudo = conteudo
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Erro ao gravar a chave %s", chave)
            raise ErroArmazenamento(f"Não foi possível gravar '{chave}'.")

    def remover(self, chave: str) -> None:
        try:
            doc = self.db.get(models.Documento, chave)
            if doc is not None:
                self.db.delete(doc)
                self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Erro ao remover a chave %s", chave)
            raise ErroArmazenamento(f"Não foi possível remover '{chave}'.")

    def existe(self, chave: str) -> bool:
        """Só verifica se a chave foi gravada; o conteúdo não é interpretado."""
        try:
            return self.db.get(models.Documento, chave) is not None
        except SQLAlchemyError:
            logger.exception("Erro ao ler a chave %s", chave)
            raise ErroArmazenamento(f"Não foi possível ler '{chave}'.")

    # ----- Coleções de modelos pydantic -----

    def ler_lista(self, chave: str, modelo: Type[M]) -> Optional[List[M]]:
        dados = self.ler(chave)
        if dados is None:
            return None
        try:
            return TypeAdapter(List[modelo]).validate_python(dados)
        except ValidationError:
            logger.error("Documento fora do formato esperado na chave %s", chave)
            raise DocumentoCorrompido(chave)

    def gravar_lista(self, chave: str, itens: Sequence[BaseModel]) -> None:
        self.gravar(chave, [item.model_dump(mode="json") for item in itens])
