from sqlalchemy import Column, String, DateTime, func, Text
from database import Base

class Documento(Base):
    """Um documento JSON completo por chave (categorias, produtos, carrinho, sessão admin)."""
    __tablename__ = "documentos"
    chave = Column(String(120), primary_key=True)
    conteudo = Column(Text, nullable=False)
    atualizado_em = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
