from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool, StaticPool
from config import DATABASE_URL

if not DATABASE_URL:
    raise ValueError("Erro crítico: DATABASE_URL não está definida nas variáveis de ambiente!")

if DATABASE_URL.startswith("sqlite"):
    # Uma única conexão compartilhada, senão o banco em memória some a cada sessão
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(
        DATABASE_URL,
        pool_pre_ping=True,
        pool_recycle=300,
        poolclass=NullPool
    )

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()

def init_db():
    """Cria as tabelas se ainda não existirem"""
    import models  # Import local para evitar circular imports
    Base.metadata.create_all(bind=engine)
