import os
from dotenv import load_dotenv

load_dotenv()

# Banco de dados (SQLite local ou PostgreSQL)
DATABASE_URL = os.getenv("DATABASE_URL")

# Admin
ADMIN_USER = os.getenv("ADMIN_USER", "admin@admin.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "123456")

# Loja / WhatsApp
NOME_LOJA = os.getenv("NOME_LOJA", "KING BURGUER")
WHATSAPP_NUMERO = os.getenv("WHATSAPP_NUMERO", "5511999999999")

# Carrinho
LIMITE_OBSERVACAO = int(os.getenv("LIMITE_OBSERVACAO", "200"))

# Logs
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# CORS
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "").split(",")
    if origin.strip()
]
if not CORS_ORIGINS:
    CORS_ORIGINS = ["*"]  # Padrão para desenvolvimento/teste local
