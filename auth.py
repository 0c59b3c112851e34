import logging
import secrets

from config import ADMIN_USER, ADMIN_PASSWORD
from storage import Armazenamento, CHAVE_ADMIN

logger = logging.getLogger(__name__)


def verificar_credenciais(usuario: str, senha: str) -> bool:
    # Par fixo vindo da configuração; troque por um serviço real se necessário
    usuario_ok = secrets.compare_digest(usuario.encode(), ADMIN_USER.encode())
    senha_ok = secrets.compare_digest(senha.encode(), ADMIN_PASSWORD.encode())
    return usuario_ok and senha_ok


def login(arm: Armazenamento, usuario: str, senha: str, verificador=verificar_credenciais) -> bool:
    if not verificador(usuario, senha):
        logger.info("Tentativa de login admin recusada para %s", usuario)
        return False
    arm.gravar(CHAVE_ADMIN, "true")
    logger.info("Login admin: %s", usuario)
    return True


def logout(arm: Armazenamento):
    arm.remover(CHAVE_ADMIN)
    logger.info("Logout admin")


def esta_autenticado(arm: Armazenamento) -> bool:
    return arm.ler(CHAVE_ADMIN) == "true"
