import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable
from urllib.parse import quote

from config import NOME_LOJA, WHATSAPP_NUMERO
from exceptions import ErroValidacao
from schemas import FormaPagamento, ItemCarrinho

SEPARADOR = "--------------------------------"

# Mesmo conjunto de caracteres livres do encodeURIComponent
CARACTERES_LIVRES = "-_.!~*'()"


def formatar_moeda(valor) -> str:
    """Decimal('32.9') -> '32,90'"""
    # Arredonda 0,125 para 0,13, como o toFixed do navegador
    centavos = Decimal(valor).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{centavos}".replace(".", ",")


def montar_mensagem_pedido(nome_cliente: str, local: str, forma_pagamento: FormaPagamento, itens: Iterable[ItemCarrinho]) -> str:
    if not nome_cliente.strip():
        raise ErroValidacao("Por favor, informe seu nome.")
    if not local.strip():
        raise ErroValidacao("Por favor, informe seu endereço ou número da mesa.")

    itens = list(itens)
    forma_pagamento = FormaPagamento(forma_pagamento)

    texto = f"*🍔 NOVO PEDIDO - {NOME_LOJA}*\n"
    texto += f"{SEPARADOR}\n"
    texto += f"*Cliente:* {nome_cliente}\n"
    texto += f"*Local:* {local}\n"
    texto += f"*Pagamento:* {forma_pagamento.rotulo}\n"
    texto += f"{SEPARADOR}\n\n"

    total = Decimal("0")
    for item in itens:
        subtotal = item.preco * item.quantidade
        total += subtotal
        texto += f"{item.quantidade}x {item.nome}\n"
        if item.observacao:
            texto += f"   _Obs: {item.observacao}_\n"
        texto += f"   R$ {formatar_moeda(subtotal)}\n\n"

    texto += f"{SEPARADOR}\n"
    texto += f"*💰 TOTAL: R$ {formatar_moeda(total)}*\n"
    return texto


def gerar_link_whatsapp(texto, numero=None):
    numero = numero or WHATSAPP_NUMERO
    return f"https://wa.me/{numero}?text={quote(texto, safe=CARACTERES_LIVRES)}"


def telefone_visivel(numero=None):
    """'5561985700278' -> '+55 (61) 98570-0278'; fora do padrão brasileiro vira '+<dígitos>'."""
    digitos = re.sub(r"\D", "", numero or WHATSAPP_NUMERO or "")
    if not digitos:
        return ""
    if len(digitos) < 12 or not digitos.startswith("55"):
        return "+" + digitos
    ddd, local = digitos[2:4], digitos[4:]
    if len(local) in (8, 9):
        local = f"{local[:-4]}-{local[-4:]}"
    return f"+55 ({ddd}) {local}"
