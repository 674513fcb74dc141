# distroflow/services/receipt_service.py
"""
WhatsApp receipt generation.

Pure functions: a finalized Sale goes in, text comes out. Values are
rendered the way Brazilian customers read them (R$ 1.234,56, dd/mm/yyyy)
and the message is percent-encoded so it can be embedded in a
https://wa.me/<phone>?text=<message> deep link.
"""

import re
from datetime import datetime, timezone
from urllib.parse import quote
from zoneinfo import ZoneInfo

from distroflow.models.sale import WALK_IN_CUSTOMER, Sale

SEPARATOR = "━━━━━━━━━━━━━━━━━━━━"

WHATSAPP_BASE_URL = "https://wa.me"

# Characters JavaScript's encodeURIComponent leaves untouched, on top of
# the alphanumerics and "_.-~" that quote() always keeps.
_URI_COMPONENT_SAFE = "!~*'()"


def format_currency(value: float) -> str:
    """
    Format a value as Brazilian reais.

    Example:
        >>> format_currency(1234.5)
        'R$\\xa01.234,50'
    """
    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,.2f}"
    # 1,234.50 -> 1.234,50
    grouped = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$\u00a0{grouped}"


def _local_datetime(value: datetime, tz_name: str) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(ZoneInfo(tz_name))


def build_receipt_text(
    sale: Sale,
    distributor_name: str,
    tz_name: str = "America/Sao_Paulo",
) -> str:
    """
    Build the plain (not encoded) receipt message.
    """
    local = _local_datetime(sale.date, tz_name)
    lines: list[str] = []

    lines.append(f"🏪 *{distributor_name}*")
    lines.append(SEPARATOR)
    lines.append("")
    lines.append("🧾 *COMPROVANTE DE VENDA*")
    lines.append(f"📅 Data: {local.strftime('%d/%m/%Y')}")
    lines.append(f"⏰ Hora: {local.strftime('%H:%M')}")
    lines.append(f"🆔 Pedido: #{sale.id[-6:]}")
    lines.append("")

    if sale.customer and sale.customer.name != WALK_IN_CUSTOMER:
        lines.append(f"👤 *Cliente:* {sale.customer.name}")
    if sale.seller:
        lines.append(f"🧑‍💼 *Vendedor:* {sale.seller.name}")

    lines.append("")
    lines.append(SEPARATOR)
    lines.append("📦 *ITENS DO PEDIDO*")
    lines.append(SEPARATOR)
    lines.append("")

    for index, item in enumerate(sale.items, start=1):
        price = item.product.sale_price
        lines.append(f"{index}. *{item.product.name}*")
        lines.append(f"   Qtd: {item.quantity} x {format_currency(price)}")
        lines.append(f"   Subtotal: {format_currency(price * item.quantity)}")
        lines.append("")

    lines.append(SEPARATOR)
    if len(sale.payments) == 1:
        lines.append(f"💳 *Forma de Pagamento:* {sale.payments[0].method}")
    elif sale.payments:
        lines.append("💳 *Formas de Pagamento:*")
        for payment in sale.payments:
            lines.append(f"   • {payment.method}: {format_currency(payment.amount)}")
    else:
        # Legacy single-method sales
        lines.append(f"💳 *Forma de Pagamento:* {sale.payment_method}")
    lines.append(SEPARATOR)
    lines.append("")

    lines.append(f"💰 *TOTAL: {format_currency(sale.total)}*")
    lines.append("")
    lines.append(SEPARATOR)
    lines.append("")
    lines.append("✨ *Obrigado pela preferência!*")
    lines.append(f"🙏 Agradecemos por escolher a {distributor_name}.")
    lines.append("📞 Dúvidas? Entre em contato conosco!")
    lines.append("")
    lines.append("_Volte sempre!_ 💙")

    return "\n".join(lines)


def generate_whatsapp_receipt(
    sale: Sale,
    distributor_name: str,
    tz_name: str = "America/Sao_Paulo",
) -> str:
    """
    Receipt message percent-encoded for a wa.me link.
    """
    return quote(build_receipt_text(sale, distributor_name, tz_name), safe=_URI_COMPONENT_SAFE)


def sanitize_phone(phone: str) -> str:
    return re.sub(r"\D", "", phone or "")


def build_whatsapp_link(phone: str, encoded_message: str) -> str:
    """
    Deep link opening a WhatsApp chat with the message pre-filled.

    The phone is reduced to digits; the message must already be encoded.
    """
    return f"{WHATSAPP_BASE_URL}/{sanitize_phone(phone)}?text={encoded_message}"
