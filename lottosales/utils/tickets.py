"""Ticket id generation/normalization and the receipt watermark line."""

from __future__ import annotations

import secrets
import time
from collections.abc import Sequence
from urllib.parse import unquote

from lottosales.constants import WATERMARK_MAX_LINES
from lottosales.models.sale import SaleLine

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def _to_base36(value: int) -> str:
    if value <= 0:
        return "0"
    out: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


def generate_ticket_id(now_ms: int | None = None) -> str:
    """Short shareable id: `S` + 4 time chars + `-` + 5 random chars, e.g. `SK3F9-Q2ZP7`."""

    millis = int(time.time() * 1000) if now_ms is None else int(now_ms)
    time_part = _to_base36(millis)[-4:].rjust(4, "0")
    random_part = "".join(secrets.choice(_BASE36) for _ in range(5))
    return f"S{time_part}-{random_part}"


def normalize_ticket_id(raw: str | None) -> str:
    """Canonical form used as the global index key: URL-decoded, trimmed, uppercased."""

    if raw is None:
        return ""
    return unquote(str(raw)).strip().upper()


def build_watermark_text(ticket_id: str | None, total: float | None, lines: Sequence[SaleLine]) -> str:
    if not ticket_id and total is None and not lines:
        return "LOTTOSALESHUB • DOCUMENTO OFICIAL"

    ticket = (ticket_id or "S/ID").upper()
    amount = f"${total:,.2f}" if total is not None else "$0.00"

    numbers = "S/N"
    if lines:
        shown = lines[:WATERMARK_MAX_LINES]
        numbers = " ".join(f"{ln.number}x{ln.quantity}" if ln.quantity else ln.number for ln in shown)
        if len(lines) > WATERMARK_MAX_LINES:
            numbers += f" +{len(lines) - WATERMARK_MAX_LINES}"

    return f"{ticket} • {amount} • {numbers} • ORIGINAL"
