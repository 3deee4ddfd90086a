"""Shop owner identity for owner-scoped endpoints.

Authentication happens upstream; the gateway forwards the authenticated
owner id in a header (OWNER_HEADER, `X-Owner-Id` by default).
"""

from __future__ import annotations

from flask import current_app, request

from lottosales.errors import UnauthorizedError


def current_owner_id() -> str:
    header = str(current_app.config.get("OWNER_HEADER", "X-Owner-Id"))
    owner_id = (request.headers.get(header) or "").strip()
    if not owner_id:
        raise UnauthorizedError(f"Missing {header} header")
    return owner_id
