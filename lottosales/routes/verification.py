"""Public ticket verification. No owner header; rate limited per client IP."""

from __future__ import annotations

from flask import Blueprint, request

from lottosales.rate_limit import client_key, get_rate_limiter
from lottosales.schemas.verification import PublicTicketSchema
from lottosales.services.verification import VerificationService
from lottosales.utils.responses import ok

verification_bp = Blueprint("verification", __name__)

_schema = PublicTicketSchema()


@verification_bp.get("/verify/<path:ticket_id>")
def verify_ticket(ticket_id: str):
    service = VerificationService(rate_limiter=get_rate_limiter())
    ticket = service.verify(ticket_id, client_key(request))
    return ok(_schema.dump(ticket))
