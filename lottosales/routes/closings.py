"""Draw closing sheet route."""

from __future__ import annotations

from flask import Blueprint, request

from lottosales.auth import current_owner_id
from lottosales.schemas.closing import ClosingQuerySchema, ClosingSheetSchema
from lottosales.services.closings import ClosingService
from lottosales.utils.responses import ok

closings_bp = Blueprint("closings", __name__)

_query_schema = ClosingQuerySchema()
_sheet_schema = ClosingSheetSchema()
_service = ClosingService()


@closings_bp.get("/closings")
def get_closing_sheet():
    """Fractions sold per number for one draw, day and schedule."""

    owner_id = current_owner_id()
    query = _query_schema.load(request.args.to_dict())
    sheet = _service.consolidate(owner_id, query["draw_id"], query["date"], query["schedule"])
    return ok(_sheet_schema.dump(sheet))
