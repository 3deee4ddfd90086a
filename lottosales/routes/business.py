"""Shop profile routes."""

from __future__ import annotations

from flask import Blueprint, request

from lottosales.auth import current_owner_id
from lottosales.schemas.business import BusinessSchema, BusinessUpdateSchema
from lottosales.services.business import BusinessService
from lottosales.utils.responses import ok

business_bp = Blueprint("business", __name__)

_schema = BusinessSchema()
_update_schema = BusinessUpdateSchema()
_service = BusinessService()


@business_bp.get("/business")
def get_business():
    owner_id = current_owner_id()
    return ok(_schema.dump(_service.get_business(owner_id)))


@business_bp.put("/business")
def put_business():
    owner_id = current_owner_id()
    data = _update_schema.load(request.get_json(silent=True) or {})
    return ok(_schema.dump(_service.put_business(owner_id, data)))
