"""Draw routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from lottosales.auth import current_owner_id
from lottosales.schemas.draw import DrawCreateSchema, DrawSchema
from lottosales.services.draws import DrawService
from lottosales.utils.responses import ok

draws_bp = Blueprint("draws", __name__)

_draw_schema = DrawSchema()
_draws_schema = DrawSchema(many=True)
_create_schema = DrawCreateSchema()
_service = DrawService()


@draws_bp.get("/draws")
def list_draws():
    owner_id = current_owner_id()
    return ok(_draws_schema.dump(_service.list_draws(owner_id)))


@draws_bp.get("/draws/<draw_id>")
def get_draw(draw_id: str):
    owner_id = current_owner_id()
    return ok(_draw_schema.dump(_service.get_draw(owner_id, draw_id)))


@draws_bp.post("/draws")
def create_draw():
    owner_id = current_owner_id()
    data = _create_schema.load(request.get_json(silent=True) or {})
    draw = _service.create_draw(owner_id, data)
    return ok(_draw_schema.dump(draw), status_code=201)


@draws_bp.patch("/draws/<draw_id>")
def update_draw(draw_id: str):
    owner_id = current_owner_id()
    data = _create_schema.load(request.get_json(silent=True) or {}, partial=True)
    return ok(_draw_schema.dump(_service.update_draw(owner_id, draw_id, data)))


@draws_bp.delete("/draws/<draw_id>")
def delete_draw(draw_id: str):
    owner_id = current_owner_id()
    _service.delete_draw(owner_id, draw_id)
    return ok({"deleted": draw_id})
