"""Sale routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from lottosales.auth import current_owner_id
from lottosales.schemas.sale import ReceiptSchema, SaleCreateSchema, SaleQuerySchema, SaleSchema, SaleUpdateSchema
from lottosales.services.bulk_delete import BulkDeleteService
from lottosales.services.sales import SaleService
from lottosales.utils.responses import ok

sales_bp = Blueprint("sales", __name__)

_sale_schema = SaleSchema()
_sales_schema = SaleSchema(many=True)
_create_schema = SaleCreateSchema()
_update_schema = SaleUpdateSchema()
_query_schema = SaleQuerySchema()
_receipt_schema = ReceiptSchema()
_service = SaleService()
_bulk = BulkDeleteService()


@sales_bp.get("/sales")
def list_sales():
    owner_id = current_owner_id()
    query = _query_schema.load(request.args.to_dict())
    return ok(_sales_schema.dump(_service.list_sales(owner_id, draw_id=query["draw_id"])))


@sales_bp.get("/sales/<sale_id>")
def get_sale(sale_id: str):
    owner_id = current_owner_id()
    return ok(_sale_schema.dump(_service.get_sale(owner_id, sale_id)))


@sales_bp.get("/sales/<sale_id>/receipt")
def get_receipt(sale_id: str):
    owner_id = current_owner_id()
    return ok(_receipt_schema.dump(_service.receipt(owner_id, sale_id)))


@sales_bp.post("/sales")
def create_sale():
    owner_id = current_owner_id()
    data = _create_schema.load(request.get_json(silent=True) or {})
    sale = _service.create_sale(owner_id, data)
    return ok(_sale_schema.dump(sale), status_code=201)


@sales_bp.patch("/sales/<sale_id>")
def update_sale(sale_id: str):
    owner_id = current_owner_id()
    data = _update_schema.load(request.get_json(silent=True) or {})
    return ok(_sale_schema.dump(_service.update_sale(owner_id, sale_id, data)))


@sales_bp.delete("/sales/<sale_id>")
def delete_sale(sale_id: str):
    owner_id = current_owner_id()
    _service.delete_sale(owner_id, sale_id)
    return ok({"deleted": sale_id})


@sales_bp.delete("/sales")
def delete_all_sales():
    """Delete every sale of the shop, in batches."""

    owner_id = current_owner_id()
    deleted = _bulk.delete_all_sales(owner_id)
    return ok({"deleted": deleted})
