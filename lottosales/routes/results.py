"""Result, winner and payout routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from lottosales.auth import current_owner_id
from lottosales.schemas.result import (
    PayoutStatusSchema,
    ResultCreateSchema,
    ResultQuerySchema,
    ResultSchema,
    ResultUpdateSchema,
    WinnerReportSchema,
)
from lottosales.services.bulk_delete import BulkDeleteService
from lottosales.services.results import ResultService
from lottosales.services.winners import WinnerService
from lottosales.utils.responses import ok

results_bp = Blueprint("results", __name__)

_result_schema = ResultSchema()
_results_schema = ResultSchema(many=True)
_create_schema = ResultCreateSchema()
_update_schema = ResultUpdateSchema()
_query_schema = ResultQuerySchema()
_report_schema = WinnerReportSchema()
_payout_schema = PayoutStatusSchema()
_winners = WinnerService()
_service = ResultService(winners=_winners)
_bulk = BulkDeleteService()


@results_bp.get("/results")
def list_results():
    owner_id = current_owner_id()
    query = _query_schema.load(request.args.to_dict())
    results = _service.list_results(owner_id, draw_id=query["draw_id"], date=query["date"])
    return ok(_results_schema.dump(results))


@results_bp.get("/results/<result_id>")
def get_result(result_id: str):
    owner_id = current_owner_id()
    return ok(_result_schema.dump(_service.get_result(owner_id, result_id)))


@results_bp.post("/results")
def save_result():
    """Save a result and return it with its winners."""

    owner_id = current_owner_id()
    data = _create_schema.load(request.get_json(silent=True) or {})
    report = _service.save_result(owner_id, data)
    return ok(_report_schema.dump(report), status_code=201)


@results_bp.patch("/results/<result_id>")
def update_result(result_id: str):
    owner_id = current_owner_id()
    data = _update_schema.load(request.get_json(silent=True) or {})
    return ok(_result_schema.dump(_service.update_result(owner_id, result_id, data)))


@results_bp.delete("/results/<result_id>")
def delete_result(result_id: str):
    owner_id = current_owner_id()
    _service.delete_result(owner_id, result_id)
    return ok({"deleted": result_id})


@results_bp.delete("/results")
def delete_all_results():
    owner_id = current_owner_id()
    return ok({"deleted": _bulk.delete_all_results(owner_id)})


@results_bp.get("/results/<result_id>/winners")
def get_winners(result_id: str):
    owner_id = current_owner_id()
    return ok(_report_schema.dump(_winners.winners_for_result(owner_id, result_id)))


@results_bp.post("/results/<result_id>/winners/<ticket_id>/pay")
def pay_winner(result_id: str, ticket_id: str):
    owner_id = current_owner_id()
    status = _winners.mark_paid(owner_id, result_id, ticket_id)
    return ok(_payout_schema.dump(status))


@results_bp.post("/results/<result_id>/winners/<ticket_id>/reverse")
def reverse_payout(result_id: str, ticket_id: str):
    owner_id = current_owner_id()
    status = _winners.reverse_payout(owner_id, result_id, ticket_id)
    return ok(_payout_schema.dump(status))
