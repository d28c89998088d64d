"""GET /api/data/*: read endpoints for the dashboard and invoice table."""

from fastapi import APIRouter, Query, Request
from starlette.responses import Response

from api.base import success_response
from core.derivation import describe_timing
from core.exceptions import InvoiceNotFoundError
from core.models import InvoiceQuery, SortKey, StatusFilter
from core.services.export_service import export_csv, export_filename


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def create_data_router(services: dict) -> APIRouter:
    router = APIRouter()

    invoice_svc = services["invoice"]
    query_svc = services["query"]
    summary_svc = services["summary"]
    audit = services["audit"]
    activity = services["activity"]

    @router.get("/data/invoices")
    async def list_invoices(
        request: Request,
        search: str = Query(""),
        status: StatusFilter = Query(StatusFilter.ALL),
        sort: SortKey = Query(SortKey.INVOICE_DATE),
        page: int = Query(1, ge=1),
    ):
        query = InvoiceQuery(search=search, status=status, sort=sort, page=page)
        result = query_svc.search(query)
        return success_response(
            result.model_dump(mode="json", by_alias=True), _request_id(request)
        ).model_dump(mode="json")

    @router.get("/data/invoices/{invoice_id}")
    async def get_invoice(request: Request, invoice_id: str):
        today = invoice_svc.today()
        view = invoice_svc.get_view(invoice_id, today)

        data = view.model_dump(mode="json", by_alias=True)
        data["timing"] = describe_timing(view, today)
        return success_response(data, _request_id(request)).model_dump(mode="json")

    @router.get("/data/invoices/{invoice_id}/history")
    async def get_invoice_history(request: Request, invoice_id: str):
        entries = audit.get_entity_history("invoice", invoice_id)
        if not entries and invoice_svc.get_by_id(invoice_id) is None:
            raise InvoiceNotFoundError(invoice_id)

        data = [
            {
                "action": e.action.value,
                "changes": e.changes,
                "createdAt": e.created_at.isoformat(),
            }
            for e in entries
        ]
        return success_response(data, _request_id(request)).model_dump(mode="json")

    @router.get("/data/activity")
    async def get_activity(request: Request, limit: int | None = Query(None, ge=1, le=1000)):
        data = [entry.to_dict() for entry in activity.latest(limit)]
        return success_response(data, _request_id(request)).model_dump(mode="json")

    @router.get("/data/summary")
    async def get_summary(request: Request, recent: int | None = Query(None, ge=1, le=50)):
        summary = summary_svc.summarize(recent_limit=recent)
        return success_response(
            summary.model_dump(mode="json", by_alias=True), _request_id(request)
        ).model_dump(mode="json")

    @router.get("/data/export")
    async def export_invoices(
        search: str = Query(""),
        status: StatusFilter = Query(StatusFilter.ALL),
        sort: SortKey = Query(SortKey.INVOICE_DATE),
    ):
        today = invoice_svc.today()
        rows = query_svc.matching(InvoiceQuery(search=search, status=status, sort=sort), today)

        return Response(
            content=export_csv(rows),
            media_type="text/csv",
            headers={
                "Content-Disposition": f'attachment; filename="{export_filename(status, today)}"'
            },
        )

    return router
