"""POST /api/actions: unified mutation endpoint."""

from datetime import date

from fastapi import APIRouter, Request
from pydantic import BaseModel

from api.base import success_response
from core.models import InvoiceCreate, InvoiceUpdate
from utils.timezone import parse_date


class ActionRequest(BaseModel):
    domain: str
    action: str
    data: dict


def create_actions_router(services: dict) -> APIRouter:
    router = APIRouter()

    handlers = {
        "invoice": InvoiceHandler(services["invoice"]),
    }

    @router.post("/actions")
    async def perform_action(request: Request, body: ActionRequest):
        handler = handlers.get(body.domain)
        if handler is None:
            raise ValueError(
                f"Unknown domain '{body.domain}'. "
                f"Valid domains: {', '.join(sorted(handlers.keys()))}"
            )

        if body.action not in handler.ALLOWED_ACTIONS:
            raise ValueError(
                f"Action '{body.action}' not allowed on '{body.domain}'. "
                f"Allowed: {', '.join(sorted(handler.ALLOWED_ACTIONS))}"
            )

        method = getattr(handler, f"_handle_{body.action}")
        result = method(dict(body.data))
        return success_response(
            result, getattr(request.state, "request_id", None)
        ).model_dump(mode="json")

    return router


# =============================================================================
# HANDLER CLASSES
# =============================================================================


def _require_id(data: dict) -> str:
    invoice_id = data.get("id")
    if not isinstance(invoice_id, str) or not invoice_id:
        raise ValueError("'id' is required")
    return invoice_id


def _optional_date(data: dict, key: str) -> date | None:
    value = data.get(key)
    if value is None:
        return None
    return parse_date(value)


class InvoiceHandler:
    ALLOWED_ACTIONS = {"create", "update", "delete", "mark_paid", "mark_unpaid", "bulk_mark_paid"}

    def __init__(self, service):
        self.service = service

    def _dump(self, invoice) -> dict:
        return self.service.get_view(invoice.id).model_dump(mode="json", by_alias=True)

    def _handle_create(self, data: dict):
        invoice = self.service.create(InvoiceCreate(**data))
        return self._dump(invoice)

    def _handle_update(self, data: dict):
        invoice_id = _require_id(data)
        data.pop("id")
        invoice = self.service.update(invoice_id, InvoiceUpdate(**data))
        return self._dump(invoice)

    def _handle_delete(self, data: dict):
        deleted = self.service.delete(_require_id(data))
        return {"deleted": deleted}

    def _handle_mark_paid(self, data: dict):
        invoice = self.service.mark_paid(_require_id(data), _optional_date(data, "paymentDate"))
        return self._dump(invoice)

    def _handle_mark_unpaid(self, data: dict):
        invoice = self.service.mark_unpaid(_require_id(data))
        return self._dump(invoice)

    def _handle_bulk_mark_paid(self, data: dict):
        ids = data.get("ids")
        if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
            raise ValueError("'ids' must be a list of invoice ids")
        if not ids:
            raise ValueError("Select at least one invoice to mark as paid")

        invoices = self.service.bulk_mark_paid(ids, _optional_date(data, "paymentDate"))
        return {
            "updated": [self._dump(inv) for inv in invoices],
            "count": len(invoices),
        }
