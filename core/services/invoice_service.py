"""
Invoice store.

Sole owner of the invoice collection. Every mutation goes through this
service, which keeps due dates consistent, persists the whole collection
write-through, records an audit entry and publishes a domain event.
Readers get `view()`, which attaches the status for a given day.
"""

import logging
import random
from datetime import date
from typing import Callable, Iterable

from pydantic import ValidationError

from clients.errors import StorageError
from core.audit import AuditLogger, AuditAction, compute_changes
from core.config import InvoiceConfig
from core.derivation import compute_due_date, with_status
from core.event_bus import EventBus
from core.events import (
    InvoiceCreated, InvoiceUpdated, InvoiceDeleted,
    InvoicePaid, InvoiceUnpaid, InvoicesBulkPaid,
)
from core.exceptions import InvoiceNotFoundError, InvoiceValidationError, PersistenceError
from core.models import Invoice, InvoiceCreate, InvoiceUpdate, InvoiceView
from core.sample_data import generate_sample_invoices
from utils.timezone import today_in

logger = logging.getLogger(__name__)

_DUE_DATE_INPUTS = {"invoice_date", "payment_terms"}


def merge_update(invoice: Invoice, changes: dict) -> Invoice:
    """
    Apply field changes to an invoice.

    The due date is recomputed from the merged values whenever the invoice
    date or payment terms are among the changes, and left alone otherwise.
    """
    merged = invoice.model_copy(update=changes)
    if _DUE_DATE_INPUTS & changes.keys():
        merged = merged.model_copy(
            update={"due_date": compute_due_date(merged.invoice_date, merged.payment_terms)}
        )
    return merged


def _id_sequence(invoice_id: str) -> int | None:
    """Numeric suffix of an INV-<year>-<seq> id, or None if it has none."""
    try:
        return int(invoice_id.rsplit("-", 1)[-1])
    except ValueError:
        return None


class InvoiceService:
    """Service for invoice storage and mutation."""

    def __init__(
        self,
        store,
        audit: AuditLogger,
        event_bus: EventBus,
        config: InvoiceConfig | None = None,
        clock: Callable[[], date] | None = None,
        rng: random.Random | None = None,
    ):
        """
        Args:
            store: Key-value backend (LocalStore or ValkeyStore)
            audit: Change log
            event_bus: Bus that receives invoice events
            config: Settings (defaults if omitted)
            clock: Returns today's date; defaults to today in config.timezone
            rng: Randomness for sample data seeding
        """
        self.store = store
        self.audit = audit
        self.event_bus = event_bus
        self.config = config or InvoiceConfig()
        self._clock = clock or (lambda: today_in(self.config.timezone))
        self._rng = rng

        self._invoices: list[Invoice] = []
        self._sequence = 0
        self._loaded = False
        self.has_unsaved_changes = False

    # -------------------------------------------------------------------------
    # Loading & persistence
    # -------------------------------------------------------------------------

    @property
    def storage_key(self) -> str:
        return self.config.storage_key

    @property
    def sequence_key(self) -> str:
        return f"{self.config.storage_key}:sequence"

    def today(self) -> date:
        """Current date according to the injected clock."""
        return self._clock()

    def load(self) -> list[Invoice]:
        """
        Read the collection from the backing store.

        An empty store is seeded with sample invoices when seeding is enabled.

        Returns:
            The loaded invoices in collection order

        Raises:
            StorageError: If the backend fails or holds malformed data
            InvoiceValidationError: If a stored record is invalid or ids repeat
        """
        raw = self.store.get_json(self.storage_key)
        seeded = False

        if raw is None:
            if self.config.seed_sample_data:
                invoices = generate_sample_invoices(self.today(), self._rng)
                seeded = True
                logger.info("Seeded %d sample invoices", len(invoices))
            else:
                invoices = []
        else:
            if not isinstance(raw, list):
                raise StorageError(f"Key '{self.storage_key}' does not hold a list")
            try:
                invoices = [Invoice.model_validate(record) for record in raw]
            except ValidationError as e:
                raise InvoiceValidationError(
                    f"Stored invoices are invalid: {e.error_count()} error(s)",
                    errors=e.errors(include_url=False, include_context=False, include_input=False),
                ) from e

        ids = [inv.id for inv in invoices]
        if len(ids) != len(set(ids)):
            raise InvoiceValidationError("Stored invoices contain duplicate ids")

        self._invoices = invoices
        self._sequence = max(
            [self._stored_sequence()] + [s for s in map(_id_sequence, ids) if s is not None]
        )
        self._loaded = True
        logger.info("Loaded %d invoices (sequence=%d)", len(invoices), self._sequence)

        if seeded:
            self.persist()

        return list(self._invoices)

    def _stored_sequence(self) -> int:
        raw = self.store.get(self.sequence_key)
        if raw is None:
            return 0
        try:
            return int(raw)
        except ValueError:
            raise StorageError(f"Key '{self.sequence_key}' does not hold an integer")

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def persist(self) -> None:
        """
        Write the whole collection and the id sequence to the store.

        Retries up to config.persist_attempts times. On final failure the
        in-memory state is kept and has_unsaved_changes stays True.

        Raises:
            PersistenceError: If every attempt failed
        """
        self.has_unsaved_changes = True
        payload = [inv.to_storage() for inv in self._invoices]
        attempts = self.config.persist_attempts
        last_error: StorageError | None = None

        for attempt in range(1, attempts + 1):
            try:
                self.store.set_json(self.storage_key, payload)
                self.store.set(self.sequence_key, str(self._sequence))
            except StorageError as e:
                last_error = e
                logger.warning("Persist attempt %d/%d failed: %s", attempt, attempts, e)
                continue

            self.has_unsaved_changes = False
            return

        logger.error("Giving up persisting %d invoices after %d attempts", len(payload), attempts)
        raise PersistenceError(attempts, last_error)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _find(self, invoice_id: str) -> tuple[int, Invoice]:
        for index, invoice in enumerate(self._invoices):
            if invoice.id == invoice_id:
                return index, invoice
        raise InvoiceNotFoundError(invoice_id)

    def get_by_id(self, invoice_id: str) -> Invoice | None:
        """
        Get invoice by ID.

        Returns:
            Invoice if found, None otherwise.
        """
        self._ensure_loaded()
        try:
            return self._find(invoice_id)[1]
        except InvoiceNotFoundError:
            return None

    def get_view(self, invoice_id: str, today: date | None = None) -> InvoiceView:
        """
        Get one invoice with its status.

        Raises:
            InvoiceNotFoundError: If no invoice has this id
        """
        self._ensure_loaded()
        return with_status(self._find(invoice_id)[1], today or self.today())

    def view(self, today: date | None = None) -> list[InvoiceView]:
        """All invoices in collection order, each with its status for `today`."""
        self._ensure_loaded()
        today = today or self.today()
        return [with_status(inv, today) for inv in self._invoices]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _next_id(self, today: date) -> str:
        existing = {inv.id for inv in self._invoices}
        while True:
            self._sequence += 1
            candidate = f"INV-{today.year}-{self._sequence:03d}"
            if candidate not in existing:
                return candidate

    def create(self, data: InvoiceCreate, today: date | None = None) -> Invoice:
        """
        Add a new invoice.

        Args:
            data: Validated draft
            today: Date used for the id's year (defaults to the clock)

        Returns:
            Created invoice, unpaid, with id and due date assigned

        Raises:
            PersistenceError: If the write failed (the invoice is kept in memory)
        """
        self._ensure_loaded()
        today = today or self.today()

        invoice = Invoice(
            id=self._next_id(today),
            customer_name=data.customer_name,
            company_name=data.company_name,
            amount=data.amount,
            invoice_date=data.invoice_date,
            payment_terms=data.payment_terms,
            due_date=compute_due_date(data.invoice_date, data.payment_terms),
            payment_date=None,
        )
        self._invoices.append(invoice)

        self.audit.log_change(
            entity_type="invoice",
            entity_id=invoice.id,
            action=AuditAction.CREATE,
            changes={"created": invoice.model_dump(mode="json")},
        )
        self.persist()
        logger.info("Created invoice %s for %s", invoice.id, invoice.customer_name)

        self.event_bus.publish(InvoiceCreated.create(invoice=invoice))
        return invoice

    def _apply(self, invoice_id: str, changes: dict) -> tuple[Invoice, Invoice, dict]:
        """Replace one invoice with its merged version, audit and persist."""
        self._ensure_loaded()
        index, current = self._find(invoice_id)
        updated = merge_update(current, changes)
        self._invoices[index] = updated

        diff = compute_changes(current.model_dump(mode="json"), updated.model_dump(mode="json"))
        if diff:
            self.audit.log_change(
                entity_type="invoice",
                entity_id=invoice_id,
                action=AuditAction.UPDATE,
                changes=diff,
            )
        self.persist()
        return current, updated, diff

    def update(self, invoice_id: str, data: InvoiceUpdate) -> Invoice:
        """
        Update invoice fields.

        Args:
            invoice_id: Invoice id
            data: Fields to change (only explicitly set fields are applied)

        Returns:
            Updated invoice

        Raises:
            InvoiceNotFoundError: If no invoice has this id
            PersistenceError: If the write failed (the change is kept in memory)
        """
        changes = data.changes()
        if not changes:
            self._ensure_loaded()
            return self._find(invoice_id)[1]

        current, updated, diff = self._apply(invoice_id, changes)
        logger.info("Updated invoice %s: %s", invoice_id, ", ".join(diff) or "no changes")

        self.event_bus.publish(InvoiceUpdated.create(invoice=updated, changes=diff))
        if current.payment_date is None and updated.payment_date is not None:
            self.event_bus.publish(InvoicePaid.create(invoice=updated))
        elif current.payment_date is not None and updated.payment_date is None:
            self.event_bus.publish(InvoiceUnpaid.create(invoice=updated))

        return updated

    def delete(self, invoice_id: str) -> bool:
        """
        Remove an invoice. Idempotent.

        Returns:
            True if deleted, False if no invoice had this id (nothing written)
        """
        self._ensure_loaded()
        try:
            index, current = self._find(invoice_id)
        except InvoiceNotFoundError:
            logger.debug("Delete of unknown invoice %s ignored", invoice_id)
            return False

        del self._invoices[index]
        self.audit.log_change(
            entity_type="invoice",
            entity_id=invoice_id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json")},
        )
        self.persist()
        logger.info("Deleted invoice %s", invoice_id)

        self.event_bus.publish(InvoiceDeleted.create(invoice=current))
        return True

    def mark_paid(self, invoice_id: str, payment_date: date | None = None) -> Invoice:
        """
        Record a payment date (defaults to today).

        Raises:
            InvoiceNotFoundError: If no invoice has this id
        """
        payment_date = payment_date or self.today()
        _, updated, _ = self._apply(invoice_id, {"payment_date": payment_date})
        logger.info("Marked invoice %s paid on %s", invoice_id, payment_date)

        self.event_bus.publish(InvoicePaid.create(invoice=updated))
        return updated

    def mark_unpaid(self, invoice_id: str) -> Invoice:
        """
        Clear the payment date.

        Raises:
            InvoiceNotFoundError: If no invoice has this id
        """
        _, updated, _ = self._apply(invoice_id, {"payment_date": None})
        logger.info("Marked invoice %s unpaid", invoice_id)

        self.event_bus.publish(InvoiceUnpaid.create(invoice=updated))
        return updated

    def bulk_mark_paid(self, invoice_ids: Iterable[str], payment_date: date | None = None) -> list[Invoice]:
        """
        Mark several invoices paid in a single write.

        Ids not in the collection are ignored and repeated ids count once.
        Nothing is written when no id matches.

        Returns:
            The updated invoices in collection order
        """
        self._ensure_loaded()
        wanted = set(invoice_ids)
        payment_date = payment_date or self.today()

        snapshot = list(self._invoices)
        result = []
        updated = []
        for invoice in snapshot:
            if invoice.id not in wanted:
                result.append(invoice)
                continue

            paid = invoice.model_copy(update={"payment_date": payment_date})
            diff = compute_changes(invoice.model_dump(mode="json"), paid.model_dump(mode="json"))
            if diff:
                self.audit.log_change(
                    entity_type="invoice",
                    entity_id=invoice.id,
                    action=AuditAction.UPDATE,
                    changes=diff,
                )
            result.append(paid)
            updated.append(paid)

        if not updated:
            logger.debug("Bulk mark paid matched no invoices")
            return []

        self._invoices = result
        self.persist()
        logger.info("Marked %d invoices paid on %s", len(updated), payment_date)

        self.event_bus.publish(InvoicesBulkPaid.create(invoices=updated, payment_date=payment_date))
        return updated
