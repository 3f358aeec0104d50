# fiesta/workflow.py
"""
Booking workflow: request -> quote -> acceptance/payment -> hired service.

Each transition is a sequence of independent writes to the record store.
Nothing is wrapped in a transaction: if a step fails, the writes issued
before it stay in place and the error propagates to the caller. Accepting
the same quote twice is not guarded either.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from .errors import DuplicateQuote, Forbidden, NotFound, RequestClosed, StoreError, ValidationFailed
from .models import (
    Event,
    EventStatus,
    HiredService,
    HiredServiceStatus,
    Payment,
    PaymentMethod,
    PaymentStatus,
    Quote,
    QuoteStatus,
    Request,
    RequestDetails,
    RequestStatus,
    Role,
    SessionContext,
)
from .store import RecordStore, first

log = logging.getLogger("uvicorn.error")

REQUIRED_REQUEST_FIELDS = ("description", "event_date", "event_time", "location", "guest_count")
QUOTABLE = (RequestStatus.OPEN, RequestStatus.QUOTED)


def _require_role(session: SessionContext, role: Role) -> None:
    if session.role != role:
        raise Forbidden(f"Solo un usuario con rol '{role.value}' puede hacer esto")


def _missing(details: RequestDetails) -> list[str]:
    missing = []
    for name in REQUIRED_REQUEST_FIELDS:
        value = getattr(details, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def _money(value: Decimal) -> str:
    return str(Decimal(value).quantize(Decimal("0.01")))


class BookingWorkflow:
    def __init__(self, store: RecordStore):
        self.store = store

    # ── lookups ──────────────────────────────────────────────────────────────
    def get_request(self, request_id: str) -> Request:
        row = first(self.store.query("requests", {"id": request_id}, limit=1))
        if not row:
            raise NotFound("Solicitud no encontrada")
        return Request.model_validate(row)

    def get_quote(self, quote_id: str) -> Quote:
        row = first(self.store.query("quotes", {"id": quote_id}, limit=1))
        if not row:
            raise NotFound("Cotización no encontrada")
        return Quote.model_validate(row)

    def view_request(self, session: SessionContext, request_id: str) -> Request:
        """
        The owning client sees its request. Providers see requests still taking
        quotes, plus any request they quoted on.
        """
        request = self.get_request(request_id)
        if request.client_id == session.user_id:
            return request
        if session.role == Role.PROVIDER:
            if request.status in QUOTABLE:
                return request
            if self.store.query(
                "quotes", {"request_id": request.id, "provider_id": session.user_id}, columns="id", limit=1
            ):
                return request
        raise Forbidden("No tienes acceso a esta solicitud")

    def view_quote(self, session: SessionContext, quote_id: str) -> Quote:
        """Only the quoting provider and the client who owns the request."""
        quote = self.get_quote(quote_id)
        if quote.provider_id == session.user_id:
            return quote
        if self.get_request(quote.request_id).client_id == session.user_id:
            return quote
        raise Forbidden("No tienes acceso a esta cotización")

    # ── transitions ──────────────────────────────────────────────────────────
    def submit_request(self, session: SessionContext, category_id: str, details: RequestDetails) -> Request:
        _require_role(session, Role.CLIENT)
        missing = _missing(details)
        if missing:
            raise ValidationFailed("Por favor completa todos los campos.", fields=missing)

        row = self.store.create("requests", {
            "client_id": session.user_id,
            "category_id": category_id,
            "title": f"Solicitud de {details.category_name or 'Servicio'}",
            "description": details.description,
            "event_date": details.event_date,
            "event_time": details.event_time,
            "location": details.location,
            "address": details.address or details.location,
            "guest_count": details.guest_count,
            "status": RequestStatus.OPEN.value,
        })
        request = Request.model_validate(row)
        log.info(f"request {request.id} opened by client {session.user_id}")
        return request

    def submit_quote(
        self,
        session: SessionContext,
        request_id: str,
        price: Decimal,
        notes: Optional[str] = None,
    ) -> Quote:
        _require_role(session, Role.PROVIDER)
        request = self.get_request(request_id)
        if request.status not in QUOTABLE:
            raise RequestClosed("Esta solicitud ya no recibe cotizaciones")

        # checked by query only; two concurrent submissions can both pass
        existing = self.store.query(
            "quotes", {"request_id": request.id, "provider_id": session.user_id}, columns="id", limit=1
        )
        if existing:
            raise DuplicateQuote("Ya enviaste una cotización para esta solicitud")

        row = self.store.create("quotes", {
            "request_id": request.id,
            "provider_id": session.user_id,
            "proposed_price": _money(price),
            "notes": notes,
            "status": QuoteStatus.PENDING.value,
        })
        quote = Quote.model_validate(row)
        log.info(f"quote {quote.id} submitted on request {request.id} by provider {session.user_id}")

        try:
            self.store.update(
                "requests",
                {"id": request.id, "status": RequestStatus.OPEN.value},
                {"status": RequestStatus.QUOTED.value},
            )
        except StoreError as e:
            log.warning(f"request {request.id} not advanced to quoted: {e.message}")
        return quote

    def accept_quote(
        self,
        session: SessionContext,
        quote_id: str,
        payment_method: PaymentMethod = PaymentMethod.CARD,
    ) -> HiredService:
        """
        Confirm payment for a quote and record the booking.

        Steps run in order and each awaits the store before the next:
        event (only when the request has none yet), payment, quote accepted,
        request hired, hired service.
        """
        _require_role(session, Role.CLIENT)
        quote = self.get_quote(quote_id)
        request = self.get_request(quote.request_id)
        if request.client_id != session.user_id:
            raise Forbidden("Esta solicitud no te pertenece")

        event_id = request.event_id
        if event_id is None:
            event = Event.model_validate(self.store.create("events", {
                "client_id": request.client_id,
                "title": request.title,
                "event_date": request.event_date,
                "event_time": request.event_time,
                "location": request.location,
                "address": request.address,
                "guest_count": request.guest_count,
                "status": EventStatus.CONFIRMED.value,
            }))
            event_id = event.id
            self.store.update("requests", {"id": request.id}, {"event_id": event_id})
            log.info(f"event {event_id} created for request {request.id}")

        payment = Payment.model_validate(self.store.create("payments", {
            "quote_id": quote.id,
            "client_id": session.user_id,
            "provider_id": quote.provider_id,
            "amount": _money(quote.proposed_price),
            "payment_method": payment_method.value,
            "status": PaymentStatus.COMPLETED.value,
            "paid_at": datetime.now(timezone.utc).isoformat(),
        }))

        self.store.update("quotes", {"id": quote.id}, {"status": QuoteStatus.ACCEPTED.value})
        self.store.update("requests", {"id": request.id}, {"status": RequestStatus.HIRED.value})

        hired = HiredService.model_validate(self.store.create("hired_services", {
            "event_id": event_id,
            "quote_id": quote.id,
            "client_id": session.user_id,
            "provider_id": quote.provider_id,
            "service_name": request.title,
            "service_date": request.event_date,
            "service_time": request.event_time,
            "price_paid": _money(quote.proposed_price),
            "status": HiredServiceStatus.CONFIRMED.value,
            "payment_id": payment.id,
        }))
        log.info(
            f"quote {quote.id} accepted: payment {payment.id}, hired service {hired.id}, "
            f"request {request.id} hired"
        )
        return hired
