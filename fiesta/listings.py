# fiesta/listings.py
from typing import Dict, Iterable, List

from .errors import Forbidden, NotFound
from .models import (
    ProviderFeed,
    Profile,
    Quote,
    QuotedRequest,
    Request,
    RequestGroup,
    RequestStatus,
    Role,
    ServiceCategory,
    SessionContext,
)
from .store import RecordStore, first

GROUP_BY_STATUS = {
    RequestStatus.OPEN: RequestGroup.PENDING,
    RequestStatus.QUOTED: RequestGroup.PENDING,
    RequestStatus.HIRED: RequestGroup.CONFIRMED,
    RequestStatus.COMPLETED: RequestGroup.FINISHED,
}


def group_my_requests(requests: Iterable[Request]) -> Dict[RequestGroup, List[Request]]:
    """Cancelled requests are dropped; order within a group is preserved."""
    groups: Dict[RequestGroup, List[Request]] = {g: [] for g in RequestGroup}
    for req in requests:
        group = GROUP_BY_STATUS.get(req.status)
        if group is not None:
            groups[group].append(req)
    return groups


def my_requests(store: RecordStore, session: SessionContext) -> Dict[RequestGroup, List[Request]]:
    rows = store.query("requests", {"client_id": session.user_id}, order="created_at", desc=True)
    return group_my_requests(Request.model_validate(r) for r in rows)


def provider_feed(store: RecordStore, session: SessionContext) -> ProviderFeed:
    """Open requests in the provider's categories that the provider hasn't quoted yet."""
    if session.role != Role.PROVIDER:
        raise Forbidden("Solo los proveedores ven solicitudes nuevas")

    services = store.query("services", {"provider_id": session.user_id}, columns="category_id")
    category_ids = sorted({s["category_id"] for s in services if s.get("category_id")})
    if not category_ids:
        return ProviderFeed(has_services=False, requests=[])

    quoted = {
        q["request_id"]
        for q in store.query("quotes", {"provider_id": session.user_id}, columns="request_id")
    }
    rows = store.query(
        "requests",
        {"status": RequestStatus.OPEN.value, "category_id": category_ids},
        order="created_at",
        desc=True,
    )
    return ProviderFeed(
        has_services=True,
        requests=[Request.model_validate(r) for r in rows if r["id"] not in quoted],
    )


def provider_quoted_requests(store: RecordStore, session: SessionContext) -> List[QuotedRequest]:
    if session.role != Role.PROVIDER:
        raise Forbidden("Solo los proveedores tienen cotizaciones")

    quotes = store.query(
        "quotes", {"provider_id": session.user_id}, columns="id,request_id,status,proposed_price"
    )
    if not quotes:
        return []
    by_request = {q["request_id"]: q for q in quotes}

    rows = store.query("requests", {"id": list(by_request)}, order="created_at", desc=True)
    out = []
    for row in rows:
        q = by_request[row["id"]]
        out.append(QuotedRequest.model_validate({
            **row,
            "quote_id": q["id"],
            "quote_status": q["status"],
            "quote_price": q["proposed_price"],
        }))
    return out


def quotes_for_request(store: RecordStore, session: SessionContext, request_id: str) -> List[Quote]:
    req = first(store.query("requests", {"id": request_id}, columns="id,client_id", limit=1))
    if not req:
        raise NotFound("Solicitud no encontrada")
    if req["client_id"] != session.user_id:
        raise Forbidden("Esta solicitud no te pertenece")
    rows = store.query("quotes", {"request_id": request_id}, order="created_at")
    return [Quote.model_validate(r) for r in rows]


def categories(store: RecordStore) -> List[ServiceCategory]:
    rows = store.query("service_categories", {"active": True}, columns="id,name,icon")
    return [ServiceCategory.model_validate(r) for r in rows]


def profile(store: RecordStore, session: SessionContext) -> Profile:
    row = first(store.query("profiles", {"id": session.user_id}, limit=1))
    if not row:
        raise NotFound("Perfil no encontrado")
    return Profile.model_validate(row)
