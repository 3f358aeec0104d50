import pytest

from fiesta import listings
from fiesta.errors import Forbidden, NotFound
from fiesta.models import Request, RequestGroup, RequestStatus


def _req(i, status):
    return Request(id=f"r{i}", client_id="client-1", title=f"Req {i}", status=status)


def test_group_my_requests():
    reqs = [
        _req(1, RequestStatus.OPEN),
        _req(2, RequestStatus.QUOTED),
        _req(3, RequestStatus.HIRED),
        _req(4, RequestStatus.COMPLETED),
        _req(5, RequestStatus.CANCELLED),
    ]
    groups = listings.group_my_requests(reqs)

    assert [r.id for r in groups[RequestGroup.PENDING]] == ["r1", "r2"]
    assert [r.id for r in groups[RequestGroup.CONFIRMED]] == ["r3"]
    assert [r.id for r in groups[RequestGroup.FINISHED]] == ["r4"]
    assert all(r.id != "r5" for g in groups.values() for r in g)


def test_group_my_requests_empty_has_every_group():
    groups = listings.group_my_requests([])
    assert set(groups) == {RequestGroup.PENDING, RequestGroup.CONFIRMED, RequestGroup.FINISHED}
    assert RequestGroup.PENDING.value == "Pendientes"


def test_my_requests_only_mine_newest_first(store, client_session):
    store.seed("requests", id="old", client_id="client-1", title="a", status="open")
    store.seed("requests", id="theirs", client_id="client-2", title="b", status="open")
    store.seed("requests", id="new", client_id="client-1", title="c", status="quoted")

    groups = listings.my_requests(store, client_session)
    assert [r.id for r in groups[RequestGroup.PENDING]] == ["new", "old"]


def test_provider_feed(store, provider_session):
    store.seed("services", provider_id="provider-1", category_id="cat-a")
    store.seed("requests", id="match", client_id="c", title="t", status="open", category_id="cat-a")
    store.seed("requests", id="already", client_id="c", title="t", status="open", category_id="cat-a")
    store.seed("requests", id="other-cat", client_id="c", title="t", status="open", category_id="cat-b")
    store.seed("requests", id="hired", client_id="c", title="t", status="hired", category_id="cat-a")
    store.seed("quotes", request_id="already", provider_id="provider-1", proposed_price="1", status="pending")

    feed = listings.provider_feed(store, provider_session)

    assert feed.has_services
    assert [r.id for r in feed.requests] == ["match"]


def test_provider_feed_without_services(store, provider_session):
    store.seed("requests", id="r", client_id="c", title="t", status="open", category_id="cat-a")
    feed = listings.provider_feed(store, provider_session)
    assert feed.has_services is False
    assert feed.requests == []


def test_provider_feed_requires_provider(store, client_session):
    with pytest.raises(Forbidden):
        listings.provider_feed(store, client_session)


def test_provider_quoted_requests(store, provider_session):
    store.seed("requests", id="r1", client_id="c", title="Boda", status="quoted")
    store.seed("requests", id="r2", client_id="c", title="Fiesta", status="hired")
    store.seed("requests", id="r3", client_id="c", title="Otra", status="open")
    store.seed("quotes", id="q1", request_id="r1", provider_id="provider-1", proposed_price="100.00", status="pending")
    store.seed("quotes", id="q2", request_id="r2", provider_id="provider-1", proposed_price="250.50", status="accepted")
    store.seed("quotes", id="q3", request_id="r3", provider_id="provider-2", proposed_price="9", status="pending")

    out = listings.provider_quoted_requests(store, provider_session)

    assert [(r.id, r.quote_id, r.quote_status.value) for r in out] == [
        ("r2", "q2", "accepted"),
        ("r1", "q1", "pending"),
    ]
    assert str(out[0].quote_price) == "250.50"


def test_provider_quoted_requests_empty(store, provider_session):
    assert listings.provider_quoted_requests(store, provider_session) == []


def test_quotes_for_request_owner_only(store, client_session):
    store.seed("requests", id="r1", client_id="client-1", title="t", status="quoted")
    store.seed("quotes", id="q1", request_id="r1", provider_id="p", proposed_price="10", status="pending")
    store.seed("requests", id="r2", client_id="client-2", title="t", status="quoted")

    assert [q.id for q in listings.quotes_for_request(store, client_session, "r1")] == ["q1"]
    with pytest.raises(Forbidden):
        listings.quotes_for_request(store, client_session, "r2")
    with pytest.raises(NotFound):
        listings.quotes_for_request(store, client_session, "nope")


def test_categories_only_active(store, catering):
    store.seed("service_categories", id="cat-old", name="Payasos", active=False)
    assert [c.name for c in listings.categories(store)] == ["Catering"]


def test_profile(store, client_session):
    with pytest.raises(NotFound):
        listings.profile(store, client_session)
    store.seed("profiles", id="client-1", full_name="Ana López")
    assert listings.profile(store, client_session).full_name == "Ana López"
