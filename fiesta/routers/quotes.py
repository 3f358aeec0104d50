# fiesta/routers/quotes.py
from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_session, get_store
from ..errors import WorkflowError, http_error
from ..models import HiredService, PaymentIn, Quote, QuoteIn, SessionContext
from ..store import RecordStore
from ..workflow import BookingWorkflow

router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.post("", response_model=Quote, status_code=201)
def submit_quote(
    payload: QuoteIn,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return BookingWorkflow(store).submit_quote(
            session, payload.request_id, payload.proposed_price, payload.notes
        )
    except WorkflowError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"/quotes POST failed: {e}")


@router.get("/{quote_id}", response_model=Quote)
def get_quote(
    quote_id: str,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return BookingWorkflow(store).view_quote(session, quote_id)
    except WorkflowError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"/quotes/{quote_id} GET failed: {e}")


# confirm payment: accepts the quote and books the service
@router.post("/{quote_id}/accept", response_model=HiredService, status_code=201)
def accept_quote(
    quote_id: str,
    payload: PaymentIn,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return BookingWorkflow(store).accept_quote(session, quote_id, payload.payment_method)
    except WorkflowError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"/quotes/{quote_id}/accept POST failed: {e}")
