# fiesta/routers/requests.py
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException

from .. import listings
from ..deps import get_session, get_store
from ..errors import WorkflowError, http_error
from ..models import (
    ProviderFeed,
    Quote,
    QuotedRequest,
    Request,
    RequestDetails,
    RequestGroup,
    RequestIn,
    SessionContext,
)
from ..store import RecordStore
from ..workflow import BookingWorkflow

router = APIRouter(prefix="/requests", tags=["requests"])


@router.post("", response_model=Request, status_code=201)
def submit_request(
    payload: RequestIn,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    details = RequestDetails.model_validate(payload.model_dump(exclude={"category_id"}))
    try:
        return BookingWorkflow(store).submit_request(session, payload.category_id, details)
    except WorkflowError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"/requests POST failed: {e}")


@router.get("/mine", response_model=Dict[RequestGroup, List[Request]])
def my_requests(
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return listings.my_requests(store, session)
    except WorkflowError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"/requests/mine GET failed: {e}")


@router.get("/feed", response_model=ProviderFeed)
def provider_feed(
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return listings.provider_feed(store, session)
    except WorkflowError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"/requests/feed GET failed: {e}")


@router.get("/quoted", response_model=List[QuotedRequest])
def provider_quoted_requests(
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return listings.provider_quoted_requests(store, session)
    except WorkflowError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"/requests/quoted GET failed: {e}")


@router.get("/{request_id}", response_model=Request)
def get_request(
    request_id: str,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return BookingWorkflow(store).view_request(session, request_id)
    except WorkflowError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"/requests/{request_id} GET failed: {e}")


@router.get("/{request_id}/quotes", response_model=List[Quote])
def quotes_for_request(
    request_id: str,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return listings.quotes_for_request(store, session, request_id)
    except WorkflowError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"/requests/{request_id}/quotes GET failed: {e}")
