# fiesta/routers/catalog.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from .. import listings
from ..deps import get_session, get_store
from ..errors import WorkflowError, http_error
from ..models import Profile, ServiceCategory, SessionContext
from ..store import RecordStore

router = APIRouter(tags=["catalog"])


@router.get("/categories", response_model=List[ServiceCategory])
def list_categories(store: RecordStore = Depends(get_store)):
    try:
        return listings.categories(store)
    except WorkflowError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"/categories GET failed: {e}")


@router.get("/me", response_model=SessionContext)
def whoami(session: SessionContext = Depends(get_session)):
    return session


@router.get("/me/profile", response_model=Profile)
def my_profile(
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return listings.profile(store, session)
    except WorkflowError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"/me/profile GET failed: {e}")
