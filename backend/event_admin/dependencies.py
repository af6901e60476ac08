"""FastAPI dependencies wiring the store, cache and remote collaborators."""
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from event_admin.cache import QueryCache, get_cache
from event_admin.config import settings
from event_admin.database import get_db
from event_admin.functions import FunctionsClient
from event_admin.services.queries import Queries
from event_admin.storage import LocalObjectStorage, ObjectStorage
from event_admin.store.base import Store
from event_admin.store.rest_store import RestStore
from event_admin.store.sql_store import SqlStore


@lru_cache
def _rest_store() -> RestStore:
    return RestStore(settings.STORE_URL, api_key=settings.STORE_API_KEY, timeout=settings.STORE_TIMEOUT)


def get_store(db: Session = Depends(get_db)) -> Store:
    if settings.STORE_BACKEND == "rest":
        return _rest_store()
    return SqlStore(db)


def get_queries(store: Store = Depends(get_store), cache: QueryCache = Depends(get_cache)) -> Queries:
    return Queries(store, cache)


def get_storage() -> ObjectStorage:
    return LocalObjectStorage(settings.FLYER_STORAGE_DIR, settings.FLYER_PUBLIC_BASE_URL)


@lru_cache
def _functions_client() -> FunctionsClient:
    return FunctionsClient(settings.FUNCTIONS_URL, api_key=settings.STORE_API_KEY)


def get_functions() -> FunctionsClient:
    if not settings.FUNCTIONS_URL:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Remote functions are not configured",
        )
    return _functions_client()


def get_actor_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Id of the acting user, recorded as created_by / updated_by."""
    return x_user_id or None
