"""Company directory lookup for company events."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from event_admin.dependencies import get_queries
from event_admin.schemas.directory import Company
from event_admin.services.event_views import company_suggestions, name_key
from event_admin.services.queries import Queries

router = APIRouter()


@router.get("/", response_model=list[Company])
def list_companies(search: Optional[str] = Query(None), queries: Queries = Depends(get_queries)):
    """All companies by name, or the suggestion list for ``search``."""
    if search is not None:
        return company_suggestions(queries.companies(), search)
    return sorted(queries.companies(), key=lambda c: name_key(c.name))
