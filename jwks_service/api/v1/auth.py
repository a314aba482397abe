from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from jwks_service.api.deps import get_context
from jwks_service.core.context import ServiceContext

router = APIRouter()

@router.post("/auth", response_class=PlainTextResponse)
async def issue_token(
    expired: Optional[str] = Query(default=None),
    context: ServiceContext = Depends(get_context)
):
    """
    Issue a signed JWT for the placeholder user.
    `?expired=true` returns an already-expired token signed with an expired key.
    """
    want_expired = expired == "true"
    record = await context.selector.select_for_signing(want_expired)
    return context.issuer.issue(record, want_expired)
