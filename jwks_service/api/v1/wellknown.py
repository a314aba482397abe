from fastapi import APIRouter, Depends

from jwks_service.api.deps import get_context
from jwks_service.core.context import ServiceContext
from jwks_service.schemas.jwks import JWKSet

router = APIRouter()

@router.get("/jwks.json", response_model=JWKSet)
async def jwks(context: ServiceContext = Depends(get_context)):
    """
    Serve every non-expired public key in JWK Set format.
    Used by verifiers to match a token's kid to its signing key.
    """
    return await context.publisher.build_jwks()
