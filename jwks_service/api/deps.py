from fastapi import Request

from jwks_service.core.context import ServiceContext

def get_context(request: Request) -> ServiceContext:
    """Dependency returning the ServiceContext attached at startup."""
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise RuntimeError("Service context not initialized")
    return context
