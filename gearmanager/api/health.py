"""Health check endpoint."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """Return application and catalog status."""
    registry = getattr(request.app.state, "registry", None)
    if registry is None or registry.count() == 0:
        return {"status": "error", "catalog": "empty"}
    return {"status": "ok", "catalog": "loaded"}
