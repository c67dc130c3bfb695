# backend/focusflow/api/deps.py
from fastapi import HTTPException, Request, status

from focusflow.coordinator import FocusCoordinator


async def get_coordinator(request: Request) -> FocusCoordinator:
    """
    The process-wide coordinator built by the app lifespan.
    """
    coordinator = getattr(request.app.state, "coordinator", None)
    if coordinator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Focus coordinator is not ready",
        )
    return coordinator
