# backend/focusflow/api/endpoints/health.py

from fastapi import APIRouter, Request

from focusflow.db import mongo

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(request: Request):
    """
    Liveness + store reachability.
    Demo mode is a valid running state, reported as 'degraded'.
    """
    coordinator = getattr(request.app.state, "coordinator", None)
    demo = bool(coordinator and coordinator.is_demo_mode)

    mongo_ok = False
    mongo_error = None

    if mongo.db is not None:
        try:
            await mongo.ping()
            mongo_ok = True
        except Exception as e:
            mongo_error = str(e)
    else:
        mongo_error = "not connected"

    return {
        "status": "ok" if mongo_ok and not demo else "degraded",
        "mongo": mongo_ok,
        "demo_mode": demo,
        "mongo_error": mongo_error,
    }
