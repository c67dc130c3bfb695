# backend/focusflow/gateway/probe.py
"""
Startup capability probe.

Runs once per coordinator: validates the access token, reaches the store and
checks that the focus collections exist. Whatever happens, the outcome is a
ProbeResult, and that result alone decides which gateway the process uses for
its whole lifetime.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from focusflow.core.errors import AuthError
from focusflow.core.notifier import ToastNotifier
from focusflow.core.security import decode_access_token
from focusflow.db import mongo
from focusflow.gateway.base import PersistenceGateway
from focusflow.gateway.demo import DemoGateway
from focusflow.gateway.live import LiveGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeResult:
    live: bool
    user_id: Optional[str] = None
    reason: Optional[str] = None
    missing_collections: Tuple[str, ...] = ()
    connection_error: bool = False
    auth_error: bool = False


async def probe_capabilities(
    access_token: Optional[str],
    mongo_uri: Optional[str] = None,
) -> ProbeResult:
    try:
        user_id = decode_access_token(access_token)
    except AuthError as exc:
        logger.warning("Auth check failed: %s", exc)
        return ProbeResult(live=False, reason=str(exc), auth_error=True)

    try:
        if mongo.db is None:
            await mongo.connect_to_mongo(mongo_uri)
        await mongo.ping()
        existing = await mongo.get_db().list_collection_names()
    except Exception as exc:
        logger.warning("Store unreachable: %s", exc)
        return ProbeResult(live=False, user_id=user_id, reason=str(exc), connection_error=True)

    missing = tuple(c for c in mongo.REQUIRED_COLLECTIONS if c not in existing)
    if missing:
        logger.warning("Store is missing collections: %s", ", ".join(missing))
        return ProbeResult(
            live=False,
            user_id=user_id,
            reason="Missing collections",
            missing_collections=missing,
        )

    return ProbeResult(live=True, user_id=user_id)


def gateway_for(result: ProbeResult) -> PersistenceGateway:
    if result.live and result.user_id:
        return LiveGateway(result.user_id)
    return DemoGateway()


async def select_gateway(
    access_token: Optional[str],
    notifier: Optional[ToastNotifier] = None,
    mongo_uri: Optional[str] = None,
) -> Tuple[PersistenceGateway, ProbeResult]:
    """
    Probe once and build the gateway. Never raises: an unexpected error while
    probing is demo mode too.
    """
    try:
        result = await probe_capabilities(access_token, mongo_uri=mongo_uri)
    except Exception as exc:
        logger.exception("Capability probe crashed")
        result = ProbeResult(live=False, reason=str(exc), connection_error=True)

    gateway = gateway_for(result)

    if result.live:
        logger.info("Live mode for user %s", result.user_id)
    else:
        logger.info("Demo mode: %s", result.reason)
        if notifier is not None:
            if result.auth_error:
                notifier.error(
                    "Authentication Required",
                    "Sign in to save your progress. Running in demo mode.",
                )
            elif result.missing_collections:
                notifier.error(
                    "Database Setup Required",
                    f"Missing tables: {', '.join(result.missing_collections)}. Running in demo mode.",
                )
            elif result.connection_error:
                notifier.error(
                    "Database Connection Error",
                    "Running in demo mode. Your settings will not be saved.",
                )

    return gateway, result
