"""Polka payment webhooks."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from chirpy.api.v1.auth import AuthorizationHeader, get_auth_guard
from chirpy.schemas.polka import PolkaWebhookRequest
from chirpy.services.auth_guard import AuthGuard

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/webhooks", status_code=status.HTTP_204_NO_CONTENT)
def polka_webhook(
    body: PolkaWebhookRequest,
    guard: Annotated[AuthGuard, Depends(get_auth_guard)],
    authorization: AuthorizationHeader = None,
) -> Response:
    """
    Receive a Polka event. Requires Authorization: ApiKey <POLKA_KEY>.
    Unknown events are acknowledged with 204 and ignored.
    """
    upgraded = guard.handle_polka_event(authorization, body.event, body.data.user_id)
    logger.info(
        "Polka webhook handled",
        extra={"event": body.event, "user_id": body.data.user_id, "upgraded": upgraded},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
