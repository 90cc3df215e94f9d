"""Schemas for Polka payment webhooks."""

from pydantic import BaseModel, Field


class PolkaEventData(BaseModel):
    model_config = {"extra": "ignore"}

    user_id: int = Field(..., description="Chirpy user the event refers to")


class PolkaWebhookRequest(BaseModel):
    """Webhook body; only event 'user.upgraded' has an effect."""

    model_config = {"extra": "ignore"}

    event: str
    data: PolkaEventData
