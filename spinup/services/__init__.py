"""Services for spinup."""

from spinup.services.webhook import WebhookForwarder

__all__ = [
    "WebhookForwarder",
]
