"""
Observability module for FitCoach API.

Error tracking and performance monitoring through a Sentry-compatible
backend (GlitchTip). Every helper is a no-op until ``init_observability``
has been called with a DSN.
"""

import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from fitcoach.config.settings import settings

logger = logging.getLogger(__name__)

# Transient network failures that are not worth an error report
_IGNORED_MESSAGES = ("connection refused", "connection reset", "broken pipe")


def init_observability() -> None:
    """Initialize GlitchTip/Sentry observability."""
    if not settings.GLITCHTIP_DSN:
        logger.info("Observability disabled - no DSN configured")
        return

    traces_sample_rate = settings.GLITCHTIP_TRACES_SAMPLE_RATE
    profiles_sample_rate = settings.GLITCHTIP_PROFILES_SAMPLE_RATE
    if settings.is_development:
        traces_sample_rate = 1.0
        profiles_sample_rate = 1.0

    sentry_sdk.init(
        dsn=settings.GLITCHTIP_DSN,
        environment=settings.APP_ENV,
        release=f"fitcoach-api@{settings.APP_VERSION}",
        traces_sample_rate=traces_sample_rate,
        profiles_sample_rate=profiles_sample_rate,
        send_default_pii=False,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        before_send=_before_send,
    )
    logger.info(f"Observability initialized for {settings.APP_ENV}")


def _before_send(event: dict, hint: dict) -> dict | None:
    if "exc_info" in hint:
        _, exc_value, _ = hint["exc_info"]
        message = str(exc_value).lower()
        if any(ignored in message for ignored in _IGNORED_MESSAGES):
            return None
    return event


def set_user_context(user_id: str, email: str | None = None, role: str | None = None) -> None:
    """Attach the authenticated user to subsequent error reports."""
    sentry_sdk.set_user({"id": user_id, "email": email, "role": role})


def capture_exception(
    exception: Exception,
    extra: dict | None = None,
    tags: dict[str, str] | None = None,
) -> str | None:
    """Capture an exception with optional context."""
    with sentry_sdk.new_scope() as scope:
        for key, value in (extra or {}).items():
            scope.set_extra(key, value)
        for key, value in (tags or {}).items():
            scope.set_tag(key, value)
        return sentry_sdk.capture_exception(exception)


def capture_message(message: str, level: str = "info", extra: dict | None = None) -> str | None:
    """Capture a message event."""
    with sentry_sdk.new_scope() as scope:
        for key, value in (extra or {}).items():
            scope.set_extra(key, value)
        return sentry_sdk.capture_message(message, level=level)
