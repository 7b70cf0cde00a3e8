import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.redis import RedisIntegration
from sentry_sdk.integrations.httpx import HttpxIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

FILTERED = "[Filtered]"
IGNORE_TRANSACTIONS = {"/health"}
SENSITIVE_HEADERS = {"authorization", "cookie", "set-cookie", "x-session-id", "x-client-id"}
# login bodies and OAuth2 token payloads
SENSITIVE_FIELDS = {"password", "access_token", "id_token", "refresh_token"}


def init_sentry(
    dsn: str,
    environment: str = "development",
    release: str | None = None,
    traces_sample_rate: float = 0.2,
    profiles_sample_rate: float = 0.0,
    send_default_pii: bool = False,
):
    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        send_default_pii=send_default_pii,
        integrations=[
            FastApiIntegration(),
            RedisIntegration(),
            HttpxIntegration(),
            LoggingIntegration(level=None, event_level="ERROR"),
        ],
        traces_sample_rate=traces_sample_rate,
        profiles_sample_rate=profiles_sample_rate,
        max_breadcrumbs=100,
        before_send=scrub_event,
        before_send_transaction=drop_health_transactions,
    )


def tag_dashboard_session(session_id: str) -> None:
    """Group error reports by dashboard session without sending the raw header"""
    sentry_sdk.set_tag("dashboard.session", session_id)


def scrub_event(event, hint):
    request = event.get("request") or {}

    headers = request.get("headers") or {}
    for name in list(headers):
        if name.lower() in SENSITIVE_HEADERS:
            headers[name] = FILTERED

    data = request.get("data")
    if isinstance(data, dict):
        for name in list(data):
            if name.lower() in SENSITIVE_FIELDS:
                data[name] = FILTERED

    return event


def drop_health_transactions(event, hint):
    if event.get("transaction") in IGNORE_TRANSACTIONS:
        return None
    return event
