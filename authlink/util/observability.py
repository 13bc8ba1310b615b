"""Observability configuration using Logfire.

Services and adapters log directly through logfire:

    import logfire

    logfire.info("Sign-in succeeded", session_id=str(session_id))

    with logfire.span("firebase.sign_in", method=credential.method.value):
        ...

Credentials, passwords and tokens are never passed as span attributes.
"""

import logfire
from fastapi import FastAPI

from authlink.config import Settings

REDACTED_FIELDS = frozenset(
    {"password", "new_password", "id_token", "access_token", "otp", "request"}
)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    Cloud sending is enabled by an explicit OBSERVABILITY__SEND_TO_LOGFIRE, or
    otherwise by the presence of OBSERVABILITY__LOGFIRE_TOKEN.

    Args:
        settings: Application settings
    """
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    elif settings.observability.logfire_token:
        send_to_logfire = True
    else:
        send_to_logfire = False

    config_kwargs = {
        "service_name": "authlink",
        "service_version": "0.1.0",
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }

    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
        has_token=bool(settings.observability.logfire_token),
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Instrument FastAPI application with Logfire.

    Request headers are not captured: they carry the session cookie.

    Args:
        app: FastAPI application instance
    """

    def _map_request_attributes(request, attributes):
        result = {**attributes}

        if hasattr(request, "method"):
            result["method"] = request.method

        if hasattr(request, "url"):
            result["path"] = request.url.path

        if hasattr(request, "client") and request.client:
            result["client_host"] = request.client.host

        # Never record credentials submitted in request bodies
        if isinstance(result.get("values"), dict):
            result["values"] = {
                name: value
                for name, value in result["values"].items()
                if name not in REDACTED_FIELDS
            }

        return result

    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        request_attributes_mapper=_map_request_attributes,
    )
    logfire.info("FastAPI instrumented")


def instrument_httpx() -> None:
    """Instrument httpx client with Logfire.

    Traces every call made to the Identity Toolkit API.
    """
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
