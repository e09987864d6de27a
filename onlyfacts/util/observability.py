"""Logfire setup for the OnlyFacts API.

Services log and trace through logfire directly:

    import logfire

    logfire.info("Vote recorded", fact_id=str(fact.id), choice=choice.value)

    with logfire.span("fact_service.apply_vote", fact_id=str(fact_id)):
        ...
"""

from typing import Any

import logfire
from fastapi import FastAPI, Request
from sqlalchemy.ext.asyncio import AsyncEngine

from onlyfacts.config import ObservabilitySettings, Settings

SERVICE_NAME = "onlyfacts-api"
SERVICE_VERSION = "0.1.0"

# Load balancers poll these every few seconds; tracing them only adds noise
UNTRACED_URLS = ["/health", "/health/ready"]


def should_send_to_logfire(observability: ObservabilitySettings) -> bool:
    """Explicit setting wins, otherwise send only when a token is configured."""
    if observability.send_to_logfire is not None:
        return observability.send_to_logfire
    return bool(observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire once at process start.

    Without OBSERVABILITY__LOGFIRE_TOKEN everything stays on the console.

    Args:
        settings: Application settings
    """
    send = should_send_to_logfire(settings.observability)

    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=SERVICE_VERSION,
        environment=settings.environment,
        token=settings.observability.logfire_token,
        send_to_logfire=send,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        git_sha=settings.git_sha,
        send_to_logfire=send,
        vote_policy=settings.voting.policy.value,
    )


def _fact_request_attributes(
    request: Request, attributes: dict[str, Any]
) -> dict[str, Any]:
    """Tag request spans with the fact they address."""
    fact_id = request.path_params.get("fact_id")
    if fact_id is None:
        return attributes
    return {**attributes, "fact_id": fact_id}


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every API request except health checks.

    Args:
        app: FastAPI application instance
    """
    logfire.instrument_fastapi(
        app,
        request_attributes_mapper=_fact_request_attributes,
        excluded_urls=UNTRACED_URLS,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace SQL statements issued by the fact repository.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(
        engine=engine.sync_engine,
        enable_commenter=True,  # Add SQL comments with span context
    )
    logfire.info("SQLAlchemy instrumented", url=engine.url.render_as_string())
