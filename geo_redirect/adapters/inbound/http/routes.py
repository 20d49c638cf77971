"""Public redirect and status routes."""

from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from geo_redirect.adapters.inbound.http.redirect_pages import (
    bot_preview_page,
    custom_redirect_page,
    delayed_redirect_page,
)
from geo_redirect.adapters.inbound.http.request_context import get_client_ip, is_bot
from geo_redirect.application.use_cases.configuration_store import ConfigurationStore
from geo_redirect.application.use_cases.resolve_destination import ResolveDestinationUseCase
from geo_redirect.domain.value_objects.routing_decision import DestinationKind, RoutingDecision
from geo_redirect.infrastructure.logging.logger import log_http
from geo_redirect.infrastructure.wiring.dependencies import (
    get_configuration_store,
    get_container,
    get_resolve_destination_use_case,
)

router = APIRouter()

SERVICE_NAME = "Geo Redirect"
SERVICE_VERSION = "2.0.0"
TURKEY_TARGETS = ("tr", "turkey")


def whatsapp_url(decision: RoutingDecision) -> str:
    """Build a wa.me deep link."""
    text_param = f"?text={quote(decision.text)}" if decision.text else ""
    return f"https://wa.me/{decision.destination}{text_param}"


def telegram_url(decision: RoutingDecision) -> str:
    """Build a t.me channel link."""
    text_param = f"?text={quote(decision.text)}" if decision.text else ""
    return f"https://t.me/{decision.destination}{text_param}"


async def _decide(
    request: Request,
    use_case: ResolveDestinationUseCase,
    kind: DestinationKind,
    forced_country: Optional[str] = None,
) -> RoutingDecision:
    client_ip = get_client_ip(request)
    forced = forced_country or request.query_params.get("force", "")
    decision = await use_case.execute(
        client_ip,
        kind,
        forced_country=forced,
        custom_text=request.query_params.get("text", ""),
    )
    log_http(
        "redirect_decided",
        kind=kind.value,
        ip=client_ip,
        forced=forced or None,
        routing=decision.routing,
        destination=decision.destination,
        has_text=bool(decision.text),
    )
    return decision


def _bot_response(request: Request, title: str, description: str) -> Optional[HTMLResponse]:
    user_agent = request.headers.get("user-agent", "")
    if not is_bot(user_agent):
        return None
    log_http("bot_detected", user_agent=user_agent[:50])
    return HTMLResponse(bot_preview_page(title, description), status_code=status.HTTP_200_OK)


@router.get("/wa")
async def whatsapp_redirect(
    request: Request,
    use_case: ResolveDestinationUseCase = Depends(get_resolve_destination_use_case),
):
    """
    Redirect to the WhatsApp number for the visitor's branch.

    Query params: force (routing override), text (extra prefill text).
    """
    preview = _bot_response(request, "Contact Us", "Get in touch with our team via WhatsApp")
    if preview is not None:
        return preview

    decision = await _decide(request, use_case, DestinationKind.MESSAGING_NUMBER)
    return RedirectResponse(whatsapp_url(decision), status_code=status.HTTP_302_FOUND)


@router.get("/tg")
async def telegram_redirect(
    request: Request,
    use_case: ResolveDestinationUseCase = Depends(get_resolve_destination_use_case),
):
    """Redirect to the Telegram channel for the visitor's branch."""
    preview = _bot_response(request, "Contact Us", "Get in touch with our team via Telegram")
    if preview is not None:
        return preview

    decision = await _decide(request, use_case, DestinationKind.CHANNEL_NAME)
    return RedirectResponse(telegram_url(decision), status_code=status.HTTP_302_FOUND)


@router.get("/website")
async def website_redirect(
    request: Request,
    use_case: ResolveDestinationUseCase = Depends(get_resolve_destination_use_case),
    configuration_store: ConfigurationStore = Depends(get_configuration_store),
):
    """
    Send the visitor to the website for their branch.

    The configured presentation mode picks a plain redirect, a delayed
    page or a page with a link. target=tr|turkey forces the Turkey branch.
    """
    preview = _bot_response(
        request, "Visit Our Website", "Discover our services and get in touch with our team"
    )
    if preview is not None:
        return preview

    target = request.query_params.get("target", "").lower()
    forced = "TR" if target in TURKEY_TARGETS else None
    decision = await _decide(request, use_case, DestinationKind.WEBSITE_URL, forced_country=forced)

    config = await configuration_store.get_config()
    mode = config.redirect_presentation_mode
    if mode == "delayed":
        html = delayed_redirect_page(
            decision.destination, config.redirect_delay_ms, config.redirect_message
        )
        return HTMLResponse(html, status_code=status.HTTP_200_OK)
    if mode == "custom":
        html = custom_redirect_page(decision.destination, config.redirect_message)
        return HTMLResponse(html, status_code=status.HTTP_200_OK)
    return RedirectResponse(decision.destination, status_code=status.HTTP_302_FOUND)


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(container=Depends(get_container)) -> dict[str, Any]:
    """
    Health check endpoint for configuration, storage and geo-resolution.

    Returns:
        Overall status and per-service detail
    """
    config_health = await container.configuration_store.health_check()
    geo_health = await container.geo_resolution_service.health_check()

    healthy = config_health["status"] == "healthy" and geo_health["status"] == "healthy"
    return {
        "status": "healthy" if healthy else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {"config": config_health, "geo": geo_health},
    }


@router.get("/", status_code=status.HTTP_200_OK)
async def service_status(container=Depends(get_container)) -> dict[str, Any]:
    """Service status with storage health and geo-resolution statistics."""
    storage_health = await container.key_value_store.health_check()
    stats = container.geo_resolution_service.get_stats()

    return {
        "ok": True,
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": container.settings.environment_status(),
        "storage": storage_health,
        "geo": {**stats.model_dump(), "hit_rate": stats.hit_rate},
        "endpoints": {
            "whatsapp": "/wa",
            "telegram": "/tg",
            "website": "/website",
            "admin": "/admin/api",
            "health": "/health",
        },
    }
