"""Admin JSON API for runtime configuration."""

import hmac
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from geo_redirect.adapters.inbound.http.request_context import get_client_ip
from geo_redirect.application.dtos.configuration import (
    ConfigurationResponse,
    ConfigurationUpdateRequest,
)
from geo_redirect.application.use_cases.configuration_store import ConfigurationStore
from geo_redirect.domain.exceptions import StorageError, ValidationError
from geo_redirect.infrastructure.config.settings import Settings
from geo_redirect.infrastructure.logging.logger import log_event
from geo_redirect.infrastructure.wiring.dependencies import (
    get_configuration_store,
    get_settings,
)


def require_admin_token(
    token: Optional[str] = Query(None),
    x_admin_token: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Check the admin token from the query string or X-Admin-Token header.

    Raises:
        HTTPException: 401 if the token is missing or wrong
    """
    supplied = token or x_admin_token or ""
    expected = settings.admin_token
    if not expected or not hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


router = APIRouter(prefix="/admin/api", dependencies=[Depends(require_admin_token)])


def _validation_failed(error: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "success": False,
            "error": str(error),
            "errors": [field_error.to_dict() for field_error in error.errors],
        },
    )


def _storage_failed(error: StorageError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={"success": False, "error": str(error)},
    )


@router.get("/config", response_model=ConfigurationResponse)
async def get_configuration(
    configuration_store: ConfigurationStore = Depends(get_configuration_store),
    settings: Settings = Depends(get_settings),
) -> ConfigurationResponse:
    """Get the current configuration and environment status."""
    config = await configuration_store.get_config()
    return ConfigurationResponse(
        config=config.to_dict(), environment=settings.environment_status()
    )


@router.post("/config", response_model=ConfigurationResponse)
async def update_configuration(
    update: ConfigurationUpdateRequest,
    request: Request,
    configuration_store: ConfigurationStore = Depends(get_configuration_store),
) -> ConfigurationResponse:
    """
    Apply a partial configuration update.

    Raises:
        HTTPException: 400 listing every invalid field, 503 on storage failure
    """
    updates = update.to_updates()
    try:
        config = await configuration_store.update_config(updates)
    except ValidationError as e:
        raise _validation_failed(e) from e
    except StorageError as e:
        raise _storage_failed(e) from e

    log_event("admin", "config_updated", fields=sorted(updates), ip=get_client_ip(request))
    return ConfigurationResponse(
        message="Configuration updated successfully", config=config.to_dict()
    )


@router.post("/reset", response_model=ConfigurationResponse)
async def reset_configuration(
    request: Request,
    configuration_store: ConfigurationStore = Depends(get_configuration_store),
) -> ConfigurationResponse:
    """Reset configuration to environment-level defaults."""
    try:
        config = await configuration_store.reset_config()
    except ValidationError as e:
        raise _validation_failed(e) from e
    except StorageError as e:
        raise _storage_failed(e) from e

    log_event("admin", "config_reset", ip=get_client_ip(request))
    return ConfigurationResponse(message="Configuration reset to defaults", config=config.to_dict())


@router.get("/health")
async def admin_health(
    configuration_store: ConfigurationStore = Depends(get_configuration_store),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """Get configuration store health and environment status."""
    return {
        "success": True,
        "health": {
            "config": await configuration_store.health_check(),
            "environment": settings.environment_status(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }
