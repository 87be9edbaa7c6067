import logging
from typing import Optional
from fastapi import Depends, Header, Request
from .admin import is_authed
from .config import Settings
from .errors import AuthError

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_admin(
    x_admin_key: Optional[str] = Header(None),
    settings: Settings = Depends(get_app_settings),
):
    """Shared-secret check on the ``x-admin-key`` header (exact match)."""
    if not is_authed(x_admin_key, settings.ADMIN_PASSWORD):
        logger.warning("Rejected admin request with %s key", "bad" if x_admin_key else "missing")
        raise AuthError()
