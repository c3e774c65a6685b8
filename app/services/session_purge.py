"""Session purge: delete sessions whose expires_at has passed."""

import logging
from typing import TYPE_CHECKING

from app.services.sessions import SessionManager

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def run_session_purge(manager: SessionManager, settings: "Settings") -> int:
    """
    Delete expired sessions. Expired rows never resolve, so this only reclaims space.

    Returns the number of sessions deleted. Idempotent: safe to run repeatedly.
    """
    if not settings.SESSION_PURGE_ENABLED:
        logger.info("Session purge is disabled (SESSION_PURGE_ENABLED=false); skipping.")
        return 0

    deleted_count = manager.purge_expired()
    if deleted_count > 0:
        logger.info("Session purge run: sessions_deleted=%s", deleted_count)
    return deleted_count
