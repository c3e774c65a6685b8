"""
CLI entrypoint for the expired-session purge. Run from cron, e.g.:

  python -m app.session_purge

Or hourly: 0 * * * * cd /path/to/accountgate && .venv/bin/python -m app.session_purge
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.services.session_purge import run_session_purge
from app.services.sessions import SessionManager
from app.stores.sql import SqlAuthStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Run the purge: delete sessions whose expires_at has passed."""
    settings = get_settings()
    db = SessionLocal()
    try:
        manager = SessionManager(SqlAuthStore(db))
        deleted = run_session_purge(manager, settings)
        logger.info("Session purge completed: sessions_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Session purge failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
