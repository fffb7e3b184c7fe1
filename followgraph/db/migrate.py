# followgraph/db/migrate.py
"""Apply alembic migrations for the follows schema from a source checkout."""
import logging
import os
from typing import Optional

from alembic import command
from alembic.config import Config

from followgraph.core.config import settings

logger = logging.getLogger(__name__)

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def alembic_config(project_root: str = PROJECT_ROOT) -> Config:
    cfg = Config(os.path.join(project_root, "alembic.ini"))
    cfg.set_main_option("script_location", os.path.join(project_root, "alembic"))
    return cfg


def upgrade(revision: str = "head", cfg: Optional[Config] = None) -> None:
    """Upgrade the configured database to `revision`."""
    cfg = cfg or alembic_config()
    # never log credentials
    target = settings.DATABASE_URL.rsplit("@", 1)[-1]
    logger.info(f"Upgrading {target} to {revision}")
    command.upgrade(cfg, revision)
    logger.info("Migrations completed")
