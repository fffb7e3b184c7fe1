#!/usr/bin/env python3
"""Apply pending migrations: `python run_migrations.py [revision]`."""

import logging
import sys

from followgraph.core.config import settings
from followgraph.core.logging_config import setup_logging
from followgraph.db.migrate import upgrade

if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL)
    try:
        upgrade(sys.argv[1] if len(sys.argv) > 1 else "head")
    except Exception as e:
        logging.getLogger("run_migrations").error(f"Error running migrations: {str(e)}")
        sys.exit(1)
