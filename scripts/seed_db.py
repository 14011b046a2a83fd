from __future__ import annotations

import importlib
import logging
from pathlib import Path

from class_attendance.config import get_settings_module
from class_attendance.database.bootstrap import apply_sql_file
from class_attendance.main import configure_logging

logger = logging.getLogger("class_attendance.scripts.seed_db")


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    seed_path = Path(__file__).resolve().parents[1] / "database" / "seed.sql"
    apply_sql_file(db_config, sql_path=seed_path)
    logger.info("Seeded database %s", db_config.get("database"))


if __name__ == "__main__":
    main()
