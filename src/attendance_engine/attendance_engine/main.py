from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module

from .common.logging_setup import configure_logging
from .container import Container, build_container
from .core import constants
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)


def create_engine() -> Container:
    """Load settings (APP_ENV + .env), configure logging and wire services."""

    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    db_config = getattr(settings, "DB_CONFIG")

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    return build_container(
        db_config=db_config,
        business_utc_offset=getattr(settings, "BUSINESS_UTC_OFFSET", constants.DEFAULT_BUSINESS_UTC_OFFSET),
        allocation_epsilon=float(getattr(settings, "ALLOCATION_EPSILON", constants.ALLOCATION_EPSILON)),
    )
