"""
Application startup utilities: load .env early and configure logging.

This module should be imported as early as possible (before accessing environment variables)
so python-dotenv loads the .env file into the process environment during local/dev runs.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

# Real environment variables always win over values from .env
DOTENV_PATH = os.path.join(os.getcwd(), ".env")
DOTENV_LOADED = load_dotenv(dotenv_path=DOTENV_PATH, override=False)

# Basic logging configuration if not configured by the host
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

logger = logging.getLogger("startup")
logger.info("Startup initialized. .env loaded=%s", DOTENV_LOADED)
