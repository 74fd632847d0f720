"""
clover.api.__main__ — Entry point for ``python -m clover.api``
===============================================================

Wiring:
1. Load .env (secrets).
2. Load config.yaml (soft settings) and validate the session secret.
3. Serve ``clover.api.main:app`` with uvicorn on the configured port.

Run with::

    python -m clover.api
"""

from __future__ import annotations

import logging
import sys

import uvicorn
from dotenv import load_dotenv

from clover.config import config_path_from_env, load_config, load_session_secret

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("clover")


def main() -> None:
    """Validate settings up front, then hand over to uvicorn."""

    # 1. Environment variables (secrets).
    load_dotenv()

    # 2. Soft configuration + secret.
    try:
        cfg = load_config(config_path_from_env())
        load_session_secret()
    except (FileNotFoundError, KeyError, RuntimeError) as exc:
        logger.critical("Cannot start: %s", exc)
        sys.exit(1)

    logger.info("Starting %s API on port %d", cfg.community_name, cfg.api_port)

    # 3. Serve (blocking).
    uvicorn.run("clover.api.main:app", host="0.0.0.0", port=cfg.api_port, log_config=None)


if __name__ == "__main__":
    main()
