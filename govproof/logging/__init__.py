"""
Logging Module
==============

Structured logging using structlog with JSON output for production
and colored console output for development.

Usage:
    from govproof.logging import get_logger, setup_logging

    # Setup at application start
    setup_logging()

    # Get logger for a module
    logger = get_logger(__name__)

    # Log with context (never log witness or private input values)
    logger.info("zk_proof_generated", circuit="compute_threshold")
"""

from govproof.logging.logger import (
    bind_context,
    censor_sensitive,
    clear_context,
    get_logger,
    log_context,
    setup_logging,
)


__all__ = [
    "get_logger",
    "setup_logging",
    "bind_context",
    "clear_context",
    "log_context",
    "censor_sensitive",
]
