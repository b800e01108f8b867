import sys
import os
from pathlib import Path
from loguru import logger

from unitresolve.config import get_config

# Flag to track if logging has been configured
_logging_configured = False


def _env_flag(key: str) -> bool:
    return os.getenv(key, "").lower() in ("1", "true", "yes")


def setup_logging(level=None, suppress_console=None, enable_file_logging=None, force=False):
    """
    Configures the global logger.

    By default, only console logging is enabled. File logging is opt-in via
    UNITRESOLVE_FILE_LOGGING=1 environment variable or enable_file_logging=True.

    Args:
        level: Logging level. If None, use the configured log_level (UNITRESOLVE_LOG_LEVEL).
        suppress_console: If True, suppress console logging. If None, check UNITRESOLVE_MACHINE_MODE env var.
        enable_file_logging: If True, enable file logging. If None, check UNITRESOLVE_FILE_LOGGING env var.
        force: Reconfigure even if logging was already set up.
    """
    global _logging_configured

    # Only configure once to avoid duplicate handlers
    if _logging_configured and not force:
        return
    _logging_configured = True

    logger.remove()

    if level is None:
        level = get_config().log_level

    if suppress_console is None:
        suppress_console = _env_flag("UNITRESOLVE_MACHINE_MODE")

    # Stream 1: Human-readable console output (only if not suppressed)
    if not suppress_console:
        logger.add(
            sys.stderr,
            level=level,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
            colorize=True
        )

    # Stream 2: File logging is OPT-IN only
    if enable_file_logging is None:
        enable_file_logging = _env_flag("UNITRESOLVE_FILE_LOGGING")

    if enable_file_logging:
        log_dir = Path(os.getenv("UNITRESOLVE_LOG_DIR", Path.home() / ".unitresolve" / "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "unitresolve.log",
            level="INFO",
            rotation="10 MB",
            retention="1 day",
            compression="gz",
            catch=True,
            serialize=False
        )


# Configure the logger on import (will check env var for machine mode)
setup_logging()
