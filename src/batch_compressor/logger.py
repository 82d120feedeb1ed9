import logging
import sys

from batch_compressor.settings import load_log_level


def setup_logger(level: int = logging.INFO, name: str = "batch_compressor") -> logging.Logger:
    """Create or update the project logger.

    - BATCH_COMPRESSOR_LOG_LEVEL overrides ``level`` on every call; an unknown
      name raises ConfigError, as load_settings() does.
    - Keeps exactly one stderr StreamHandler on the base logger; repeated calls
      update its formatter instead of stacking handlers.
    """
    logger = logging.getLogger(name)

    env_level = load_log_level()
    if env_level:
        level = logging.getLevelName(env_level)
    logger.setLevel(level)

    stream_handler: logging.StreamHandler | None = None
    for h in list(logger.handlers):
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr:
            stream_handler = h

    if stream_handler is None:
        stream_handler = logging.StreamHandler(stream=sys.stderr)
        logger.addHandler(stream_handler)

    stream_handler.setFormatter(
        logging.Formatter(
            fmt="[%(asctime)s] %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    # Do not propagate beyond the project logger
    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    base = setup_logger()
    return base if not name else base.getChild(name)
