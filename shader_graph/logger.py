import logging
import sys

# Package root, so module loggers (logging.getLogger(__name__)) propagate here
LOGGER_NAME = "shader_graph"

def get_logger() -> logging.Logger:
    """Get the standard logger for Shader Graph."""
    return logging.getLogger(LOGGER_NAME)

def setup_logger(level=logging.INFO):
    """
    Configure the Shader Graph logger.

    Args:
        level: Logging level (default: INFO)
    """
    logger = get_logger()
    logger.setLevel(level)

    # Remove existing handlers to prevent duplicates
    if logger.handlers:
        logger.handlers.clear()

    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(level)

    # Format: [ShaderGraph] [Level] Message
    formatter = logging.Formatter('[ShaderGraph] [%(levelname)s] %(message)s')
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    return logger
