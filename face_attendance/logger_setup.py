import logging
import sys
from logging.handlers import RotatingFileHandler


class RejectWarningFilter(logging.Filter):
    """Keeps per-frame rejection warnings out of the console."""

    def filter(self, record):
        if record.levelno == logging.WARNING and 'REJECTED' in record.getMessage():
            return False
        return True


def setup_logging(config):
    """Configures the root logger."""
    log_level = config.get('Logging', 'level', fallback='INFO').upper()
    log_file = config.get('Paths', 'log_file', fallback=None)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Remove default handlers
    for h in logger.handlers[:]:
        logger.removeHandler(h)

    # File handler - logs everything at configured level
    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=5*1024*1024, backupCount=2)
        file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    # Console handler - check-ins and errors, no rejection spam
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.addFilter(RejectWarningFilter())
    console_formatter = logging.Formatter('%(levelname)s: %(message)s')
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    logging.info("Logging configured - console shows check-ins, hides rejection spam")
    return logger
