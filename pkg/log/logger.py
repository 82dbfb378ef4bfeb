import logging


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Logger factory for infrastructure packages (db, http clients)."""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
