import logging
import sys

def setup_logger(name: str = "guardify") -> logging.Logger:
    log = logging.getLogger(name)
    if log.hasHandlers():
        return log

    log.setLevel(logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"))
    log.addHandler(handler)
    return log

logger = setup_logger()
