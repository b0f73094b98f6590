import logging
import os
import sys
from pathlib import Path


def set_logger(log_name="diskbench", log_file=None, level=logging.INFO):
    logger = logging.getLogger(log_name)
    formatter = logging.Formatter("%(asctime)s %(message)s")

    if not logger.handlers:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)
        logger.propagate = False

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        attached = [h.baseFilename for h in logger.handlers if isinstance(h, logging.FileHandler)]
        if os.path.abspath(log_file) not in attached:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    logger.setLevel(level)

    return logger
