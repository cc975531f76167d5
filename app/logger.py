# app/logger.py
# Logging: console + run log (INFO/WARNING only) + error log (ERROR+), all under the "jobsync" tree.
import logging
import os

from app.config import get_settings

LOGGER_NAME = "jobsync"
_FMT = "%Y-%m-%d %H:%M:%S"


class InfoOnlyFilter(logging.Filter):
    def filter(self, record):
        # INFO and WARNING pass, ERROR and CRITICAL go to error.log only
        return record.levelno < logging.ERROR


def configure_logging(log_dir: str | None = None) -> logging.Logger:
    log_dir = log_dir or get_settings().log_dir
    os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)  # capture everything, handlers filter
    logger.propagate = False

    # drop handlers from a previous call (uvicorn --reload)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG)
    console.setFormatter(logging.Formatter("[%(asctime)s] %(name)s %(message)s", _FMT))
    logger.addHandler(console)

    run_file = logging.FileHandler(os.path.join(log_dir, "run.log"), encoding="utf-8", mode="a")
    run_file.setLevel(logging.INFO)
    run_file.addFilter(InfoOnlyFilter())
    run_file.setFormatter(logging.Formatter("[%(asctime)s] %(message)s", _FMT))
    logger.addHandler(run_file)

    error_file = logging.FileHandler(os.path.join(log_dir, "error.log"), encoding="utf-8", mode="a")
    error_file.setLevel(logging.ERROR)
    error_file.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s %(message)s", _FMT))
    logger.addHandler(error_file)

    return logger
