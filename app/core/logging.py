"""
Process-wide logging setup.

Everything goes to stdout; Gunicorn's access/error logs land in the same
stream (see gunicorn.conf.py).
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
