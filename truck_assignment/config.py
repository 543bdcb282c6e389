# config.py
# Settings for talking to the logistics backend. Every value can be
# overridden with an environment variable.

import logging
import os

API_BASE_URL = os.environ.get("TRUCK_ASSIGNMENT_API_URL", "http://localhost:8080/api")
REQUEST_TIMEOUT = float(os.environ.get("TRUCK_ASSIGNMENT_TIMEOUT", "10"))
LOG_LEVEL = os.environ.get("TRUCK_ASSIGNMENT_LOG_LEVEL", "INFO").upper()

LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"

# Shown when a submission never got an answer from the server
RETRY_MESSAGE = "Failed to assign inventory. Please try again."
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please log in again."


def configure_logging(level=None):
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
