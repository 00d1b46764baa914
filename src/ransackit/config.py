# Andy Zhao
"""
Package-level settings.

RANSACKIT_DEBUG=1 logs every best-model improvement inside the RANSAC loop
(the loop is hot, so this is off unless asked for).
"""
from __future__ import annotations

import os

RANSAC_DEBUG = os.environ.get("RANSACKIT_DEBUG", "0") == "1"

# Defaults used by the command-line front end
DEFAULT_SEED = 0
DEFAULT_WORKERS = 1
DEFAULT_INLIER_RATIO = 0.5
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
