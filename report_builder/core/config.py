# report_builder/core/config.py
"""Runtime settings for the report builder, read from the environment."""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# ===== PIVOT OUTPUT =====
# Synthetic column that clusters grouped value fields in the output
GROUP_LABEL_COLUMN = os.getenv("REPORT_GROUP_LABEL_COLUMN", "指标分组")

# Label used for value fields that are not grouped when some other field is
DEFAULT_GROUP_NAME = os.getenv("REPORT_DEFAULT_GROUP_NAME", "默认分组")

# Text placed in the first row field of a total row
TOTAL_ROW_LABEL = os.getenv("REPORT_TOTAL_LABEL", "总计")


# ===== METRIC CONFIGURATION =====
GROUP_NAME_MAX_LENGTH = int(os.getenv("REPORT_GROUP_NAME_MAX_LENGTH", "50"))

# Baseline names that route predefined baseline conditions to the history group
HISTORY_BASELINE_NAMES = ("历史价", "history")


# ===== REPORT METADATA =====
REPORT_NAME_MAX_LENGTH = 255


# ===== LOGGING =====
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for scripts and interactive sessions."""
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)
