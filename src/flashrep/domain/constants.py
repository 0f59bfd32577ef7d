"""Centralized constants for flashrep.

Scheduling constants and classification thresholds live here so every layer
imports from a single source of truth.
"""

# ---------- SM-2 ----------
MIN_EF = 1.3
DEFAULT_EF = 2.5
PASSING_QUALITY = 3  # quality < 3 is a lapse
MIN_QUALITY = 1
MAX_QUALITY = 5

FIRST_INTERVAL = 1  # days
SECOND_INTERVAL = 6  # days
LAPSE_INTERVAL = 1  # days

# ---------- Time ----------
DAY_MS = 24 * 60 * 60 * 1000

# ---------- Classification ----------
LEARNING_THRESHOLD = 5  # review_count at which a card counts as "reviewing"

# ---------- Sessions ----------
DEFAULT_CONFIDENCE = 3
ANALYTICS_TIMEOUT = 5.0  # seconds
