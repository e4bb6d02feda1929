"""
Run settings for the sloop puzzle search.

Priority for every setting:
1) command-line flag (handled by sloop.cli)
2) environment variable
3) the default below
"""

from __future__ import annotations

import os

# ==== Output ==============================================================

DEFAULT_OUTPUT_PATH: str = "sloop_puzzles.txt"
OUTPUT_PATH_ENV: str = "SLOOP_OUTPUT_PATH"

# ==== Search ==============================================================

# Puzzles with more clues than this are too easy to be interesting.
DEFAULT_MAX_CLUES: int = 10
MAX_CLUES_ENV: str = "SLOOP_MAX_CLUES"

# The first clue always sits in the top-left 3x3 block.
INITIAL_CLUE_LOCATIONS = (0, 1, 2, 6, 7, 8, 12, 13, 14)

# ==== Progress ============================================================

# Log a progress line every N evaluated candidates.
DEFAULT_PROGRESS_INTERVAL: int = 10_000_000
PROGRESS_INTERVAL_ENV: str = "SLOOP_PROGRESS_INTERVAL"


def resolve_int_setting(env_name: str, default: int) -> int:
    """
    Positive integer from the environment, or *default* when the variable
    is unset, unparsable or not positive.
    """
    raw = os.getenv(env_name)
    if raw is None:
        return default

    try:
        value = int(raw)
        if value > 0:
            return value
    except (TypeError, ValueError):
        pass
    return default


def resolve_output_path() -> str:
    raw = os.getenv(OUTPUT_PATH_ENV)
    if raw is None or not raw.strip():
        return DEFAULT_OUTPUT_PATH
    return raw.strip()


def resolve_max_clues() -> int:
    return resolve_int_setting(MAX_CLUES_ENV, DEFAULT_MAX_CLUES)


def resolve_progress_interval() -> int:
    return resolve_int_setting(PROGRESS_INTERVAL_ENV, DEFAULT_PROGRESS_INTERVAL)
