"""Runtime settings read from environment variables."""

import os
import sys
from pathlib import Path

DEFAULT_PROJECT_FILE = "project.yml"

# API Gateway never returns more than 500 resources per page.
MAX_PAGE_LIMIT = 500


def get_project_path(override: str | None = None) -> Path:
    """Project file from the argument, DASH_PROJECT_PATH, or ./project.yml."""
    raw = override or os.environ.get("DASH_PROJECT_PATH") or DEFAULT_PROJECT_FILE
    return Path(raw).expanduser().resolve()


def is_interactive() -> bool:
    flag = os.environ.get("DASH_INTERACTIVE")
    if flag is not None:
        return flag.strip().lower() not in ("0", "false", "no", "off", "")
    return sys.stdin.isatty() and sys.stdout.isatty()


def get_page_limit() -> int:
    raw = os.environ.get("DASH_PAGE_LIMIT")
    if not raw:
        return MAX_PAGE_LIMIT
    try:
        limit = int(raw)
    except ValueError:
        raise ValueError(f"DASH_PAGE_LIMIT must be an integer, got {raw!r}") from None
    return max(1, min(limit, MAX_PAGE_LIMIT))
