from __future__ import annotations

import sys

_MISSING_BROWSER_ERROR_HINTS = (
    "executable doesn't exist",
    "executable does not exist",
    "download new browsers",
    "playwright install",
    "could not find browser",
    "failed to launch chromium because executable",
)

MINIMUM_PYTHON = (3, 11)


def is_missing_browser_error(exc: Exception) -> bool:
    message = str(exc).lower()
    return any(hint in message for hint in _MISSING_BROWSER_ERROR_HINTS)


def missing_browser_message(exc: Exception) -> str:
    first_line = str(exc).strip().splitlines()[0] if str(exc).strip() else exc.__class__.__name__
    return (
        "Chromium for Playwright is not installed. "
        f"Run `playwright install chromium` and retry. ({first_line})"
    )


def ensure_supported_python(version_info: tuple[int, ...] | None = None) -> None:
    current = tuple(version_info or sys.version_info[:3])
    if current[:2] < MINIMUM_PYTHON:
        raise SystemExit(
            "simmer requires Python 3.11+. "
            f"Current interpreter: {sys.executable} (Python {'.'.join(str(part) for part in current)})"
        )


def looks_like_url(value: str) -> bool:
    lowered = value.strip().lower()
    return lowered.startswith(("http://", "https://", "file://"))
