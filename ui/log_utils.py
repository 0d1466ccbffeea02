"""Shared logging utilities."""

from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from urllib.parse import unquote_plus

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "prerender.log"


def write_cli_log(
    level: str,
    message: str,
    *,
    log_file: Path = CLI_LOG_FILE,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with log_file.open("a") as f:
            f.write(line)
    except OSError:
        # Diagnostics are best-effort; a read-only cwd must not fail requests
        pass


def clear_logs(log_file: Path = CLI_LOG_FILE) -> None:
    """Remove the previous run's log file."""
    log_file.unlink(missing_ok=True)


def original_url(api_url: str, service_url: str) -> str:
    """Recover the crawled page URL from a rendering-service URL."""
    prefix = service_url if service_url.endswith("/") else service_url + "/"
    if not api_url.startswith(prefix):
        return api_url
    return unquote_plus(api_url[len(prefix):])


def mask(value: str) -> str:
    """Hide a secret for display, keeping a few characters for recognition."""
    if not value:
        return ""
    return _mask(value)


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]
