"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_prerender(self, url: str, user_agent: str) -> None: ...
    def log_passthrough(self, path: str) -> None: ...
    def log_redirect(self, url: str, location: str) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
