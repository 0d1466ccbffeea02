"""Header construction for rendering-service requests and relayed responses."""

from collections.abc import Iterable

from core.crawlers import X_PRERENDER_TOKEN

# Hop-by-hop headers that should NOT be forwarded (RFC 2616)
HOP_BY_HOP_HEADERS = {
    b"connection",
    b"keep-alive",
    b"proxy-authenticate",
    b"proxy-authorization",
    b"te",
    b"trailers",
    b"transfer-encoding",
    b"upgrade",
}

# The HTTP client hands over a decoded body, so these no longer describe it
BODY_FRAMING_HEADERS = {b"content-length", b"content-encoding"}


class HeaderBuilder:
    """Build upstream request headers and filter relayed response headers."""

    def build_render_headers(self, user_agent: str, token: str = "") -> dict[str, str]:
        """Copy the crawler's User-Agent and add the service token if any."""
        upstream = {"User-Agent": user_agent}
        if token:
            upstream[X_PRERENDER_TOKEN] = token
        return upstream

    def response_headers(
        self, headers: Iterable[tuple[bytes, bytes]]
    ) -> list[tuple[bytes, bytes]]:
        """Keep every end-to-end header, repeated names included.

        Values are raw bytes as received and are never re-encoded.
        """
        return [
            (key, value)
            for key, value in headers
            if key.lower() not in HOP_BY_HOP_HEADERS
            and key.lower() not in BODY_FRAMING_HEADERS
        ]
