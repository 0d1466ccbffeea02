"""Request routing logic - determines prerender vs the wrapped app."""

from dataclasses import dataclass

from core.config import PrerenderSettings
from core.crawlers import ESCAPED_FRAGMENT
from core.request_types import InboundRequest

PRERENDER = "prerender"
APP = "app"


@dataclass(frozen=True)
class RouteDecision:
    """Routing decision for a request."""

    route: str
    reason: str = ""

    @property
    def is_prerender(self) -> bool:
        return self.route == PRERENDER


class RouteDecider:
    """Decide whether a request should be served by the rendering service."""

    def __init__(self, settings: PrerenderSettings):
        self.crawler_user_agents = settings.crawler_user_agents
        self.extensions_to_ignore = settings.extensions_to_ignore

    def decide(self, request: InboundRequest) -> RouteDecision:
        """Return the route for a request. Pure, no I/O."""
        user_agent = request.user_agent
        if not user_agent:
            return RouteDecision(route=APP, reason="no user agent")
        if request.method != "GET":
            return RouteDecision(route=APP, reason=f"method {request.method}")

        wants_prerender = ""
        if ESCAPED_FRAGMENT in request.query_params:
            wants_prerender = "escaped fragment"
        elif self.is_bot(user_agent):
            wants_prerender = "crawler user agent"
        elif request.bufferbot:
            wants_prerender = "bufferbot header"

        # Static assets never go to the rendering service, even for bots
        if self.has_ignored_extension(request.path):
            return RouteDecision(route=APP, reason="ignored extension")

        if wants_prerender:
            return RouteDecision(route=PRERENDER, reason=wants_prerender)
        return RouteDecision(route=APP, reason="not a crawler")

    def should_prerender(self, request: InboundRequest) -> bool:
        return self.decide(request).is_prerender

    def is_bot(self, user_agent: str) -> bool:
        """Check if the user agent contains any crawler name."""
        user_agent = user_agent.lower()
        return any(name in user_agent for name in self.crawler_user_agents)

    def has_ignored_extension(self, path: str) -> bool:
        """Check if the path contains any ignored extension."""
        path = path.lower()
        return any(ext in path for ext in self.extensions_to_ignore)
