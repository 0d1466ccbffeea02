"""Real-time CLI dashboard for prerender monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import original_url, write_cli_log

console = Console()


class PrerenderInfo:
    """Info about a single prerendered request."""

    def __init__(self, url: str, user_agent: str, timestamp: datetime):
        self.url = url
        self.user_agent = user_agent[:40] + "..." if len(user_agent) > 40 else user_agent
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing crawler traffic and rendering-service errors."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[PrerenderInfo] = []
        self._max_recent = 8
        self._request_count = {"prerender": 0, "app": 0, "redirect": 0, "error": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_prerender(self, url: str, user_agent: str) -> None:
        """Log a request sent to the rendering service."""
        with self._lock:
            self._request_count["prerender"] += 1
            page = original_url(url, self.config.prerender.service_url)
            self._recent.insert(0, PrerenderInfo(page, user_agent, datetime.now()))
            self._recent = self._recent[: self._max_recent]
            self._refresh()
            write_cli_log("PRERENDER", page, user_agent=repr(user_agent))

    def log_passthrough(self, path: str) -> None:
        """Count a request handed to the wrapped app."""
        with self._lock:
            self._request_count["app"] += 1
            self._refresh()

    def log_redirect(self, url: str, location: str) -> None:
        """Log a rendering-service redirect relayed as 301."""
        with self._lock:
            self._request_count["redirect"] += 1
            self._refresh()
            write_cli_log(
                "REDIRECT",
                original_url(url, self.config.prerender.service_url),
                location=location,
            )

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            self._request_count["error"] += 1
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], route=route, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_recent_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Prerender Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Prerendered: {self._request_count['prerender']}", style="green")
        stats.append("  |  ")
        stats.append(f"App: {self._request_count['app']}", style="blue")
        stats.append("  |  ")
        stats.append(f"Redirects: {self._request_count['redirect']}", style="yellow")
        stats.append("  |  ")
        stats.append(f"Errors: {self._request_count['error']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_recent_panel(self) -> Panel:
        """Build the recent prerenders panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Crawler", ratio=1)
            table.add_column("Page", ratio=2)

            for info in self._recent:
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.user_agent,
                    info.url,
                )

            content = table
        else:
            content = Text("Waiting for crawlers...", style="dim")

        return Panel(content, title="[green]Prerendered[/green]", border_style="green")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"Rendering service: {self.config.prerender.service_url}",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
