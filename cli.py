"""CLI entry point for prerender-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, load_config
from core.exceptions import ConfigurationError
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, mask, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    if "--help" in sys.argv[1:] or "-h" in sys.argv[1:]:
        _print_help()
        return

    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    app_path = None
    args = sys.argv[1:]
    while args:
        arg = args.pop(0)

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            console.print(f"[bold]Service:[/bold] {config.prerender.service_url}")
            console.print(f"[bold]Token:[/bold] {mask(config.prerender.token) or '[dim]none[/dim]'}")
            return

        if arg == "--app":
            if not args:
                console.print("[red][ERROR][/red] --app needs a module:attribute value")
                sys.exit(1)
            app_path = args.pop(0)
            continue

        console.print(f"[red][ERROR][/red] Unknown argument: {arg}")
        sys.exit(1)

    import uvicorn
    from uvicorn.importer import ImportFromStringError, import_from_string

    wrapped = None
    if app_path:
        try:
            wrapped = import_from_string(app_path)
        except ImportFromStringError as e:
            console.print(f"[red][ERROR][/red] {e}")
            sys.exit(1)

    clear_logs()
    dashboard = Dashboard(config)
    app = create_app(config, dashboard, wrapped)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", port=config.proxy.port, app=app_path or "-")
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Prerender Proxy[/bold cyan]

Serves crawlers a prerendered page from the rendering service,
every other request goes to the wrapped app.

[bold]Usage:[/bold]
    prerender-proxy                     Start with live dashboard (no app: 404)
    prerender-proxy --app module:attr   Wrap the given ASGI app
    prerender-proxy --config            Show config location and service
    prerender-proxy --help              Show this help

[bold]Environment:[/bold]
    PRERENDER_SERVICE_URL   Rendering service base URL
    PRERENDER_TOKEN         Sent as X-Prerender-Token
    PRERENDER_USERNAME      Basic auth username
    PRERENDER_PASSWORD      Basic auth password
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
