"""CLI entry point for satnogs-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import Config, load_config
from core.exceptions import ConfigurationError
from ui.dashboard import Dashboard
from ui.log_utils import FileLogger, clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    args = sys.argv[1:]

    if "--help" in args or "-h" in args:
        _print_help()
        return

    try:
        config = load_config()
    except ConfigurationError as e:
        console.print("[red][ERROR][/red] Invalid configuration:")
        console.print(f"[dim]{e}[/dim]")
        sys.exit(1)

    if "--config" in args:
        _print_config(config)
        return

    headless = "--no-dashboard" in args

    clear_logs()
    write_cli_log("STARTUP", "Configuration loaded", context=config.context)
    write_cli_log("STARTUP", "Allowed origin", origin=config.allowed_origin)
    write_cli_log("STARTUP", "Network API base", url=config.network_api_url)
    write_cli_log("STARTUP", "DB API base", url=config.db_api_url)

    import uvicorn

    dashboard = None if headless else Dashboard(config)
    app = create_app(config, dashboard or FileLogger())

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level="info" if headless else "warning",
    )
    server = uvicorn.Server(uvicorn_config)

    if dashboard:
        dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", port=config.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        if dashboard:
            dashboard.stop()


def _print_config(config: Config):
    """Print the effective configuration."""
    mode = "development" if config.is_development else "production"
    console.print(f"[bold]Context:[/bold] {config.context} ({mode})")
    console.print(f"[bold]Allowed origin:[/bold] {config.allowed_origin}")
    console.print(f"[bold]Network API:[/bold] {config.network_api_url}")
    console.print(f"[bold]DB API:[/bold] {config.db_api_url}")
    console.print(f"[bold]Listen:[/bold] {config.host}:{config.port}")


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]SatNOGS Proxy[/bold cyan]

Re-exposes the SatNOGS Network and DB APIs under /api/network/... and
/api/db/... with CORS headers for browser frontends.

[bold]Usage:[/bold]
    satnogs-proxy                  Start with live dashboard
    satnogs-proxy --no-dashboard   Start headless (logs to logs/proxy.log)
    satnogs-proxy --config         Show effective configuration
    satnogs-proxy --help           Show this help

[bold]Environment:[/bold]
    SATNOGS_NETWORK_API_URL   Network API base (default https://network.satnogs.org/api)
    SATNOGS_DB_API_URL        DB API base (default https://db.satnogs.org/api)
    ALLOWED_ORIGIN_URL        Allowed CORS origin outside development (default *)
    CONTEXT                   Set to "dev" for permissive development CORS
    PROXY_HOST / PROXY_PORT   Listen address (default 127.0.0.1:8888)
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
