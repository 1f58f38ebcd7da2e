"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock
from typing import Mapping

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log, write_proxy_log

console = Console()


class RequestInfo:
    """Info about a single proxied request."""

    def __init__(self, api_type: str, url: str, params: Mapping[str, str], timestamp: datetime):
        self.api_type = api_type
        self.target_url = url
        self.url = url[:80] + "..." if len(url) > 80 else url
        self.params = ", ".join(f"{k}={v}" for k, v in params.items())
        self.status: int | None = None
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing proxied SatNOGS requests."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._requests: list[RequestInfo] = []
        self._max_requests = 10
        self._request_count = {"network": 0, "db": 0, "rejected": 0}
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

    def log_request(self, method: str, path: str) -> None:
        write_cli_log("REQUEST", path, method=method)

    def log_proxy(self, api_type: str, target_url: str, params: Mapping[str, str]) -> None:
        """Log a request forwarded to a SatNOGS API."""
        with self._lock:
            self._request_count[api_type] = self._request_count.get(api_type, 0) + 1
            self._requests.insert(0, RequestInfo(api_type, target_url, params, datetime.now()))
            self._requests = self._requests[: self._max_requests]

            write_proxy_log(api_type, target_url, params)
            write_cli_log("PROXY", target_url, api=api_type)

            self._refresh()

    def log_upstream(
        self,
        api_type: str,
        target_url: str,
        status: int,
        content_type: str | None,
        *,
        path: str,
    ) -> None:
        """Record the upstream status on the matching recent request."""
        with self._lock:
            for info in reversed(self._requests):
                if info.target_url == target_url and info.status is None:
                    info.status = status
                    break
            self._refresh()
            write_cli_log("UPSTREAM", path, api=api_type, status=status, content_type=content_type)

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            if route in ("method", "route"):
                self._request_count["rejected"] += 1
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
        layout["body"].update(self._build_requests_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("SatNOGS Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Network: {self._request_count['network']}", style="blue")
        stats.append("  |  ")
        stats.append(f"DB: {self._request_count['db']}", style="magenta")
        stats.append("  |  ")
        stats.append(f"Rejected: {self._request_count['rejected']}", style="yellow")
        stats.append("  |  ")
        stats.append(f"Origin: {self.config.allowed_origin}", style="dim")

        return Panel(stats, style="cyan")

    def _build_requests_panel(self) -> Panel:
        """Build recent requests panel."""
        if self._requests:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("API", width=8)
            table.add_column("Status", width=6)
            table.add_column("URL", ratio=2)
            table.add_column("Params", ratio=1)

            for req in self._requests:
                if req.status is None:
                    status = Text("...", style="dim")
                else:
                    status = Text(str(req.status), style="red" if req.status >= 400 else "green")
                table.add_row(
                    req.timestamp.strftime("%H:%M:%S"),
                    req.api_type,
                    status,
                    req.url,
                    req.params[:40] + "..." if len(req.params) > 40 else req.params,
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent Requests[/blue]", border_style="blue")

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
                f"Point the frontend at http://{self.config.host}:{self.config.port}/api/...",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
