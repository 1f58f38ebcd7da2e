"""Shared logging utilities."""

import json
import shutil
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Mapping
from uuid import uuid4

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "proxy.log"


def write_proxy_log(
    api_type: str,
    target_url: str,
    params: Mapping[str, str],
    *,
    log_root: Path = LOG_ROOT,
) -> Path | None:
    """Write a single proxied request log entry; None if it could not be written."""
    payload = {
        "timestamp": _utc_now(),
        "target": api_type,
        "url": target_url,
        "params": dict(params),
    }
    try:
        return _write_json(log_root / api_type, payload)
    except OSError:
        return None


def write_cli_log(
    level: str,
    message: str,
    *,
    log_file: Path | None = None,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file. Best-effort: I/O errors are dropped."""
    log_file = log_file or CLI_LOG_FILE
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
        pass


def clear_logs(log_root: Path = LOG_ROOT) -> None:
    """Remove logs left by a previous run."""
    if log_root.exists():
        shutil.rmtree(log_root)


class FileLogger:
    """Headless request logger writing to the CLI log file only."""

    def __init__(self, log_file: Path | None = None) -> None:
        self._log_file = log_file

    def log_request(self, method: str, path: str) -> None:
        write_cli_log("REQUEST", path, log_file=self._log_file, method=method)

    def log_proxy(self, api_type: str, target_url: str, params: Mapping[str, str]) -> None:
        write_cli_log(
            "PROXY",
            target_url,
            log_file=self._log_file,
            api=api_type,
            params=json.dumps(dict(params)),
        )

    def log_upstream(
        self,
        api_type: str,
        target_url: str,
        status: int,
        content_type: str | None,
        *,
        path: str,
    ) -> None:
        write_cli_log(
            "UPSTREAM",
            path,
            log_file=self._log_file,
            api=api_type,
            url=target_url,
            status=status,
            content_type=content_type,
        )

    def log_error(self, route: str, status: int, message: str) -> None:
        write_cli_log("ERROR", message[:200], log_file=self._log_file, route=route, status=status)


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str))
    return file_path


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()
