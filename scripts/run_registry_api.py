"""Helper to launch the registry API with the correct import paths."""

from __future__ import annotations

import argparse
import errno
import logging
import socket
import sys
from pathlib import Path
from typing import Optional

import uvicorn

ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from registry_api.config.settings import get_api_settings  # noqa: E402


LOGGER = logging.getLogger("registry_api.launcher")

# WSAEACCES and WSAEADDRINUSE
_WINDOWS_BIND_ERRORS = {10013, 10048}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the registry API locally.")
    parser.add_argument("--host", default=None, help="Bind address (overrides env).")
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind to (overrides env).",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable uvicorn auto-reload (overrides env).",
    )
    parser.add_argument(
        "--log-level",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        default=None,
        help="Log level for registry and uvicorn output (overrides env).",
    )
    return parser.parse_args()


def bind_problem(host: str, port: int) -> Optional[str]:
    """Describe why uvicorn could not listen on ``host:port``, or return None."""

    try:
        family = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)[0][0]
    except socket.gaierror as exc:
        return f"cannot resolve host '{host}': {exc}"
    try:
        with socket.create_server((host, port), family=family):
            return None
    except OSError as exc:
        if exc.errno == errno.EADDRINUSE or getattr(exc, "winerror", None) in _WINDOWS_BIND_ERRORS:
            return f"{host}:{port} is already in use (pick another with --port or REGISTRY_API_PORT)"
        return f"cannot bind {host}:{port}: {exc}"


def main() -> None:
    args = parse_args()
    settings = get_api_settings()

    host = args.host or settings.host
    port = args.port or settings.port
    reload = args.reload or settings.reload
    log_level = (args.log_level or settings.log_level).lower()
    uvicorn_level = "debug" if log_level == "trace" else log_level

    root_level = getattr(logging, uvicorn_level.upper(), logging.INFO)
    logging.basicConfig(level=root_level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(root_level)

    problem = bind_problem(host, port)
    if problem:
        LOGGER.error("Registry API failed to start: %s", problem)
        raise SystemExit(1)

    uvicorn.run(
        "registry_api.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level=uvicorn_level,
        log_config=None,
    )


if __name__ == "__main__":
    main()
