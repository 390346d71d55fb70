"""
Short-lived static file server exposing the built site over loopback.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from functools import partial
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any

from site_forge.errors import ToolExecutionError

HOST = "127.0.0.1"


class QuietHandler(SimpleHTTPRequestHandler):
    def log_message(self, format: str, *args: Any) -> None:
        pass


@contextmanager
def serve_directory(root: Path, settle_delay: float = 0.5) -> Iterator[str]:
    """
    Serve ``root`` on an ephemeral port and yield its base URL.

    The server is closed when the block exits, whatever the outcome.
    """
    handler = partial(QuietHandler, directory=str(root))
    try:
        server = ThreadingHTTPServer((HOST, 0), handler)
    except OSError as exc:
        raise ToolExecutionError(f"failed to start local server: {exc}") from exc

    thread = threading.Thread(target=server.serve_forever, name="site-forge-server", daemon=True)
    thread.start()
    try:
        if settle_delay > 0:
            time.sleep(settle_delay)
        port = server.server_address[1]
        yield f"http://{HOST}:{port}"
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
