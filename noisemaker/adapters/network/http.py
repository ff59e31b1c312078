"""
HTTP(S) transport — one blocking request/response exchange.

Built on ``http.client`` rather than ``urllib.request`` because the
activity log needs the local address and port of the socket that carried
the request, which only a directly owned connection exposes.

No timeout is set by default: a hung peer hangs the invocation.
"""

from __future__ import annotations

import http.client
import logging
import socket
import ssl
from urllib.parse import urlsplit, urlunsplit

from noisemaker.adapters.base import Transport
from noisemaker.core.models.outcome import TransportOutcome

logger = logging.getLogger(__name__)


def local_address(sock: socket.socket) -> tuple[str, int]:
    """Local (address, port) of a connected socket. IPv6 is bracketed."""
    name = sock.getsockname()
    host, port = name[0], int(name[1])
    if ":" in host:
        host = f"[{host}]"
    return host, port


class HttpTransport(Transport):
    """Send requests with ``http.client``.

    Args:
        timeout: Socket timeout in seconds. None blocks indefinitely.
        ssl_context: Context for https connections (default: system trust).
    """

    def __init__(
        self,
        timeout: float | None = None,
        ssl_context: ssl.SSLContext | None = None,
    ):
        self._timeout = timeout
        self._ssl_context = ssl_context

    def _connection(self, scheme: str, host: str, port: int | None) -> http.client.HTTPConnection:
        if scheme == "https":
            return http.client.HTTPSConnection(
                host, port, timeout=self._timeout, context=self._ssl_context,
            )
        return http.client.HTTPConnection(host, port, timeout=self._timeout)

    def send(self, method: str, url: str, body: str = "") -> TransportOutcome:
        try:
            parts = urlsplit(url)
            port = parts.port
        except ValueError as e:
            return TransportOutcome(url=url, ok=False, error=f"invalid url: {e}")

        if parts.scheme not in ("http", "https"):
            return TransportOutcome(url=url, ok=False, error=f"unknown protocol: {parts.scheme}")
        if not parts.hostname:
            return TransportOutcome(url=url, ok=False, error=f"no host in url: {url}")

        target = urlunsplit(("", "", parts.path or "/", parts.query, ""))
        payload = body.encode("utf-8")
        conn = self._connection(parts.scheme, parts.hostname, port)

        source_addr, source_port, bytes_sent = "", 0, 0
        try:
            conn.connect()
            if conn.sock is not None:
                source_addr, source_port = local_address(conn.sock)
                logger.info("Local endpoint %s port %d", source_addr, source_port)

            conn.request(method, target, body=payload or None)
            bytes_sent = len(payload)

            response = conn.getresponse()
            data = response.read()
        except (OSError, http.client.HTTPException, ValueError) as e:
            logger.info("Request %s %s failed: %s", method, url, e)
            return TransportOutcome(
                url=url,
                ok=False,
                bytes_sent=bytes_sent,
                source_addr=source_addr,
                source_port=source_port,
                error=str(e) or e.__class__.__name__,
            )
        finally:
            conn.close()

        logger.debug("Response %d (%d bytes) from %s", response.status, len(data), url)
        return TransportOutcome(
            url=url,
            status_code=response.status,
            body=data.decode("utf-8", errors="replace"),
            bytes_sent=bytes_sent,
            source_addr=source_addr,
            source_port=source_port,
        )
