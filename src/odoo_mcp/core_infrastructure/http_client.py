"""
Lightweight shared HTTP client and an XML-RPC transport built on it.

Goals:
- Centralize timeouts, connection pooling and error logging for calls to Odoo.
- Keep dependencies limited to `requests`.
- Let `xmlrpc.client.ServerProxy` talk through a pooled `requests.Session`.
"""

from __future__ import annotations

import io
import logging
import os
import time
import xmlrpc.client
from dataclasses import dataclass
from typing import Any, Mapping

import requests
from requests import Response
from requests.adapters import HTTPAdapter


logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


DEFAULT_CONNECT_TIMEOUT_S = _env_float("ODOO_HTTP_CONNECT_TIMEOUT", 3.05)
DEFAULT_READ_TIMEOUT_S = _env_float("ODOO_HTTP_READ_TIMEOUT", 30.0)
DEFAULT_TIMEOUT = (DEFAULT_CONNECT_TIMEOUT_S, DEFAULT_READ_TIMEOUT_S)

XMLRPC_CONTENT_TYPE = "text/xml"


@dataclass(frozen=True)
class HttpClientConfig:
    timeout: tuple[float, float] = DEFAULT_TIMEOUT
    pool_size: int = 10
    user_agent: str = os.getenv("ODOO_HTTP_USER_AGENT", "odoo-mcp-server/1.0")


class HttpClient:
    """A small wrapper around `requests.Session` with sane defaults."""

    def __init__(self, *, config: HttpClientConfig | None = None, session: requests.Session | None = None) -> None:
        self.config = config or HttpClientConfig()
        self.session = session or requests.Session()
        self._configure_session(self.session, self.config)

    @staticmethod
    def _configure_session(session: requests.Session, config: HttpClientConfig) -> None:
        session.headers.setdefault("User-Agent", config.user_agent)

        # XML-RPC calls are POSTs and are never retried
        adapter = HTTPAdapter(max_retries=0, pool_connections=config.pool_size, pool_maxsize=config.pool_size)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        data: Any | None = None,
        timeout: tuple[float, float] | float | None = None,
        **kwargs: Any,
    ) -> Response:
        """Perform an HTTP request and raise for non-2xx responses."""
        t0 = time.perf_counter()
        try:
            resp = self.session.request(
                method=method,
                url=url,
                headers=dict(headers) if headers else None,
                data=data,
                timeout=timeout or self.config.timeout,
                **kwargs,
            )
            resp.raise_for_status()
            return resp
        except requests.RequestException as e:
            ms = int((time.perf_counter() - t0) * 1000)
            status = getattr(getattr(e, "response", None), "status_code", None)
            logger.warning(
                "HTTP %s %s failed (status=%s, ms=%s): %s",
                method.upper(),
                url,
                status,
                ms,
                str(e),
            )
            raise

    def post(
        self,
        url: str,
        *,
        data: Any | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: tuple[float, float] | float | None = None,
        **kwargs: Any,
    ) -> Response:
        return self.request("POST", url, headers=headers, data=data, timeout=timeout, **kwargs)


class XmlRpcTransport(xmlrpc.client.Transport):
    """
    `xmlrpc.client` transport that sends requests through `HttpClient`.

    ServerProxy hands us only host and path, so the scheme (plain HTTP or TLS)
    is fixed when the transport is built.
    """

    def __init__(self, *, use_https: bool = False, http: HttpClient | None = None) -> None:
        super().__init__(use_datetime=False)
        self.scheme = "https" if use_https else "http"
        self.http = http or DEFAULT_HTTP_CLIENT

    def request(self, host, handler, request_body, verbose=False):
        self.verbose = verbose
        url = f"{self.scheme}://{host}{handler}"
        resp = self.http.post(
            url,
            data=request_body,
            headers={"Content-Type": XMLRPC_CONTENT_TYPE, "Accept": XMLRPC_CONTENT_TYPE},
        )
        # parse_response raises xmlrpc.client.Fault for <fault> payloads
        return self.parse_response(io.BytesIO(resp.content))


# A single shared client is sufficient: the server talks to one Odoo instance.
DEFAULT_HTTP_CLIENT = HttpClient()
