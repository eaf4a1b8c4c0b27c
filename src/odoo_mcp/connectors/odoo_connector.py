"""
Odoo XML-RPC connector.

Odoo exposes authentication on ``/xmlrpc/2/common`` and business-object
operations on ``/xmlrpc/2/object``. Both share one transport scheme, taken
from the configured URL. Every ``execute_kw`` call resends the uid and the
password; there is no token.
"""

from __future__ import annotations

import logging
import xmlrpc.client
from typing import Any, Callable, Optional, Sequence
from urllib.parse import urlsplit

import requests

from odoo_common.errors import AuthenticationError, ConfigError, NotConnectedError, TransportError
from odoo_config.settings import OdooSettings
from odoo_mcp.core_infrastructure.http_client import HttpClient, XmlRpcTransport
from odoo_mcp.domain.models import Domain, ReadFailed, ReadOk, ReadResult, Record, Session


logger = logging.getLogger(__name__)

COMMON_PATH = "/xmlrpc/2/common"
OBJECT_PATH = "/xmlrpc/2/object"

# Everything a remote call can raise short of a programming error
REMOTE_ERRORS = (xmlrpc.client.Error, requests.RequestException, OSError)

ProxyFactory = Callable[[str], Any]


def _normalize_url(url: str) -> tuple[str, bool]:
    parts = urlsplit((url or "").strip())
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        raise ConfigError(f"ODOO_URL must be an http(s) URL, got {url!r}")
    return f"{parts.scheme}://{parts.netloc}{parts.path.rstrip('/')}", parts.scheme == "https"


class OdooConnector:
    """
    One authenticated session against an Odoo server.

    ``proxy_factory`` builds an XML-RPC proxy for an endpoint URL; the default
    creates ``xmlrpc.client.ServerProxy`` objects over the shared HTTP client.
    """

    def __init__(
        self,
        url: str,
        db: str,
        username: str,
        password: str,
        *,
        http: HttpClient | None = None,
        proxy_factory: ProxyFactory | None = None,
    ) -> None:
        base_url, use_https = _normalize_url(url)
        self.session = Session(url=base_url, db=db, username=username, password=password)
        self._http = http
        self._use_https = use_https
        self._proxy_factory = proxy_factory or self._server_proxy
        self._models = None

    @classmethod
    def from_settings(cls, settings: OdooSettings, **kwargs: Any) -> "OdooConnector":
        return cls(settings.url, settings.db, settings.username, settings.password, **kwargs)

    def _server_proxy(self, endpoint: str) -> xmlrpc.client.ServerProxy:
        transport = XmlRpcTransport(use_https=self._use_https, http=self._http)
        return xmlrpc.client.ServerProxy(endpoint, transport=transport, allow_none=True)

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated and self._models is not None

    def authenticate(self) -> int:
        """
        Log in and open the object endpoint.

        Raises AuthenticationError on rejected credentials or any transport
        failure. There is no retry; a failed startup should abort.
        """
        s = self.session
        common = self._proxy_factory(s.url + COMMON_PATH)
        try:
            uid = common.authenticate(s.db, s.username, s.password, {})
        except REMOTE_ERRORS as e:
            logger.error("Error connecting to Odoo at %s: %s", s.url, e)
            raise AuthenticationError(f"Could not authenticate against {s.url}: {e}") from e

        if not uid:
            logger.error("Odoo rejected the credentials of %s on database %s", s.username, s.db)
            raise AuthenticationError(f"Authentication failed for user {s.username!r} on database {s.db!r}")

        self._models = self._proxy_factory(s.url + OBJECT_PATH)
        s.uid = int(uid)
        logger.info("Connected to Odoo as user id %s", s.uid)
        return s.uid

    def search_read(
        self,
        model: str,
        domain: Domain = (),
        fields: Sequence[str] = (),
        limit: Optional[int] = None,
    ) -> list[Record]:
        """Run ``search_read`` on ``model``; raises NotConnectedError or TransportError."""
        if not self.is_authenticated:
            raise NotConnectedError()

        kwargs: dict[str, Any] = {}
        if fields:
            kwargs["fields"] = list(fields)
        if limit:
            kwargs["limit"] = int(limit)

        s = self.session
        try:
            records = self._models.execute_kw(
                s.db, s.uid, s.password, model, "search_read", [[list(c) for c in domain]], kwargs
            )
        except xmlrpc.client.Fault as e:
            raise TransportError(e.faultString) from e
        except REMOTE_ERRORS as e:
            raise TransportError(str(e)) from e

        logger.debug("search_read %s returned %d records", model, len(records or []))
        return list(records or [])

    def read(
        self,
        model: str,
        domain: Domain = (),
        fields: Sequence[str] = (),
        limit: Optional[int] = None,
    ) -> ReadResult:
        """Non-raising ``search_read``: failures come back as ReadFailed."""
        try:
            return ReadOk(records=self.search_read(model, domain, fields, limit))
        except (NotConnectedError, TransportError) as e:
            logger.warning("Reading %s failed: %s", model, e)
            return ReadFailed(code=e.code, message=str(e))
