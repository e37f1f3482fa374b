"""Builder for request objects passed by reference."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

import requests

from ..config import RequestUriConfig
from ..constants import INVALID_REQUEST_URI
from ..errors import RequestObjectConstructionError
from ..models import CarrierType, OAuth2Parameters, RequestObject
from .base import RequestObjectBuilder, parse_request_object

logger = logging.getLogger(__name__)


class RequestUriValueBuilder(RequestObjectBuilder):
    """Fetch the JWT referenced by ``request_uri`` and decode it."""

    carrier = CarrierType.REQUEST_URI

    def __init__(
        self,
        config: Optional[RequestUriConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        super().__init__(config or RequestUriConfig())
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config) -> "RequestUriValueBuilder":
        return cls(config.request_uri)

    def build(self, raw_value: str, params: OAuth2Parameters) -> RequestObject:
        token = self.fetch(raw_value.strip())
        return parse_request_object(token, self.carrier)

    def fetch(self, request_uri: str) -> str:
        """Retrieve the request object document from ``request_uri``."""
        scheme = urlparse(request_uri).scheme.lower()
        if scheme not in self.config.allowed_schemes:
            raise RequestObjectConstructionError(
                f"Unsupported request_uri scheme: {scheme or '<none>'}",
                code=INVALID_REQUEST_URI,
            )

        logger.debug(f"Fetching request object from {request_uri}")
        body = b""
        try:
            with self._session.get(
                request_uri, timeout=self.config.timeout, stream=True
            ) as resp:
                resp.raise_for_status()
                for chunk in resp.iter_content(chunk_size=8192):
                    body += chunk
                    if len(body) > self.config.max_bytes:
                        raise RequestObjectConstructionError(
                            "Request object referenced by request_uri exceeds the size limit.",
                            code=INVALID_REQUEST_URI,
                        )
        except requests.RequestException as e:
            raise RequestObjectConstructionError(
                f"Unable to retrieve the request object from request_uri: {e}",
                code=INVALID_REQUEST_URI,
            ) from e

        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RequestObjectConstructionError(
                "Request object referenced by request_uri is not valid UTF-8.",
                code=INVALID_REQUEST_URI,
            ) from e
