"""JWS signature and claim validation for request objects."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, List, Mapping, Optional, Tuple

import jwt
import requests

from ..apps import AppConfigStore
from ..config import JwtConfig
from ..errors import AppLookupError
from ..models import ClientAppConfig, OAuth2Parameters, RequestObject
from .base import RequestObjectValidator

logger = logging.getLogger(__name__)


class JwtRequestObjectValidator(RequestObjectValidator):
    """Validates request objects serialized as compact JWS.

    Signatures are verified against the client's registered keys: the inline
    ``jwks`` or the document at ``jwks_uri`` for asymmetric algorithms, the
    client secret for ``HS*`` algorithms. Claims are checked against the outer
    authorization request following OpenID Connect Core section 6.
    """

    def __init__(
        self,
        app_store: AppConfigStore,
        config: Optional[JwtConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.app_store = app_store
        self.config = config or JwtConfig()
        self._session = session or requests.Session()
        self._jwks_cache: Dict[str, Tuple[float, List[Mapping[str, Any]]]] = {}
        self._cache_lock = threading.Lock()

    @classmethod
    def from_config(cls, config, app_store: AppConfigStore) -> "JwtRequestObjectValidator":
        return cls(app_store, config.jwt)

    # ------------------------------------------------------------------
    # Signature
    def validate_signature(self, request_object: RequestObject, params: OAuth2Parameters) -> bool:
        alg = request_object.algorithm
        if not request_object.raw or not alg:
            return False
        if alg not in self.config.allowed_algorithms:
            logger.debug(f"Request object algorithm {alg} is not allowed")
            return False

        try:
            app = self.app_store.get_by_client_id(params.client_id)
            key = self._resolve_key(app, request_object.header)
        except (
            AppLookupError,
            requests.RequestException,
            jwt.PyJWTError,
            TypeError,
            ValueError,
        ) as e:
            logger.warning(f"Unable to resolve verification key for client_id {params.client_id}: {e}")
            return False
        if key is None:
            logger.debug(f"No verification key found for client_id {params.client_id}")
            return False

        try:
            jwt.decode(
                request_object.raw,
                key,
                algorithms=[alg],
                options={
                    "verify_exp": False,
                    "verify_nbf": False,
                    "verify_iat": False,
                    "verify_aud": False,
                    "verify_iss": False,
                },
            )
        except jwt.PyJWTError as e:
            logger.debug(f"Request object signature verification failed: {e}")
            return False
        return True

    def _resolve_key(self, app: ClientAppConfig, header: Mapping[str, Any]) -> Any:
        alg = header["alg"]
        if alg.startswith("HS"):
            return app.client_secret

        keys = self._client_keys(app)
        kid = header.get("kid")
        candidates = [k for k in keys if kid is None or k.get("kid") == kid]
        if kid is None and len(candidates) != 1:
            return None
        for candidate in candidates:
            if candidate.get("use", "sig") != "sig":
                continue
            return jwt.PyJWK(dict(candidate), algorithm=alg).key
        return None

    def _client_keys(self, app: ClientAppConfig) -> List[Mapping[str, Any]]:
        if app.jwks is not None:
            return _jwks_keys(app.jwks, f"inline jwks of client {app.client_id}")
        if not app.jwks_uri:
            return []
        return self._fetch_jwks(app.jwks_uri)

    def _fetch_jwks(self, jwks_uri: str) -> List[Mapping[str, Any]]:
        now = time.time()
        with self._cache_lock:
            cached = self._jwks_cache.get(jwks_uri)
        if cached and now - cached[0] <= self.config.jwks_cache_seconds:
            return cached[1]

        resp = self._session.get(jwks_uri, timeout=self.config.jwks_timeout)
        resp.raise_for_status()
        keys = _jwks_keys(resp.json(), jwks_uri)
        with self._cache_lock:
            self._jwks_cache[jwks_uri] = (now, keys)
        return keys

    # ------------------------------------------------------------------
    # Claims
    def validate_claims(self, request_object: RequestObject, params: OAuth2Parameters) -> bool:
        claims = request_object.claims

        client_id = claims.get("client_id")
        if client_id is not None and client_id != params.client_id:
            logger.debug("client_id in the request object does not match the authorization request")
            return False

        response_type = claims.get("response_type")
        if (
            response_type is not None
            and params.response_type is not None
            and response_type != params.response_type
        ):
            logger.debug("response_type in the request object does not match the authorization request")
            return False

        issuer = claims.get("iss")
        if issuer is not None and issuer != params.client_id:
            logger.debug(f"Request object issuer {issuer} is not the client {params.client_id}")
            return False

        if self.config.audience and "aud" in claims:
            audience = claims["aud"]
            audiences = [audience] if isinstance(audience, str) else list(audience or [])
            if self.config.audience not in audiences:
                logger.debug(f"Request object audience {audiences} does not include {self.config.audience}")
                return False

        redirect_uri = claims.get("redirect_uri")
        if (
            redirect_uri is not None
            and params.redirect_uri is not None
            and redirect_uri != params.redirect_uri
        ):
            logger.debug("redirect_uri in the request object does not match the authorization request")
            return False

        now = time.time()
        leeway = self.config.leeway
        try:
            exp = claims.get("exp")
            if exp is not None and now > float(exp) + leeway:
                logger.debug("Request object has expired")
                return False
            nbf = claims.get("nbf")
            if nbf is not None and now + leeway < float(nbf):
                logger.debug("Request object is not yet valid")
                return False
        except (TypeError, ValueError):
            logger.debug("Request object carries a non-numeric exp or nbf claim")
            return False

        return True


def _jwks_keys(document: Any, source: str) -> List[Mapping[str, Any]]:
    """Return the ``keys`` of a JWK Set, rejecting malformed documents."""
    if not isinstance(document, Mapping):
        raise jwt.PyJWKSetError(f"JWK Set from {source} is not a JSON object")
    keys = document.get("keys", [])
    if not isinstance(keys, list) or not all(isinstance(k, Mapping) for k in keys):
        raise jwt.PyJWKSetError(f"JWK Set from {source} has malformed keys")
    return keys
