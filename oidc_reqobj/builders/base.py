"""Base interface for request object builders."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, Dict, Optional

import jwt

from ..errors import RequestObjectConstructionError
from ..models import CarrierType, OAuth2Parameters, RequestObject

if TYPE_CHECKING:
    from ..config import RequestObjectConfig


class RequestObjectBuilder(metaclass=abc.ABCMeta):
    """Turns the raw value of a carrier parameter into a :class:`RequestObject`."""

    carrier: CarrierType

    def __init__(self, config: Optional[Any] = None) -> None:
        self.config = config

    @classmethod
    def from_config(cls, config: "RequestObjectConfig") -> "RequestObjectBuilder":
        """Instantiate the builder from the top-level configuration."""
        return cls()

    @abc.abstractmethod
    def build(self, raw_value: str, params: OAuth2Parameters) -> RequestObject:
        """Construct the request object.

        Raises:
            RequestObjectConstructionError: If ``raw_value`` is malformed or
                cannot be resolved.
        """
        raise NotImplementedError


def parse_request_object(token: str, carrier: CarrierType) -> RequestObject:
    """Decode a compact JWT without verifying its signature.

    Signature verification is the validator's job; the builder only records
    whether the object claims to be signed.
    """
    token = token.strip()
    segments = token.split(".")
    if len(segments) == 5:
        raise RequestObjectConstructionError(
            "Encrypted request objects are not supported."
        )
    if len(segments) != 3:
        raise RequestObjectConstructionError("Request object is not a valid JWT.")

    try:
        header: Dict[str, Any] = jwt.get_unverified_header(token)
        claims = jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": False},
        )
    except jwt.PyJWTError as e:
        raise RequestObjectConstructionError(
            f"Unable to decode the request object: {e}"
        ) from e

    if not isinstance(claims, dict):
        raise RequestObjectConstructionError("Request object payload must be a JSON object.")

    alg = header.get("alg")
    is_signed = bool(alg) and str(alg).lower() != "none" and bool(segments[2])
    return RequestObject(
        carrier=carrier,
        is_signed=is_signed,
        claims=claims,
        header=header,
        raw=token,
    )
