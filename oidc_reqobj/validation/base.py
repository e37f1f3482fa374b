"""Base interface for request object validators."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from ..models import OAuth2Parameters, RequestObject

if TYPE_CHECKING:
    from ..apps import AppConfigStore
    from ..config import RequestObjectConfig


class RequestObjectValidator(metaclass=abc.ABCMeta):
    """Checks the signature and the claims of a constructed request object."""

    @classmethod
    def from_config(
        cls, config: "RequestObjectConfig", app_store: "AppConfigStore"
    ) -> "RequestObjectValidator":
        """Instantiate the validator from the top-level configuration."""
        return cls()

    @abc.abstractmethod
    def validate_signature(self, request_object: RequestObject, params: OAuth2Parameters) -> bool:
        """Return ``True`` if the request object's signature is valid."""
        raise NotImplementedError

    @abc.abstractmethod
    def validate_claims(self, request_object: RequestObject, params: OAuth2Parameters) -> bool:
        """Return ``True`` if the claims are consistent with ``params``."""
        raise NotImplementedError
