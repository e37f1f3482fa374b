"""Core data models for request object processing."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    FAILED,
    REQUEST,
    REQUEST_PARAM_VALUE_BUILDER,
    REQUEST_URI,
    REQUEST_URI_PARAM_VALUE_BUILDER,
    SUCCESS,
)


class CarrierType(str, Enum):
    """Authorization request parameter that carried the request object."""

    REQUEST = REQUEST
    REQUEST_URI = REQUEST_URI

    @property
    def builder_key(self) -> str:
        """Registry key of the builder responsible for this carrier."""
        if self is CarrierType.REQUEST:
            return REQUEST_PARAM_VALUE_BUILDER
        return REQUEST_URI_PARAM_VALUE_BUILDER


class OAuth2Parameters(BaseModel):
    """Authorization flow context parsed from the outer OAuth 2.0 request."""

    client_id: str
    response_type: Optional[str] = None
    redirect_uri: Optional[str] = None
    scopes: List[str] = Field(default_factory=list)
    state: Optional[str] = None
    nonce: Optional[str] = None
    prompt: Optional[str] = None
    tenant_domain: Optional[str] = None


class RequestObject(BaseModel):
    """A constructed request object.

    Instances are frozen: validators read the claims but never rewrite them.
    """

    model_config = ConfigDict(frozen=True)

    carrier: CarrierType
    is_signed: bool = False
    claims: Dict[str, Any] = Field(default_factory=dict)
    header: Dict[str, Any] = Field(default_factory=dict)
    raw: Optional[str] = Field(default=None, repr=False, description="Serialized JWT")

    @property
    def algorithm(self) -> Optional[str]:
        return self.header.get("alg")

    def get_claim(self, name: str, default: Any = None) -> Any:
        return self.claims.get(name, default)


class ClientAppConfig(BaseModel):
    """Per-client settings relevant to request object handling."""

    client_id: str
    request_object_signature_validation_enabled: bool = False
    client_secret: Optional[str] = Field(default=None, repr=False)
    jwks_uri: Optional[str] = None
    jwks: Optional[Dict[str, Any]] = None
    redirect_uris: List[str] = Field(default_factory=list)


class Outcome(str, Enum):
    SUCCESS = SUCCESS
    FAILED = FAILED


class DiagnosticEvent(BaseModel):
    """Immutable record of a pipeline checkpoint."""

    model_config = ConfigDict(frozen=True)

    component: str
    outcome: Outcome
    message: str
    action: str
    params: Optional[Dict[str, Any]] = None
    configurations: Optional[Dict[str, Any]] = None
