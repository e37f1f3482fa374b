from __future__ import annotations

import os
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field

from .constants import REQUEST_PARAM_VALUE_BUILDER, REQUEST_URI_PARAM_VALUE_BUILDER
from .models import ClientAppConfig

DEFAULT_BUILDERS = {
    REQUEST_PARAM_VALUE_BUILDER: "oidc_reqobj.builders.value.RequestParamValueBuilder",
    REQUEST_URI_PARAM_VALUE_BUILDER: "oidc_reqobj.builders.uri.RequestUriValueBuilder",
}
DEFAULT_VALIDATOR = "oidc_reqobj.validation.jws.JwtRequestObjectValidator"

_TRUTHY = {"1", "true", "yes", "on"}


class DiagnosticsConfig(BaseModel):
    """Configuration for diagnostic audit events."""

    enabled: bool = False
    logger: str = "oidc_reqobj.audit"


class RequestUriConfig(BaseModel):
    """Settings for fetching request objects by reference."""

    timeout: float = 5.0
    max_bytes: int = 64 * 1024
    allowed_schemes: List[str] = Field(default_factory=lambda: ["https"])


class JwtConfig(BaseModel):
    """Settings for decoding and verifying request object JWTs."""

    allowed_algorithms: List[str] = Field(
        default_factory=lambda: ["RS256", "PS256", "ES256", "HS256"]
    )
    leeway: int = 30
    audience: Optional[str] = None
    jwks_cache_seconds: int = 300
    jwks_timeout: float = 5.0


class RequestObjectConfig(BaseModel):
    """Top-level configuration model."""

    builders: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_BUILDERS))
    validator: str = DEFAULT_VALIDATOR
    diagnostics: DiagnosticsConfig = DiagnosticsConfig()
    request_uri: RequestUriConfig = RequestUriConfig()
    jwt: JwtConfig = JwtConfig()
    clients: List[ClientAppConfig] = Field(default_factory=list)
    database_url: Optional[str] = None


def load_config(path: Optional[str] = None) -> RequestObjectConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to OIDC_REQOBJ_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("OIDC_REQOBJ_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = RequestObjectConfig(**data)
    else:
        config = RequestObjectConfig()

    env_diagnostics = os.getenv("OIDC_REQOBJ_DIAGNOSTICS")
    if env_diagnostics is not None:
        config.diagnostics.enabled = env_diagnostics.strip().lower() in _TRUTHY

    env_db_url = os.getenv("OIDC_REQOBJ_DATABASE_URL")
    if env_db_url:
        config.database_url = env_db_url
    return config
