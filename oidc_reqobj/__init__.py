"""oidc_reqobj: OpenID Connect request object selection and validation."""

from .apps import AppConfigStore, InMemoryAppConfigStore, get_app_store
from .builders import BuilderRegistry, RequestObjectBuilder, get_builder_registry
from .config import RequestObjectConfig, load_config
from .diagnostics import InMemoryDiagnosticsSink, LoggingDiagnosticsSink
from .errors import RequestObjectError, RequestObjectErrorKind
from .models import ClientAppConfig, OAuth2Parameters, RequestObject
from .pipeline import (
    RequestObjectPipeline,
    build_request_object,
    get_pipeline,
    validate_request_object_signature,
)
from .validation import RequestObjectValidator, get_validator

__version__ = "0.1.0"
__all__ = [
    "AppConfigStore",
    "BuilderRegistry",
    "ClientAppConfig",
    "InMemoryAppConfigStore",
    "InMemoryDiagnosticsSink",
    "LoggingDiagnosticsSink",
    "OAuth2Parameters",
    "RequestObject",
    "RequestObjectBuilder",
    "RequestObjectConfig",
    "RequestObjectError",
    "RequestObjectErrorKind",
    "RequestObjectPipeline",
    "RequestObjectValidator",
    "build_request_object",
    "get_app_store",
    "get_builder_registry",
    "get_pipeline",
    "get_validator",
    "load_config",
    "validate_request_object_signature",
]
