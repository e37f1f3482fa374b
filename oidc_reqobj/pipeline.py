"""Selection, construction and validation of OIDC request objects.

The OAuth 2.0 ``response_type`` and ``client_id`` parameters are always sent
with the outer request; a request object may repeat them but must not
contradict them. The pipeline picks the carrier parameter, builds the object
with the registered builder, enforces the client's signature policy and
finally validates the claims. Callers only ever receive fully validated
objects.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Optional, Union

from .apps import AppConfigStore, get_app_store
from .builders import BuilderRegistry, RequestObjectBuilder, get_builder_registry
from .config import RequestObjectConfig, load_config
from .constants import (
    ACTION_PARSE_REQUEST_OBJECT,
    ACTION_VALIDATE_SIGNATURE,
    INVALID_REQUEST,
    REQUEST,
    REQUEST_URI,
    SERVER_ERROR,
    SIGNATURE_VALIDATION_ENABLED_KEY,
)
from .diagnostics import AuditTrail, DiagnosticsSink, LoggingDiagnosticsSink
from .errors import (
    AppLookupError,
    RequestObjectConfigurationError,
    RequestObjectError,
    RequestObjectErrorKind,
)
from .models import CarrierType, OAuth2Parameters, RequestObject
from .policy import SignatureAction, SignaturePolicy, decide
from .request import AuthorizationRequestView, MappingAuthorizationRequest, is_blank
from .validation import RequestObjectValidator, get_validator

logger = logging.getLogger(__name__)

RequestLike = Union[AuthorizationRequestView, Mapping[str, str]]

SERVER_ERROR_MESSAGE = "Server error occurred."
UNSIGNED_OBJECT_MESSAGE = (
    "Request object signature validation is enabled but request object is not signed."
)
SIGNATURE_FAILED_MESSAGE = "Request Object signature verification failed."
SIGNATURE_SUCCESS_MESSAGE = "Request Object signature verification is successful."
INVALID_CLAIMS_MESSAGE = "Invalid parameters found in the Request Object."


def select_carrier(request: AuthorizationRequestView) -> Optional[CarrierType]:
    """Return the carrier parameter holding the request object, if any.

    ``request`` takes precedence over ``request_uri`` when both are present.
    """
    if not is_blank(request.get_param(REQUEST)):
        return CarrierType.REQUEST
    if not is_blank(request.get_param(REQUEST_URI)):
        return CarrierType.REQUEST_URI
    return None


class RequestObjectPipeline:
    """Builds and validates the request object of an authorization request.

    The pipeline holds no per-request state and can be shared between worker
    threads as long as its collaborators tolerate concurrent reads.
    """

    def __init__(
        self,
        registry: BuilderRegistry,
        validator: RequestObjectValidator,
        app_store: AppConfigStore,
        diagnostics: Optional[DiagnosticsSink] = None,
    ) -> None:
        self.registry = registry
        self.validator = validator
        self.app_store = app_store
        self.diagnostics = diagnostics or LoggingDiagnosticsSink()

    # ------------------------------------------------------------------
    def build_request_object(
        self, request: RequestLike, params: OAuth2Parameters
    ) -> Optional[RequestObject]:
        """Build and validate the request object carried by ``request``.

        Returns:
            The validated request object, or ``None`` when the request carries
            neither ``request`` nor ``request_uri``.

        Raises:
            RequestObjectError: On any configuration, construction, policy or
                validation failure.
        """
        if isinstance(request, Mapping):
            request = MappingAuthorizationRequest(request)

        carrier = select_carrier(request)
        if carrier is None:
            return None
        logger.debug(f"Request object carried by the {carrier.value} parameter")

        trail = AuditTrail(self.diagnostics)
        try:
            builder = self._resolve_builder(carrier, request, trail)
            request_object = builder.build(request.get_param(carrier.value), params)
            self._enforce_signature_policy(params, request_object, self.validator, trail)
            self._validate_claims(request_object, params, self.validator)
        finally:
            trail.flush()

        logger.debug(f"Successfully built and validated request object for: {carrier.value}")
        return request_object

    def validate_request_object_signature(
        self,
        params: OAuth2Parameters,
        request_object: RequestObject,
        validator: Optional[RequestObjectValidator] = None,
    ) -> None:
        """Re-apply the client's signature policy to an existing object."""
        trail = AuditTrail(self.diagnostics)
        try:
            self._enforce_signature_policy(
                params, request_object, validator or self.validator, trail
            )
        finally:
            trail.flush()

    # ------------------------------------------------------------------
    def _resolve_builder(
        self,
        carrier: CarrierType,
        request: AuthorizationRequestView,
        trail: AuditTrail,
    ) -> RequestObjectBuilder:
        builder = self.registry.lookup(carrier.builder_key)
        if builder is None:
            trail.failed(
                SERVER_ERROR_MESSAGE,
                ACTION_PARSE_REQUEST_OBJECT,
                params={
                    REQUEST: request.get_param(REQUEST),
                    REQUEST_URI: request.get_param(REQUEST_URI),
                },
            )
            raise RequestObjectConfigurationError(
                f"Unable to build the OIDC Request Object from:{carrier.value}"
            )
        return builder

    def _enforce_signature_policy(
        self,
        params: OAuth2Parameters,
        request_object: RequestObject,
        validator: RequestObjectValidator,
        trail: AuditTrail,
    ) -> None:
        client_id = params.client_id
        try:
            app = self.app_store.get_by_client_id(client_id)
        except AppLookupError as e:
            trail.failed(SERVER_ERROR_MESSAGE, ACTION_VALIDATE_SIGNATURE)
            raise RequestObjectError(
                SERVER_ERROR,
                f"Error while retrieving app information for client_id: {client_id}. "
                "Cannot proceed with signature validation",
                RequestObjectErrorKind.APP_LOOKUP,
            ) from e

        policy = SignaturePolicy.for_app(app)
        if policy is SignaturePolicy.ENFORCED:
            logger.debug(f"Request Object Signature Verification enabled for client_id: {client_id}")

        try:
            action = decide(policy, request_object)
            if action is SignatureAction.REJECT_UNSIGNED:
                trail.failed(
                    UNSIGNED_OBJECT_MESSAGE,
                    ACTION_VALIDATE_SIGNATURE,
                    params={"clientId": client_id},
                    configurations={SIGNATURE_VALIDATION_ENABLED_KEY: "true"},
                )
                raise RequestObjectError(
                    INVALID_REQUEST,
                    UNSIGNED_OBJECT_MESSAGE,
                    RequestObjectErrorKind.UNSIGNED_OBJECT,
                )
            if action is SignatureAction.VERIFY:
                self._verify_signature(params, request_object, validator)
        except RequestObjectError as e:
            if e.kind is RequestObjectErrorKind.SIGNATURE_VERIFICATION:
                trail.failed(
                    SIGNATURE_FAILED_MESSAGE,
                    ACTION_VALIDATE_SIGNATURE,
                    params={"clientId": client_id},
                    configurations={
                        SIGNATURE_VALIDATION_ENABLED_KEY: str(
                            app.request_object_signature_validation_enabled
                        ).lower()
                    },
                )
            raise

        trail.succeeded(SIGNATURE_SUCCESS_MESSAGE, ACTION_VALIDATE_SIGNATURE)

    @staticmethod
    def _verify_signature(
        params: OAuth2Parameters,
        request_object: RequestObject,
        validator: RequestObjectValidator,
    ) -> None:
        if not validator.validate_signature(request_object, params):
            raise RequestObjectError(
                INVALID_REQUEST,
                SIGNATURE_FAILED_MESSAGE,
                RequestObjectErrorKind.SIGNATURE_VERIFICATION,
            )

    @staticmethod
    def _validate_claims(
        request_object: RequestObject,
        params: OAuth2Parameters,
        validator: RequestObjectValidator,
    ) -> None:
        if not validator.validate_claims(request_object, params):
            raise RequestObjectError(
                INVALID_REQUEST, INVALID_CLAIMS_MESSAGE, RequestObjectErrorKind.CLAIMS
            )


_pipeline_instance: RequestObjectPipeline | None = None
_pipeline_lock = threading.Lock()


def get_pipeline(config: Optional[RequestObjectConfig] = None) -> RequestObjectPipeline:
    """Factory assembling a pipeline from configuration.

    Without an explicit ``config`` the pipeline is built once from
    :func:`load_config` and reused.
    """

    global _pipeline_instance
    if config is not None:
        return _build_pipeline(config)

    if _pipeline_instance is None:
        with _pipeline_lock:
            if _pipeline_instance is None:
                _pipeline_instance = _build_pipeline(load_config())
    return _pipeline_instance


def _build_pipeline(cfg: RequestObjectConfig) -> RequestObjectPipeline:
    app_store = get_app_store(config=cfg)
    return RequestObjectPipeline(
        registry=get_builder_registry(cfg),
        validator=get_validator(cfg, app_store),
        app_store=app_store,
        diagnostics=LoggingDiagnosticsSink(
            enabled=cfg.diagnostics.enabled, logger_name=cfg.diagnostics.logger
        ),
    )


def build_request_object(
    request: RequestLike, params: OAuth2Parameters
) -> Optional[RequestObject]:
    """Build and validate a request object using the default pipeline."""
    return get_pipeline().build_request_object(request, params)


def validate_request_object_signature(
    params: OAuth2Parameters,
    request_object: RequestObject,
    validator: Optional[RequestObjectValidator] = None,
) -> None:
    """Apply the signature policy using the default pipeline."""
    get_pipeline().validate_request_object_signature(params, request_object, validator)
