"""Parameter names, registry keys and error codes shared across the package."""

REQUEST = "request"
REQUEST_URI = "request_uri"

REQUEST_PARAM_VALUE_BUILDER = "request_param_value_builder"
REQUEST_URI_PARAM_VALUE_BUILDER = "request_uri_param_value_builder"

# OAuth 2.0 / OIDC error codes
SERVER_ERROR = "server_error"
INVALID_REQUEST = "invalid_request"
INVALID_REQUEST_URI = "invalid_request_uri"

# Diagnostic event vocabulary
OAUTH_INBOUND_SERVICE = "oauth-inbound-service"
SUCCESS = "SUCCESS"
FAILED = "FAILED"
ACTION_PARSE_REQUEST_OBJECT = "parse-request-object"
ACTION_VALIDATE_SIGNATURE = "validate-request-object-signature"
SIGNATURE_VALIDATION_ENABLED_KEY = "requestObjectSignatureValidationEnabled"
