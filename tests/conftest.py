import json
from unittest.mock import Mock

import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from oidc_reqobj.apps import InMemoryAppConfigStore
from oidc_reqobj.builders import BuilderRegistry, RequestObjectBuilder
from oidc_reqobj.constants import (
    REQUEST_PARAM_VALUE_BUILDER,
    REQUEST_URI_PARAM_VALUE_BUILDER,
)
from oidc_reqobj.diagnostics import InMemoryDiagnosticsSink
from oidc_reqobj.models import CarrierType, ClientAppConfig, OAuth2Parameters, RequestObject
from oidc_reqobj.pipeline import RequestObjectPipeline
from oidc_reqobj.validation import RequestObjectValidator


class StaticBuilder(RequestObjectBuilder):
    """Builder returning a preset object (or raising a preset error)."""

    def __init__(self, carrier, request_object=None, error=None):
        super().__init__()
        self.carrier = carrier
        self.request_object = request_object
        self.error = error
        self.calls = []

    def build(self, raw_value, params):
        self.calls.append(raw_value)
        if self.error is not None:
            raise self.error
        return self.request_object


def generate_keys(kid="test"):
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    public_jwk = jwt.algorithms.RSAAlgorithm.to_jwk(key.public_key())
    jwk_dict = json.loads(public_jwk)
    jwk_dict["kid"] = kid
    jwk_dict["use"] = "sig"
    jwk_dict["alg"] = "RS256"
    return private_pem, jwk_dict


@pytest.fixture
def key_factory():
    return generate_keys


@pytest.fixture(scope="session")
def rsa_keys():
    return generate_keys()


@pytest.fixture
def sign(rsa_keys):
    private_pem, _ = rsa_keys

    def _sign(claims, kid="test"):
        return jwt.encode(claims, private_pem, algorithm="RS256", headers={"kid": kid})

    return _sign


@pytest.fixture
def unsigned():
    def _unsigned(claims):
        return jwt.encode(claims, None, algorithm="none")

    return _unsigned


@pytest.fixture
def params():
    return OAuth2Parameters(
        client_id="app1",
        response_type="code",
        redirect_uri="https://rp.example.com/cb",
        scopes=["openid"],
    )


def _make_object(carrier=CarrierType.REQUEST, is_signed=True, claims=None):
    return RequestObject(
        carrier=carrier,
        is_signed=is_signed,
        claims=claims or {"client_id": "app1", "response_type": "code"},
        header={"alg": "RS256" if is_signed else "none"},
    )


@pytest.fixture
def make_object():
    return _make_object


@pytest.fixture
def validator():
    mock = Mock(spec=RequestObjectValidator)
    mock.validate_signature.return_value = True
    mock.validate_claims.return_value = True
    return mock


@pytest.fixture
def sink():
    return InMemoryDiagnosticsSink(enabled=True)


@pytest.fixture
def make_pipeline(validator, sink):
    """Assemble a pipeline around static builders and an in-memory store."""

    def _make(
        request_object=None,
        enabled=True,
        builders=None,
        app_store=None,
    ):
        request_object = request_object or _make_object()
        if builders is None:
            builders = {
                REQUEST_PARAM_VALUE_BUILDER: StaticBuilder(
                    CarrierType.REQUEST, request_object
                ),
                REQUEST_URI_PARAM_VALUE_BUILDER: StaticBuilder(
                    CarrierType.REQUEST_URI,
                    request_object.model_copy(update={"carrier": CarrierType.REQUEST_URI}),
                ),
            }
        store = app_store or InMemoryAppConfigStore(
            [
                ClientAppConfig(
                    client_id="app1",
                    request_object_signature_validation_enabled=enabled,
                )
            ]
        )
        return RequestObjectPipeline(
            registry=BuilderRegistry(builders),
            validator=validator,
            app_store=store,
            diagnostics=sink,
        )

    return _make
