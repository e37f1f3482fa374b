"""Request objects flowing through the default builders, validator and stores."""

import threading
import time

import jwt
import pytest
import yaml

import oidc_reqobj.pipeline as pipeline_module
from oidc_reqobj.config import RequestObjectConfig
from oidc_reqobj.errors import RequestObjectError, RequestObjectErrorKind
from oidc_reqobj.models import CarrierType, ClientAppConfig, Outcome
from oidc_reqobj.pipeline import (
    build_request_object,
    get_pipeline,
    validate_request_object_signature,
)
from oidc_reqobj.validation import JwtRequestObjectValidator


class JsonResponse:
    def __init__(self, document):
        self.document = document

    def raise_for_status(self):
        pass

    def json(self):
        return self.document


class JsonSession:
    def __init__(self, document):
        self.document = document

    def get(self, url, timeout=None):
        return JsonResponse(self.document)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("OIDC_REQOBJ_DATABASE_URL", raising=False)
    monkeypatch.delenv("OIDC_REQOBJ_DIAGNOSTICS", raising=False)
    monkeypatch.setattr(pipeline_module, "_pipeline_instance", None)


@pytest.fixture
def claims():
    return {
        "client_id": "app1",
        "iss": "app1",
        "response_type": "code",
        "redirect_uri": "https://rp.example.com/cb",
        "exp": int(time.time()) + 60,
    }


@pytest.fixture
def enforced_config(rsa_keys):
    _, jwk = rsa_keys
    return RequestObjectConfig(
        clients=[
            ClientAppConfig(
                client_id="app1",
                request_object_signature_validation_enabled=True,
                jwks={"keys": [jwk]},
            )
        ]
    )


def test_signed_request_object_accepted_for_enforcing_client(
    enforced_config, sign, claims, params, sink
):
    pipeline = get_pipeline(enforced_config)
    pipeline.diagnostics = sink
    token = sign(claims)

    request_object = pipeline.build_request_object(
        {"request": token, "request_uri": "https://rp.example.com/ro"}, params
    )

    assert request_object.is_signed
    assert request_object.carrier is CarrierType.REQUEST
    assert request_object.raw == token
    assert request_object.get_claim("redirect_uri") == "https://rp.example.com/cb"
    assert [e.outcome for e in sink.events] == [Outcome.SUCCESS]


def test_request_object_signed_with_foreign_key_is_rejected(
    enforced_config, key_factory, claims, params, sink
):
    foreign_pem, _ = key_factory()
    token = jwt.encode(claims, foreign_pem, algorithm="RS256", headers={"kid": "test"})
    pipeline = get_pipeline(enforced_config)
    pipeline.diagnostics = sink

    with pytest.raises(RequestObjectError) as exc_info:
        pipeline.build_request_object({"request": token}, params)

    assert exc_info.value.kind is RequestObjectErrorKind.SIGNATURE_VERIFICATION
    assert exc_info.value.code == "invalid_request"
    assert [(e.outcome, e.action) for e in sink.events] == [
        (Outcome.FAILED, "validate-request-object-signature")
    ]


def test_request_object_with_swapped_payload_is_rejected(enforced_config, sign, claims, params):
    header, _, signature = sign(claims).split(".")
    payload = sign({**claims, "scope": "openid admin"}).split(".")[1]

    with pytest.raises(RequestObjectError) as exc_info:
        get_pipeline(enforced_config).build_request_object(
            {"request": ".".join([header, payload, signature])}, params
        )

    assert exc_info.value.kind is RequestObjectErrorKind.SIGNATURE_VERIFICATION


def test_unsigned_request_object_accepted_for_optional_client(unsigned, claims, params):
    config = RequestObjectConfig(clients=[ClientAppConfig(client_id="app1")])

    request_object = get_pipeline(config).build_request_object(
        {"request": unsigned(claims)}, params
    )

    assert not request_object.is_signed
    assert request_object.get_claim("client_id") == "app1"


@pytest.mark.parametrize("document", [[], {"keys": ["not-a-jwk"]}])
def test_malformed_remote_jwks_is_a_signature_failure(sign, claims, params, sink, document):
    config = RequestObjectConfig(
        clients=[
            ClientAppConfig(
                client_id="app1",
                request_object_signature_validation_enabled=True,
                jwks_uri="https://rp.example.com/jwks",
            )
        ]
    )
    pipeline = get_pipeline(config)
    pipeline.diagnostics = sink
    pipeline.validator = JwtRequestObjectValidator(
        pipeline.app_store, config.jwt, session=JsonSession(document)
    )

    with pytest.raises(RequestObjectError) as exc_info:
        pipeline.build_request_object({"request": sign(claims)}, params)

    assert exc_info.value.kind is RequestObjectErrorKind.SIGNATURE_VERIFICATION
    assert len(sink.events) == 1


def test_corrupt_stored_client_is_an_app_lookup_error(
    tmp_path, enforced_config, make_object, params, sink
):
    config = enforced_config.model_copy(
        update={"database_url": f"sqlite://{tmp_path / 'apps.db'}"}
    )
    pipeline = get_pipeline(config)
    pipeline.diagnostics = sink
    pipeline.app_store._conn.execute("UPDATE client_apps SET jwks = '{bad'")
    pipeline.app_store._conn.commit()

    with pytest.raises(RequestObjectError) as exc_info:
        pipeline.validate_request_object_signature(params, make_object())

    assert exc_info.value.kind is RequestObjectErrorKind.APP_LOOKUP
    assert exc_info.value.code == "server_error"
    assert len(sink.events) == 1
    assert sink.events[0].outcome is Outcome.FAILED


def test_module_functions_use_cached_default_pipeline(
    tmp_path, monkeypatch, rsa_keys, sign, unsigned, claims, params
):
    _, jwk = rsa_keys
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.safe_dump(
            {
                "clients": [
                    {
                        "client_id": "app1",
                        "request_object_signature_validation_enabled": True,
                        "jwks": {"keys": [jwk]},
                    }
                ]
            }
        )
    )
    monkeypatch.setenv("OIDC_REQOBJ_CONFIG", str(config_path))

    request_object = build_request_object({"request": sign(claims)}, params)

    assert request_object.is_signed
    assert get_pipeline() is get_pipeline()
    validate_request_object_signature(params, request_object)

    unsigned_object = get_pipeline().registry.lookup("request_param_value_builder").build(
        unsigned(claims), params
    )
    with pytest.raises(RequestObjectError) as exc_info:
        validate_request_object_signature(params, unsigned_object)
    assert exc_info.value.kind is RequestObjectErrorKind.UNSIGNED_OBJECT


def test_default_pipeline_built_once_across_threads(monkeypatch):
    loads = []

    def slow_load_config():
        loads.append(1)
        time.sleep(0.05)
        return RequestObjectConfig()

    monkeypatch.setattr(pipeline_module, "load_config", slow_load_config)
    barrier = threading.Barrier(8)
    results = []

    def worker():
        barrier.wait()
        results.append(get_pipeline())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(loads) == 1
    assert len(results) == 8
    assert all(p is results[0] for p in results)


def test_explicit_config_bypasses_default_pipeline():
    config = RequestObjectConfig()

    assert get_pipeline(config) is not get_pipeline(config)
    assert pipeline_module._pipeline_instance is None
