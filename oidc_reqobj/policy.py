"""Per-client signature policy for request objects."""

from __future__ import annotations

from enum import Enum

from .models import ClientAppConfig, RequestObject


class SignaturePolicy(str, Enum):
    """Whether a client must sign its request objects."""

    ENFORCED = "enforced"
    OPTIONAL = "optional"

    @classmethod
    def for_app(cls, app: ClientAppConfig) -> "SignaturePolicy":
        if app.request_object_signature_validation_enabled:
            return cls.ENFORCED
        return cls.OPTIONAL


class SignatureAction(str, Enum):
    """What the pipeline does with a request object's signature."""

    VERIFY = "verify"
    SKIP = "skip"
    REJECT_UNSIGNED = "reject_unsigned"


def decide(policy: SignaturePolicy, request_object: RequestObject) -> SignatureAction:
    """Map a policy and the object's signed state to an action.

    Signed objects are always verified, whatever the policy. Unsigned objects
    are rejected when the policy is enforced and accepted otherwise.
    """
    if request_object.is_signed:
        return SignatureAction.VERIFY
    if policy is SignaturePolicy.ENFORCED:
        return SignatureAction.REJECT_UNSIGNED
    return SignatureAction.SKIP
