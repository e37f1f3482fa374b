"""Builder for request objects passed by value."""

from __future__ import annotations

from ..models import CarrierType, OAuth2Parameters, RequestObject
from .base import RequestObjectBuilder, parse_request_object


class RequestParamValueBuilder(RequestObjectBuilder):
    """Decode the JWT carried in the ``request`` parameter."""

    carrier = CarrierType.REQUEST

    def build(self, raw_value: str, params: OAuth2Parameters) -> RequestObject:
        return parse_request_object(raw_value, self.carrier)
