"""Read-only views over incoming authorization requests."""

from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence, Union


class AuthorizationRequestView(Protocol):
    """Anything exposing named parameter lookup for an authorization request."""

    def get_param(self, name: str) -> Optional[str]:
        """Return the value of ``name`` or ``None`` when absent."""


class MappingAuthorizationRequest:
    """Adapt a query/form mapping to :class:`AuthorizationRequestView`.

    Multi-valued parameters (as produced by ``urllib.parse.parse_qs``) resolve
    to their first value.
    """

    def __init__(self, params: Mapping[str, Union[str, Sequence[str]]]) -> None:
        self._params = params

    def get_param(self, name: str) -> Optional[str]:
        value = self._params.get(name)
        if value is None or isinstance(value, str):
            return value
        return value[0] if value else None


def is_blank(value: Optional[str]) -> bool:
    """``True`` for ``None``, empty or whitespace-only strings."""
    return value is None or not value.strip()
