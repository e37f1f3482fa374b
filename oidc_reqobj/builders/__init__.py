"""Request object builder registry and factory."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from ..config import RequestObjectConfig, load_config
from ..utils.imports import import_string
from .base import RequestObjectBuilder, parse_request_object
from .uri import RequestUriValueBuilder
from .value import RequestParamValueBuilder

logger = logging.getLogger(__name__)


class BuilderRegistry:
    """Read-only mapping of builder keys to builder instances.

    Populated once when the pipeline is assembled; lookups during request
    processing never mutate it.
    """

    def __init__(self, builders: Mapping[str, RequestObjectBuilder]) -> None:
        self._builders = MappingProxyType(dict(builders))

    def lookup(self, key: str) -> Optional[RequestObjectBuilder]:
        """Return the builder registered under ``key`` or ``None``."""
        return self._builders.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._builders

    def __iter__(self) -> Iterator[str]:
        return iter(self._builders)

    def __len__(self) -> int:
        return len(self._builders)

    def items(self):
        return self._builders.items()


def get_builder_registry(config: Optional[RequestObjectConfig] = None) -> BuilderRegistry:
    """Factory building the registry from the ``builders`` configuration."""

    config = config or load_config()
    builders: Dict[str, RequestObjectBuilder] = {}
    for key, dotted_path in config.builders.items():
        builder_cls = import_string(dotted_path)
        if not (isinstance(builder_cls, type) and issubclass(builder_cls, RequestObjectBuilder)):
            raise ValueError(f"{dotted_path} is not a RequestObjectBuilder")
        builders[key] = builder_cls.from_config(config)
        logger.debug(f"Registered request object builder {key} -> {dotted_path}")
    return BuilderRegistry(builders)


__all__ = [
    "BuilderRegistry",
    "RequestObjectBuilder",
    "RequestParamValueBuilder",
    "RequestUriValueBuilder",
    "get_builder_registry",
    "parse_request_object",
]
