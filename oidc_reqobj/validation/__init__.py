"""Request object validators."""

from __future__ import annotations

from typing import Optional

from ..apps import AppConfigStore, get_app_store
from ..config import RequestObjectConfig, load_config
from ..utils.imports import import_string
from .base import RequestObjectValidator
from .jws import JwtRequestObjectValidator


def get_validator(
    config: Optional[RequestObjectConfig] = None,
    app_store: Optional[AppConfigStore] = None,
) -> RequestObjectValidator:
    """Factory for the validator named by the ``validator`` setting."""

    config = config or load_config()
    validator_cls = import_string(config.validator)
    if not (isinstance(validator_cls, type) and issubclass(validator_cls, RequestObjectValidator)):
        raise ValueError(f"{config.validator} is not a RequestObjectValidator")
    return validator_cls.from_config(config, app_store or get_app_store(config=config))


__all__ = ["JwtRequestObjectValidator", "RequestObjectValidator", "get_validator"]
