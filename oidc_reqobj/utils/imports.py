import importlib
from typing import Any


def import_string(dotted_path: str) -> Any:
    """Import a class or attribute from a ``module.Attribute`` path."""
    module_path, _, attr = dotted_path.rpartition(".")
    if not module_path:
        raise ValueError(f"'{dotted_path}' is not a dotted import path")

    try:
        module = importlib.import_module(module_path)
        return getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ValueError(f"Failed to import '{attr}' from module '{module_path}': {e}") from e
