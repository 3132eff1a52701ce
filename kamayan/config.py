"""Global configuration holding one value per option type."""

from __future__ import annotations

from enum import Enum
from typing import Any

from kamayan.options import is_poly_opt, opt_key


def _key_of(enum_type: Any) -> str:
    if not is_poly_opt(enum_type):
        raise TypeError(f"{enum_type!r} is not a polymorphic option type")
    return opt_key(enum_type)


class Config:
    """Stores exactly one value for each option type, keyed by its name."""

    def __init__(self) -> None:
        self._params: dict[str, Enum] = {}

    def add(self, value: Enum) -> None:
        """Register ``value``; its option type must not be present yet."""
        key = _key_of(type(value))
        if key in self._params:
            raise KeyError(f"option {key} already exists in the configuration")
        self._params[key] = value

    def update(self, value: Enum) -> None:
        """Replace the stored value of ``value``'s option type."""
        key = _key_of(type(value))
        if key not in self._params:
            raise KeyError(f"option {key} does not exist in the configuration")
        self._params[key] = value

    def get(self, enum_type: type[Enum]) -> Enum:
        """Return the stored value for ``enum_type``."""
        key = _key_of(enum_type)
        try:
            value = self._params[key]
        except KeyError:
            raise KeyError(f"option {key} does not exist in the configuration") from None
        if not isinstance(value, enum_type):
            raise TypeError(f"option {key} holds a value of a different type")
        return value

    def __contains__(self, enum_type: object) -> bool:
        return is_poly_opt(enum_type) and opt_key(enum_type) in self._params

    def __repr__(self) -> str:
        items = ", ".join(f"{key}={value.name}" for key, value in self._params.items())
        return f"Config({items})"