"""Enumerated runtime options that can drive dispatch."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Union

Labels = Union[str, Iterable[str]]

# Allowed values for every enumeration created through ``poly_parm``.
_ALLOWED: dict[type[Enum], tuple[Enum, ...]] = {}


def _split_labels(labels: Labels) -> list[str]:
    parts = labels.split(",") if isinstance(labels, str) else list(labels)
    names = [str(part).strip() for part in parts]
    if any(not name for name in names):
        raise ValueError(f"empty option label in {labels!r}")
    return names


def is_poly_opt(enum_type: Any) -> bool:
    """Return True if ``enum_type`` was created by :func:`poly_parm`."""
    return isinstance(enum_type, type) and enum_type in _ALLOWED


def _require_poly_opt(enum_type: Any) -> type[Enum]:
    if not is_poly_opt(enum_type):
        raise TypeError(f"{enum_type!r} is not a polymorphic option type")
    return enum_type


def poly_parm(name: str, labels: Labels, allowed: Labels | None = None) -> type[Enum]:
    """Create an option enumeration named ``name`` with the given labels.

    ``allowed`` optionally narrows the values that :func:`parm_list` reports;
    every entry of it must be one of ``labels``.
    """
    names = _split_labels(labels)
    if not names:
        raise ValueError(f"option {name} needs at least one label")
    if len(set(names)) != len(names):
        raise ValueError(f"duplicate labels in option {name}: {', '.join(names)}")

    enum_type = Enum(name, [(label, index) for index, label in enumerate(names)])

    if allowed is None:
        chosen = names
    else:
        chosen = _split_labels(allowed)
        if any(label not in names for label in chosen):
            raise ValueError(
                f"unrecognized option in OPT_{name} = {', '.join(chosen)} "
                f"valid values are: {', '.join(names)}"
            )
    _ALLOWED[enum_type] = tuple(enum_type[label] for label in chosen)
    return enum_type


def opt_key(enum_type: type[Enum]) -> str:
    """Return the key under which values of ``enum_type`` are stored."""
    return _require_poly_opt(enum_type).__name__


def opt_label(value: Enum) -> str:
    """Return the label of an option value."""
    _require_poly_opt(type(value))
    return value.name


def parm_list(enum_type: type[Enum]) -> tuple[Enum, ...]:
    """Return the values of ``enum_type`` that are enabled."""
    return _ALLOWED[_require_poly_opt(enum_type)]


def map_str_to_enum(
    enum_type: type[Enum],
    parm: str,
    mappings: Mapping[Enum, str] | Iterable[tuple[Enum, str]],
) -> Enum:
    """Map the string ``parm`` onto an option value using ``mappings``.

    The first pair whose string equals ``parm`` wins.
    """
    _require_poly_opt(enum_type)
    pairs = list(mappings.items()) if isinstance(mappings, Mapping) else list(mappings)
    for value, text in pairs:
        if not isinstance(value, enum_type):
            raise TypeError(f"{value!r} is not a value of {opt_key(enum_type)}")
        if parm == str(text):
            return value

    recognized = "".join(f"{text} " for _, text in pairs)
    raise ValueError(
        f"String mapping for [{parm}] to {opt_key(enum_type)} not handled.\n"
        f"Recognized values are: {recognized}\n"
    )


class OptList:
    """The values of one option type that a dispatch functor can handle.

    With no values given, every enabled value of the option is used.
    """

    __slots__ = ("enum_type", "values")

    def __init__(self, enum_type: type[Enum], *values: Enum) -> None:
        _require_poly_opt(enum_type)
        chosen = values or parm_list(enum_type)
        for value in chosen:
            if not isinstance(value, enum_type):
                raise TypeError(f"{value!r} is not a value of {opt_key(enum_type)}")
        self.enum_type = enum_type
        self.values: tuple[Enum, ...] = tuple(chosen)

    def __iter__(self):
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __contains__(self, value: object) -> bool:
        return value in self.values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OptList):
            return NotImplemented
        return self.enum_type is other.enum_type and self.values == other.values

    def __hash__(self) -> int:
        return hash((self.enum_type, self.values))

    def __repr__(self) -> str:
        labels = ", ".join(value.name for value in self.values)
        return f"OptList({self.enum_type.__name__}: {labels})"


class OptionFactory:
    """Describes how a dispatch builds a composite option from several options.

    Subclasses set ``options`` to a sequence of :class:`OptList` and may
    override :meth:`composite`, which receives one chosen value per entry.
    """

    options: tuple[OptList, ...] = ()

    @classmethod
    def composite(cls, *values: Enum) -> Any:
        return tuple(values)