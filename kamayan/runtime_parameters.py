"""Documented runtime parameters read from an input deck and checked by rules."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Any, Callable, Union

from kamayan.parameter_input import ParameterInput

Value = Union[bool, int, float, str]

_TYPE_NAMES: dict[type, str] = {
    int: "Integer",
    float: "Real",
    bool: "Boolean",
    str: "String",
}

_READERS: dict[type, Callable[[ParameterInput, str, str, Any], Any]] = {
    bool: ParameterInput.get_or_add_boolean,
    int: ParameterInput.get_or_add_integer,
    float: ParameterInput.get_or_add_real,
    str: ParameterInput.get_or_add_string,
}


class RuntimeParameterError(RuntimeError):
    """Raised for duplicate, missing or invalid runtime parameters."""


def _value_type(value: Any) -> type:
    if isinstance(value, bool):
        return bool
    if isinstance(value, int):
        return int
    if isinstance(value, float):
        return float
    if isinstance(value, str):
        return str
    raise TypeError(f"unsupported runtime parameter type: {type(value).__name__}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class _RuleKind(Enum):
    RANGE = "range"
    CHOICE = "choice"
    ANY = "any"


class Rule:
    """An allowed value or range for a runtime parameter.

    A number allows exactly that value, a pair ``(lower, upper)`` allows the
    closed range between them, a string allows that string (compared in lower
    case) and a boolean allows anything.
    """

    __slots__ = ("kind", "lower", "upper", "value")

    def __init__(self, spec: Any) -> None:
        self.lower: Any = None
        self.upper: Any = None
        self.value: str | None = None
        if isinstance(spec, Rule):
            self.kind = spec.kind
            self.lower, self.upper, self.value = spec.lower, spec.upper, spec.value
        elif isinstance(spec, bool):
            self.kind = _RuleKind.ANY
        elif isinstance(spec, str):
            self.kind = _RuleKind.CHOICE
            self.value = spec.lower()
        elif _is_number(spec):
            self.kind = _RuleKind.RANGE
            self.lower = self.upper = spec
        elif (
            isinstance(spec, (tuple, list))
            and len(spec) == 2
            and all(_is_number(bound) for bound in spec)
        ):
            self.kind = _RuleKind.RANGE
            self.lower, self.upper = spec
        else:
            raise TypeError(f"cannot build a rule from {spec!r}")

    def validate(self, value: Any) -> bool:
        """Return True if ``value`` satisfies this rule."""
        if self.kind is _RuleKind.CHOICE:
            return value == self.value
        if self.kind is _RuleKind.ANY:
            return True
        return self.lower <= value <= self.upper

    def __repr__(self) -> str:
        if self.kind is _RuleKind.CHOICE:
            return f"Rule({self.value!r})"
        if self.kind is _RuleKind.ANY:
            return "Rule(any)"
        return f"Rule({self.lower!r}, {self.upper!r})"


_EXPECTED_KIND = {
    bool: _RuleKind.ANY,
    int: _RuleKind.RANGE,
    float: _RuleKind.RANGE,
    str: _RuleKind.CHOICE,
}


def _coerce_rule(spec: Any, value_type: type) -> Rule:
    rule = Rule(spec)
    if rule.kind is not _EXPECTED_KIND[value_type]:
        raise TypeError(f"rule {rule!r} does not apply to a {_TYPE_NAMES[value_type]}")
    if value_type is float:
        rule.lower, rule.upper = float(rule.lower), float(rule.upper)
    elif value_type is int and not all(
        isinstance(bound, int) for bound in (rule.lower, rule.upper)
    ):
        raise TypeError(f"integer rule {rule!r} has non-integer bounds")
    return rule


def _stream(value: Any) -> str:
    """Format a value the way a default output stream prints it."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        return "%g" % value
    return str(value)


def _rules_doc(value_type: type, rules: tuple[Rule, ...]) -> str:
    if not rules or value_type is bool:
        return ""
    parts = [" ["]
    for rule in rules:
        if value_type is str:
            parts.append(f" {rule.value}, ")
        elif rule.upper > rule.lower:
            parts.append(f"{_stream(rule.lower)}...{_stream(rule.upper)}, ")
        else:
            parts.append(f"{_stream(rule.lower)}, ")
    parts.append("]")
    return "".join(parts)


def _default_str(value: Value) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    text = "%f" % value if isinstance(value, float) else str(value)
    if len(text) > 5:
        text = f"{float(value):.5e}"
    return text


class Parameter:
    """One validated runtime parameter together with its documentation."""

    def __init__(
        self,
        block: str,
        key: str,
        docstring: str,
        value: Value,
        rules: Iterable[Any] = (),
    ) -> None:
        self.value_type = _value_type(value)
        self.block = block
        self.key = key
        self.value = value
        self.rules = tuple(_coerce_rule(spec, self.value_type) for spec in rules)

        described = _rules_doc(self.value_type, self.rules) + " | " + docstring
        if self.rules and not any(rule.validate(value) for rule in self.rules):
            raise RuntimeParameterError(
                "[Error] Invalid value for runtime parameter "
                f"<{block}>/{key} = {_stream(value)}{described}\n"
            )
        self.docstring = f"{_default_str(value)} | {described}"

    @property
    def type_name(self) -> str:
        """Human readable name of the parameter's type."""
        return _TYPE_NAMES[self.value_type]

    def doc_string(self) -> str:
        """Return the parameter's row in a markdown parameter table."""
        return f" | {self.key} | {self.type_name} | {self.docstring}\n"

    def __repr__(self) -> str:
        return f"Parameter(<{self.block}>/{self.key} = {self.value!r})"


class RuntimeParameters:
    """Registry of runtime parameters whose values come from an input deck."""

    def __init__(self, pin: ParameterInput | None = None) -> None:
        self.pin = pin if pin is not None else ParameterInput()
        self._parms: dict[str, Parameter] = {}

    def _require_new(self, full_key: str) -> None:
        existing = self._parms.get(full_key)
        if existing is not None:
            raise RuntimeParameterError(
                f"[Error] {existing.type_name} Runtime Parameter {full_key} "
                f"already exists {existing.block}/{existing.key}"
            )

    def _require_exists(self, full_key: str) -> Parameter:
        try:
            return self._parms[full_key]
        except KeyError:
            raise RuntimeParameterError(
                f"[Error] Runtime Parameter {full_key} doesn't exist "
            ) from None

    def add(
        self,
        block: str,
        key: str,
        value: Value,
        docstring: str,
        rules: Iterable[Any] = (),
    ) -> None:
        """Register ``block``/``key``, reading its value from the input deck.

        ``value`` is the default and fixes the parameter's type. String values
        are stored in lower case.
        """
        full_key = block + key
        self._require_new(full_key)
        value_type = _value_type(value)
        read = _READERS[value_type](self.pin, block, key, value)
        if value_type is str:
            read = read.lower()
        self._parms[full_key] = Parameter(block, key, docstring, read, rules)

    def add_n(
        self,
        block: str,
        key: str,
        n: int,
        value: Value,
        docstring: str,
        rules: Iterable[Any] = (),
    ) -> None:
        """Register ``n`` parameters named ``key0`` to ``key{n-1}``."""
        rules = tuple(rules)
        for index in range(n):
            self.add(block, f"{key}{index}", value, docstring, rules)

    def get(self, block: str, key: str) -> Value:
        """Return the value of a registered parameter."""
        return self._require_exists(block + key).value

    def get_or_add(
        self,
        block: str,
        key: str,
        value: Value,
        docstring: str,
        rules: Iterable[Any] = (),
    ) -> Value:
        """Register the parameter if it is missing, then return its value."""
        if block + key not in self._parms:
            self.add(block, key, value, docstring, rules)
        return self.get(block, key)

    def __contains__(self, full_key: object) -> bool:
        return full_key in self._parms

    def __len__(self) -> int:
        return len(self._parms)

    def __iter__(self) -> Iterator[Parameter]:
        """Yield the parameters ordered by block name followed by key."""
        for full_key in sorted(self._parms):
            yield self._parms[full_key]