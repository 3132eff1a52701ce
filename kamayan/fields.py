"""Field variables, metadata flags and the package that owns them."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Any


class Metadata(Enum):
    """Flags describing where a field lives and how it is treated."""

    CELL = "cell"
    FACE = "face"
    EDGE = "edge"
    NODE = "node"
    RESTART = "restart"
    FILL_GHOST = "fill_ghost"
    WITH_FLUXES = "with_fluxes"
    INDEPENDENT = "independent"
    DERIVED = "derived"
    ONE_COPY = "one_copy"


@dataclass(frozen=True)
class Variable:
    """A named field; calling it selects one component, as in ``MOMENTUM(1)``."""

    name: str
    shape: tuple[int, ...] = (1,)
    index: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", self.name.lower())
        shape = (self.shape,) if isinstance(self.shape, int) else tuple(self.shape)
        shape = tuple(int(extent) for extent in shape) or (1,)
        if any(extent < 1 for extent in shape):
            raise ValueError(f"invalid shape {shape} for variable {self.name}")
        object.__setattr__(self, "shape", shape)
        if not 0 <= self.index < self.n_comps:
            raise IndexError(
                f"component {self.index} out of range for {self.name} "
                f"with {self.n_comps} components"
            )

    @property
    def n_comps(self) -> int:
        """Total number of components."""
        return math.prod(self.shape)

    def __call__(self, index: int = 0) -> Variable:
        return replace(self, index=index)


@dataclass(frozen=True)
class Field:
    """A variable registered with a package."""

    variable: Variable
    flags: tuple[Metadata, ...]
    shape: tuple[int, ...]

    def has(self, *flags: Metadata) -> bool:
        return all(flag in self.flags for flag in flags)


@dataclass
class _Param:
    value: Any
    mutable: bool


class StateDescriptor:
    """A package of fields and named parameters."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._fields: dict[str, Field] = {}
        self._params: dict[str, _Param] = {}

    def add_field(
        self,
        variable: Variable,
        flags: Iterable[Metadata],
        shape: Iterable[int] | None = None,
    ) -> None:
        """Register ``variable`` with ``flags``; ``shape`` defaults to its own."""
        if variable.name in self._fields:
            raise ValueError(f"field {variable.name} already exists in {self.name}")
        flags = tuple(flags)
        for flag in flags:
            if not isinstance(flag, Metadata):
                raise TypeError(f"{flag!r} is not a metadata flag")
        field_shape = variable.shape if shape is None else tuple(shape)
        base = Variable(variable.name, field_shape)
        self._fields[variable.name] = Field(base, flags, base.shape)

    @property
    def fields(self) -> Mapping[str, Field]:
        """Registered fields by name, in registration order."""
        return MappingProxyType(self._fields)

    def variables(self, *flags: Metadata) -> list[Variable]:
        """Return the variables whose fields carry every one of ``flags``."""
        return [field.variable for field in self._fields.values() if field.has(*flags)]

    def add_param(self, name: str, value: Any, mutable: bool = False) -> None:
        """Store a named parameter; only mutable ones can be updated later."""
        if name in self._params:
            raise KeyError(f"param {name} already exists in {self.name}")
        self._params[name] = _Param(value, mutable)

    def param(self, name: str) -> Any:
        """Return the value of parameter ``name``."""
        try:
            return self._params[name].value
        except KeyError:
            raise KeyError(f"param {name} does not exist in {self.name}") from None

    def update_param(self, name: str, value: Any) -> None:
        """Replace the value of the mutable parameter ``name``."""
        try:
            entry = self._params[name]
        except KeyError:
            raise KeyError(f"param {name} does not exist in {self.name}") from None
        if not entry.mutable:
            raise ValueError(f"param {name} in {self.name} is not mutable")
        entry.value = value

    def __repr__(self) -> str:
        return f"StateDescriptor({self.name!r})"


def add_fields(
    pkg: StateDescriptor, variables: Iterable[Variable], flags: Iterable[Metadata]
) -> None:
    """Register every variable with the same flags and its default shape."""
    flags = tuple(flags)
    for variable in variables:
        pkg.add_field(variable, flags)


def center_flags(*args: Metadata) -> list[Metadata]:
    """Default flags for cell-centered fields, followed by ``args``."""
    return [Metadata.CELL, Metadata.RESTART, Metadata.FILL_GHOST, *args]


def face_flags(*args: Metadata) -> list[Metadata]:
    """Default flags for face-centered fields, followed by ``args``."""
    return [Metadata.FACE, Metadata.FILL_GHOST, *args]


# conserved variables
DENS = Variable("DENS")
MOMENTUM = Variable("MOMENTUM", (3,))
ENER = Variable("ENER")
MAG = Variable("MAG")

# primitives and equation of state
MAGC = Variable("MAGC", (3,))
EINT = Variable("EINT")
PRES = Variable("PRES")
GAMC = Variable("GAMC")
GAME = Variable("GAME")
TEMP = Variable("TEMP")

VELOCITY = Variable("VELOCITY", (3,))

# three temperature
TELE = Variable("TELE")
EELE = Variable("EELE")
PELE = Variable("PELE")
TION = Variable("TION")
EION = Variable("EION")
PION = Variable("PION")
TRAD = Variable("TRAD")
ERAD = Variable("ERAD")
PRAD = Variable("PRAD")

# derived
DIVB = Variable("DIVB")