"""Units of physics and the collection that orders their callbacks."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Optional

from kamayan.config import Config
from kamayan.parameter_input import ParameterInput
from kamayan.runtime_parameters import RuntimeParameters

Callback = Optional[Callable[..., Any]]


@dataclass(eq=False)
class KamayanUnit:
    """A named unit with optional callbacks used by the driver.

    ``setup(config, rps)`` registers options and runtime parameters;
    ``initialize(config, rps)`` returns the unit's package;
    ``problem_generator_mesh_block(block)`` sets initial conditions;
    ``prepare_conserved(md)`` and ``prepare_primitive(md)`` convert variables;
    ``add_flux_tasks(prev, task_list, md)``,
    ``add_tasks_one_step(prev, task_list, md, dudt)`` and
    ``add_tasks_split(prev, task_list, md, dt)`` add tasks and return the last
    task's id.
    """

    name: str
    setup: Callback = None
    initialize: Callback = None
    problem_generator_mesh_block: Callback = None
    prepare_conserved: Callback = None
    prepare_primitive: Callback = None
    add_flux_tasks: Callback = None
    add_tasks_one_step: Callback = None
    add_tasks_split: Callback = None


class UnitCollection:
    """Units by name, plus the orders in which the driver calls them."""

    def __init__(self) -> None:
        self._units: dict[str, KamayanUnit] = {}
        self.rk_fluxes: list[str] = []
        self.rk_stage: list[str] = []
        self.prepare_prim: list[str] = []
        self.operator_split: list[str] = []

    def get(self, key: str) -> KamayanUnit:
        """Return the unit registered as ``key``."""
        try:
            return self._units[key]
        except KeyError:
            raise KeyError(f"unit {key} is not registered") from None

    def __getitem__(self, key: str) -> KamayanUnit:
        return self.get(key)

    def __setitem__(self, key: str, unit: KamayanUnit) -> None:
        self._units[key] = unit

    def add(self, unit: KamayanUnit) -> None:
        """Register ``unit`` under its own name."""
        self._units[unit.name] = unit

    def __iter__(self) -> Iterator[str]:
        """Yield unit names in sorted order."""
        return iter(sorted(self._units))

    def items(self) -> list[tuple[str, KamayanUnit]]:
        """Return ``(name, unit)`` pairs in sorted name order."""
        return [(name, self._units[name]) for name in self]

    def __len__(self) -> int:
        return len(self._units)

    def __contains__(self, key: object) -> bool:
        return key in self._units

    def copy(self) -> UnitCollection:
        """Return a shallow copy sharing the same units."""
        other = UnitCollection()
        other._units = dict(self._units)
        other.rk_fluxes = list(self.rk_fluxes)
        other.rk_stage = list(self.rk_stage)
        other.prepare_prim = list(self.prepare_prim)
        other.operator_split = list(self.operator_split)
        return other

    def add_tasks(
        self, unit_list: Iterable[str], function: Callable[[KamayanUnit], Any]
    ) -> None:
        """Call ``function`` on every unit not in ``unit_list``, then on those
        in ``unit_list`` in its order."""
        ordered = list(unit_list)
        for name, unit in self.items():
            if name not in ordered:
                function(unit)
        for key in ordered:
            function(self.get(key))


_TABLE_HEADER = (
    "| Paramter | Type | Default | Allowed | Description |\n"
    "| -------  | ---- | ------  | ------- | ----------- |\n"
)


def runtime_parameter_docs(unit: KamayanUnit) -> str:
    """Return a markdown table of the runtime parameters ``unit`` registers."""
    if unit.setup is None:
        return ""
    rps = RuntimeParameters(ParameterInput())
    unit.setup(Config(), rps)

    by_block: dict[str, list[str]] = {}
    for parm in rps:
        by_block.setdefault(parm.block, []).append(parm.doc_string())

    lines = [_TABLE_HEADER]
    for block in sorted(by_block):
        lines.append(f"**<{block}\\>**\n")
        lines.extend(by_block[block])
    return "".join(lines)