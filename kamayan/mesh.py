"""Mesh blocks holding field data, and packs that index into them."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import Any

import numpy as np

from kamayan.fields import Field, Metadata, StateDescriptor, Variable
from kamayan.grid_types import (
    EDGES,
    FACES,
    Axis,
    IndexDomain,
    IndexRange,
    TopologicalElement,
)

TE = TopologicalElement


def _elements(field: Field) -> tuple[TopologicalElement, ...]:
    if field.has(Metadata.FACE):
        return FACES
    if field.has(Metadata.EDGE):
        return EDGES
    if field.has(Metadata.NODE):
        return (TE.NN,)
    return (TE.CC,)


def _flux_elements(te: TopologicalElement) -> tuple[TopologicalElement, ...]:
    if te is TE.CC:
        return FACES
    if te in FACES:
        return EDGES
    return ()


class MeshBlock:
    """A cubic block of ``nxb`` cells per active dimension with ghost zones."""

    def __init__(
        self,
        nxb: int,
        ndim: int,
        pkg: StateDescriptor | None = None,
        nghost: int = 2,
        xmin: float = 0.0,
        xmax: float = 1.0,
    ) -> None:
        if ndim not in (1, 2, 3):
            raise ValueError(f"ndim must be 1, 2 or 3, got {ndim}")
        if nxb < 1 or nghost < 0:
            raise ValueError("block needs at least one cell and no negative ghosts")
        if xmax <= xmin:
            raise ValueError("xmax must be larger than xmin")
        self.nxb = nxb
        self.ndim = ndim
        self.nghost = nghost
        self.pkg = pkg
        extent = xmax - xmin
        # dx along x1, x2, x3
        self.dx: tuple[float, float, float] = tuple(
            extent / nxb if d < ndim else extent for d in range(3)
        )
        self.data: dict[tuple[str, TopologicalElement], np.ndarray] = {}
        self.fluxes: dict[tuple[str, TopologicalElement], np.ndarray] = {}
        if pkg is not None:
            self._allocate(pkg)

    def is_active(self, axis: Axis) -> bool:
        """Return True if the block has more than one cell along ``axis``."""
        return 2 - int(axis) < self.ndim

    @property
    def ncells(self) -> tuple[int, int, int]:
        """Number of cells including ghosts along (k, j, i)."""
        return tuple(
            self.nxb + 2 * self.nghost if self.is_active(axis) else 1 for axis in Axis
        )

    def _shape(self, ncomp: int, te: TopologicalElement) -> tuple[int, ...]:
        return (ncomp,) + tuple(
            n + (1 if axis in te.staggered else 0)
            for axis, n in zip(Axis, self.ncells)
        )

    def _allocate(self, pkg: StateDescriptor) -> None:
        for name, field in pkg.fields.items():
            ncomp = field.variable.n_comps
            for te in _elements(field):
                self.data[(name, te)] = np.zeros(self._shape(ncomp, te))
                if field.has(Metadata.WITH_FLUXES):
                    for flux_te in _flux_elements(te):
                        key = (name, flux_te)
                        if key not in self.fluxes:
                            self.fluxes[key] = np.zeros(self._shape(ncomp, flux_te))

    def bounds(
        self, domain: IndexDomain = IndexDomain.INTERIOR, te: TopologicalElement = TE.CC
    ) -> tuple[IndexRange, IndexRange, IndexRange]:
        """Index ranges along (k, j, i) for ``domain`` and element ``te``."""
        ranges = []
        for axis in Axis:
            if not self.is_active(axis):
                ranges.append(IndexRange(0, 0))
                continue
            if domain is IndexDomain.INTERIOR:
                s, e = self.nghost, self.nghost + self.nxb - 1
            else:
                s, e = 0, self.nxb + 2 * self.nghost - 1
            if axis in te.staggered:
                e += 1
            ranges.append(IndexRange(s, e))
        return tuple(ranges)

    def volume(self, te: TopologicalElement = TE.CC) -> float:
        """Cell volume, face area, edge length or 1 for nodes."""
        return math.prod(
            self.dx[d] for d in range(3) if Axis(2 - d) not in te.staggered
        )

    def __repr__(self) -> str:
        return f"MeshBlock(nxb={self.nxb}, ndim={self.ndim}, nghost={self.nghost})"


class _FluxView:
    __slots__ = ("_pack",)

    def __init__(self, pack: SparsePack) -> None:
        self._pack = pack

    def _target(self, key: tuple) -> tuple[np.ndarray, tuple]:
        if not isinstance(key, tuple) or len(key) != 6:
            raise TypeError("flux index must be (b, te, var, k, j, i)")
        b, te, var, k, j, i = key
        return self._pack._array(b, TE(te), var, fluxes=True) + ((k, j, i),)

    def __getitem__(self, key: tuple) -> Any:
        arr, comp, kji = self._target(key)
        return arr[(comp, *kji)]

    def __setitem__(self, key: tuple, value: Any) -> None:
        arr, comp, kji = self._target(key)
        arr[(comp, *kji)] = value


class SparsePack:
    """Indexes variables of several blocks by a flat variable index.

    ``pack[b, var, k, j, i]`` reads cell data and ``pack[b, te, var, k, j, i]``
    reads data on element ``te``; ``var`` is a :class:`Variable` (with its
    component) or a flat index. Indices may be integers, slices or arrays.
    """

    def __init__(
        self,
        blocks: Sequence[MeshBlock],
        variables: Iterable[Variable],
        with_fluxes: bool = False,
    ) -> None:
        self.blocks = list(blocks)
        self.with_fluxes = with_fluxes
        pkg = self.blocks[0].pkg if self.blocks else None
        self._offsets: dict[str, int] = {}
        self._sizes: dict[str, int] = {}
        self._comps: list[tuple[str, int]] = []
        for variable in variables:
            if variable.name in self._offsets:
                continue
            ncomp = variable.n_comps
            if pkg is not None:
                try:
                    field = pkg.fields[variable.name]
                except KeyError:
                    raise KeyError(f"variable {variable.name} is not registered") from None
                if with_fluxes and not field.has(Metadata.WITH_FLUXES):
                    raise ValueError(f"variable {variable.name} has no fluxes")
                ncomp = field.variable.n_comps
            self._offsets[variable.name] = len(self._comps)
            self._sizes[variable.name] = ncomp
            self._comps.extend((variable.name, c) for c in range(ncomp))

    @property
    def nblocks(self) -> int:
        return len(self.blocks)

    @property
    def max_number_of_vars(self) -> int:
        return len(self._comps)

    def lower_bound(self, b: int) -> int:
        """First flat variable index present on block ``b``."""
        self.blocks[b]
        return 0

    def upper_bound(self, b: int) -> int:
        """Last flat variable index present on block ``b``."""
        self.blocks[b]
        return len(self._comps) - 1

    def index(self, var: Variable | int) -> int:
        """Return the flat index of ``var`` in this pack."""
        name, comp = self._resolve(var)
        return self._offsets[name] + comp

    def size(self, var: Variable) -> int:
        """Number of components of ``var`` in this pack."""
        name, _ = self._resolve(var)
        return self._sizes[name]

    def coordinates(self, b: int) -> MeshBlock:
        """The block whose cell sizes and volumes apply to index ``b``."""
        return self.blocks[b]

    def _resolve(self, var: Variable | int) -> tuple[str, int]:
        if isinstance(var, Variable):
            if var.name not in self._offsets:
                raise KeyError(f"variable {var.name} is not in this pack")
            if var.index >= self._sizes[var.name]:
                raise IndexError(f"component {var.index} out of range for {var.name}")
            return var.name, var.index
        if isinstance(var, (int, np.integer)) and not isinstance(var, bool):
            if not 0 <= var < len(self._comps):
                raise IndexError(f"variable index {var} out of range")
            return self._comps[int(var)]
        raise TypeError(f"cannot index a pack with {var!r}")

    def _array(
        self, b: int, te: TopologicalElement, var: Variable | int, fluxes: bool = False
    ) -> tuple[np.ndarray, int]:
        name, comp = self._resolve(var)
        if fluxes and not self.with_fluxes:
            raise ValueError("pack was built without fluxes")
        store = self.blocks[b].fluxes if fluxes else self.blocks[b].data
        try:
            return store[(name, te)], comp
        except KeyError:
            kind = "flux" if fluxes else "data"
            raise KeyError(f"variable {name} has no {kind} on {te.name}") from None

    def _parse(self, key: tuple) -> tuple[np.ndarray, tuple]:
        if not isinstance(key, tuple) or len(key) not in (5, 6):
            raise TypeError("pack index must be (b, var, k, j, i) or (b, te, var, k, j, i)")
        if len(key) == 5:
            b, var, k, j, i = key
            te = TE.CC
        else:
            b, te, var, k, j, i = key
        arr, comp = self._array(b, TE(te), var)
        return arr, (comp, k, j, i)

    def __getitem__(self, key: tuple) -> Any:
        arr, index = self._parse(key)
        return arr[index]

    def __setitem__(self, key: tuple, value: Any) -> None:
        arr, index = self._parse(key)
        arr[index] = value

    @property
    def fluxes(self) -> _FluxView:
        """Read and write fluxes as ``pack.fluxes[b, te, var, k, j, i]``."""
        return _FluxView(self)

    def flux(self, b: int, te: TopologicalElement, var: Variable | int, k, j, i) -> Any:
        """Return the flux of ``var`` on element ``te``."""
        return self.fluxes[b, te, var, k, j, i]


class MeshData:
    """A named collection of mesh blocks."""

    def __init__(self, blocks: Iterable[MeshBlock] = (), name: str = "base") -> None:
        self.name = name
        self.blocks = list(blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    @property
    def ndim(self) -> int:
        return self._first().ndim

    def _first(self) -> MeshBlock:
        if not self.blocks:
            raise ValueError(f"mesh data {self.name} has no blocks")
        return self.blocks[0]

    def variables(self, *flags: Metadata) -> list[Variable]:
        """Variables registered on the blocks that carry all of ``flags``."""
        if not self.blocks or self.blocks[0].pkg is None:
            return []
        return self.blocks[0].pkg.variables(*flags)

    def get_pack(
        self, variables: Iterable[Variable] | None = None, with_fluxes: bool = False
    ) -> SparsePack:
        """Pack ``variables`` (all, or all with fluxes, if None) of every block."""
        if variables is None:
            flags = (Metadata.WITH_FLUXES,) if with_fluxes else ()
            variables = self.variables(*flags)
        return SparsePack(self.blocks, variables, with_fluxes)

    def bounds(
        self, domain: IndexDomain = IndexDomain.INTERIOR, te: TopologicalElement = TE.CC
    ) -> tuple[IndexRange, IndexRange, IndexRange]:
        """Index ranges along (k, j, i) shared by all blocks."""
        return self._first().bounds(domain, te)

    def __repr__(self) -> str:
        return f"MeshData({self.name!r}, nblocks={len(self.blocks)})"


def make_block_list(
    pkg: StateDescriptor, nblocks: int, nxb: int, ndim: int
) -> list[MeshBlock]:
    """Create ``nblocks`` blocks holding the fields registered in ``pkg``."""
    return [MeshBlock(nxb, ndim, pkg) for _ in range(nblocks)]