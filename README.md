# kamayan

Building blocks for a block-structured simulation code:

- **Runtime options and dispatch** (`kamayan.options`, `kamayan.config`,
  `kamayan.dispatcher`). `poly_parm` creates an enumeration of the values an
  option may take. `Config` holds exactly one value per option type. A
  `Dispatcher` reads the configured values and calls a functor's `dispatch`
  method with them. The functor declares what it handles through `OptList`
  entries, and `OptionFactory` subclasses combine several options into one
  composite value. If a configured value is not handled, `DispatchError` is
  raised, and its message lists the allowed values. `map_str_to_enum` maps a
  string onto an option value.
- **Input decks** (`kamayan.parameter_input`). `ParameterInput` reads
  `<block>` sections of `key = value` lines from a string or a file. Text
  after `#` is a comment. It returns values as reals, integers, booleans or
  strings. When a key is missing, it stores the default it was given.
- **Runtime parameters** (`kamayan.runtime_parameters`). `RuntimeParameters`
  registers typed parameters under a block and a key. Each value is read from
  the deck and falls back to the default when the deck has none. A parameter
  may carry `Rule`s: a single number, a `(lower, upper)` range, or a string.
  `RuntimeParameterError` is raised in three cases: a value breaks every rule,
  a parameter is registered twice, or a lookup asks for one that does not
  exist. String values are stored in lower case. `add_n` registers `key0` to
  `key{n-1}`.
- **Units** (`kamayan.unit`). A `KamayanUnit` bundles the optional callbacks a
  piece of physics provides. A `UnitCollection` holds units by name. Its
  `add_tasks` calls a function first on the units not named in a list, then
  on the named ones in list order. `runtime_parameter_docs(unit)` runs a
  unit's setup and returns its parameters as a Markdown table, grouped by
  block.
- **Fields and mesh data** (`kamayan.fields`, `kamayan.grid_types`,
  `kamayan.mesh`):
  - `Variable`, `Metadata` and `StateDescriptor` describe fields and package
    parameters. `center_flags` and `face_flags` give the default flag sets.
  - `TopologicalElement`, `Axis`, `IndexRange`, `increment_te` and `is_edge`
    describe where data lives on a cell.
  - `MeshBlock` stores field data and fluxes as numpy arrays.
  - `MeshData` groups blocks. Its `get_pack` returns a `SparsePack`, which
    indexes a variable as `pack[b, var, k, j, i]` or
    `pack[b, te, var, k, j, i]`.
  - `make_block_list` builds blocks for a package.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Runtime parameters read from a deck:

```python
from kamayan.parameter_input import ParameterInput
from kamayan.runtime_parameters import RuntimeParameters

pin = ParameterInput()
pin.load_from_string("<block1>\nvar1 = 8\n")

rps = RuntimeParameters(pin)
rps.add("block1", "var1", 0, "An integer read from the deck", [(3, 9)])
assert rps.get("block1", "var1") == 8
```

Dispatching on a configured option:

```python
from kamayan.dispatcher import Dispatcher
from kamayan.options import OptList, poly_parm

Foo = poly_parm("Foo", "a, b")

class Scale:
    options = (OptList(Foo),)

    def dispatch(self, foo, x):
        return 2 * x if foo is Foo.a else x

assert Dispatcher(Scale, "example", Foo.a).execute(3) == 6
```

## What the package does not do

The package has no time-stepping driver. It does not build task lists, it
does not apply flux divergence or Runge-Kutta stage updates to mesh data, and
it has no stencil views of packs. It installs no command-line program. To get
parameter documentation, call `runtime_parameter_docs` from Python and write
the string it returns yourself.