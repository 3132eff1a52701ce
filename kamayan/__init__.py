"""Runtime options, dispatch, runtime parameters, units, fields and mesh data packs."""

__version__ = "0.1.0"