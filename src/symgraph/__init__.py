"""
symgraph Package.

A symbolic computation-graph builder. Graphs are assembled from named
variables and operators by functional composition, lowered into a canonical
index-addressed form, and analysed there for shapes and gradients. Nothing is
ever executed numerically.

Usage
-----

.. code-block:: python

    import symgraph as sg

    x = sg.Variable("x")
    y = sg.Variable("y")
    z = sg.Mul(x, y, name="z")

    z.list_arguments()          # ['x', 'y']
    gx = z.grad(["x"])          # gradient graph, one head
    res = z.infer_shape(x=(2, 3), y=(2, 3))
    res.out_shapes              # [(2, 3)]
"""

from symgraph.config import RuntimeConfig, get_config, reset_config, set_config
from symgraph.core.results import ShapeInferenceResult
from symgraph.core.symbol import Symbol
from symgraph.errors import (
  ArityMismatchError,
  DuplicateArgumentNameError,
  IndexOutOfRangeError,
  NotComposableError,
  SymbolError,
  UnmatchedKeywordError,
  UnsupportedTupleArgumentError,
)
from symgraph import api
from symgraph.api import *  # noqa: F401,F403

__version__ = "0.0.1"

__all__ = [
  "ArityMismatchError",
  "DuplicateArgumentNameError",
  "IndexOutOfRangeError",
  "NotComposableError",
  "RuntimeConfig",
  "ShapeInferenceResult",
  "Symbol",
  "SymbolError",
  "UnmatchedKeywordError",
  "UnsupportedTupleArgumentError",
  "__version__",
  "api",
  "get_config",
  "reset_config",
  "set_config",
  *api.__all__,
]
