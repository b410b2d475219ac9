"""
CLI Command Handlers Facade.

Re-exports the handlers from `symgraph.cli.handlers` so the entry point has a
single import surface.
"""

from symgraph.cli.handlers.inspect import handle_describe, handle_ops
from symgraph.cli.handlers.analysis import handle_grad, handle_infer_shape

__all__ = [
  "handle_describe",
  "handle_grad",
  "handle_infer_shape",
  "handle_ops",
]
