"""
Operators Package.

Defines the `OperatorProperty` contract consumed by the graph core, the
operator registry, and the built-in operators. Importing this package
registers every built-in operator.
"""

from symgraph.ops.base import OperatorProperty, Shape, ShapeList
from symgraph.ops.registry import create_operator, get_op_class, list_operators, register_op
from symgraph.ops import elemwise, nn  # noqa: F401

__all__ = [
  "OperatorProperty",
  "Shape",
  "ShapeList",
  "create_operator",
  "get_op_class",
  "list_operators",
  "register_op",
]
