"""
Enumerations for symgraph.

This module defines standard enumerations used across the codebase for
node classification and operator configuration.
"""

from enum import Enum


class NodeKind(str, Enum):
  """
  Structural variant of a graph node.

  The variant is never stored on the node; it is derived from which fields
  are populated (see `symgraph.core.node.Node.kind`).
  """

  VARIABLE = "variable"  # no operator, no backward source
  OPERATOR = "operator"  # owns an operator instance
  GRADIENT = "gradient"  # borrows its type from a backward source


class ActivationType(str, Enum):
  """
  Nonlinearities supported by the `Activation` operator.
  """

  RELU = "relu"
  SIGMOID = "sigmoid"
  TANH = "tanh"
  SOFTRELU = "softrelu"
