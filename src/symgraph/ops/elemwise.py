"""
Element-wise Operators.

Binary arithmetic (`Add`, `Sub`, `Mul`), the n-ary `ElementWiseSum` used by
the backward pass to accumulate gradients, and `ZerosLike`, which stands in
for outputs that receive no gradient.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from symgraph.ops.base import InferResult, OperatorProperty, ShapeList, same_shape
from symgraph.ops.registry import register_op


class _BinaryOp(OperatorProperty):
  """Shared behaviour of two-input element-wise operators."""

  def list_arguments(self) -> List[str]:
    return ["lhs", "rhs"]

  def infer_shape(self, in_shapes: ShapeList) -> InferResult:
    return same_shape(in_shapes, 1, self.type_string())


@register_op("Add")
class Add(_BinaryOp):
  """``lhs + rhs``."""

  def declare_backward_dependency(self, out_grad, in_data, out_data):
    return list(out_grad)


@register_op("Sub")
class Sub(_BinaryOp):
  """``lhs - rhs``."""

  def declare_backward_dependency(self, out_grad, in_data, out_data):
    return list(out_grad)


@register_op("Mul")
class Mul(_BinaryOp):
  """``lhs * rhs``. The gradient of each side reads the other side."""

  def declare_backward_dependency(self, out_grad, in_data, out_data):
    return [*out_grad, *in_data]


class ElementWiseSumParams(BaseModel):
  model_config = ConfigDict(extra="forbid", frozen=True)

  num_args: int = Field(..., ge=1, description="Number of summed inputs.")


@register_op("ElementWiseSum")
class ElementWiseSum(OperatorProperty):
  """Sum of ``num_args`` inputs of identical shape."""

  Params = ElementWiseSumParams

  def list_arguments(self) -> List[str]:
    return [f"arg{i}" for i in range(self.params.num_args)]

  def infer_shape(self, in_shapes: ShapeList) -> InferResult:
    return same_shape(in_shapes, 1, self.type_string())

  def declare_backward_dependency(self, out_grad, in_data, out_data):
    return list(out_grad)


@register_op("ZerosLike")
class ZerosLike(OperatorProperty):
  """Zeros with the shape of its input."""

  def infer_shape(self, in_shapes: ShapeList) -> InferResult:
    return same_shape(in_shapes, 1, self.type_string())

  def declare_backward_dependency(self, out_grad, in_data, out_data):
    return []
