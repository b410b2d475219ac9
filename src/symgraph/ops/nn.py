"""
Neural Network Layer Operators.

`FullyConnected` and `Activation` cover the common layer stack; `Dropout`
carries a hidden return (its mask) and `SliceChannel` produces several
visible returns.
"""

from functools import reduce
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from symgraph.enums import ActivationType
from symgraph.errors import ShapeMismatchError
from symgraph.ops.base import InferResult, OperatorProperty, ShapeList, check_shape, same_shape
from symgraph.ops.registry import register_op


class FullyConnectedParams(BaseModel):
  model_config = ConfigDict(extra="forbid", frozen=True)

  num_hidden: int = Field(..., ge=1, description="Number of output units.")
  no_bias: bool = Field(False, description="If True, the layer has no bias argument.")


@register_op("FullyConnected")
class FullyConnected(OperatorProperty):
  """
  Dense layer ``data @ weight.T + bias``.

  Input data of shape ``(batch, d1, ..., dk)`` is flattened to
  ``(batch, d1 * ... * dk)``. The weight and bias shapes are inferred from the
  data shape and ``num_hidden``.
  """

  Params = FullyConnectedParams

  def list_arguments(self) -> List[str]:
    if self.params.no_bias:
      return ["data", "weight"]
    return ["data", "weight", "bias"]

  def infer_shape(self, in_shapes: ShapeList) -> InferResult:
    data = in_shapes[0]
    if data is None:
      return None
    if len(data) < 1:
      raise ShapeMismatchError(f"{self.type_string()}: data must have at least one dimension, got {data}")
    batch = data[0]
    in_dim = reduce(lambda a, b: a * b, data[1:], 1)
    num_hidden = self.params.num_hidden

    filled = [tuple(data), check_shape(self.type_string(), "weight", in_shapes[1], (num_hidden, in_dim))]
    if not self.params.no_bias:
      filled.append(check_shape(self.type_string(), "bias", in_shapes[2], (num_hidden,)))
    return filled, [(batch, num_hidden)]

  def declare_backward_dependency(self, out_grad, in_data, out_data):
    return [*out_grad, *in_data]


class ActivationParams(BaseModel):
  model_config = ConfigDict(extra="forbid", frozen=True)

  act_type: ActivationType = Field(..., description="Nonlinearity to apply.")


@register_op("Activation")
class Activation(OperatorProperty):
  """Element-wise nonlinearity. The gradient is computed from the output."""

  Params = ActivationParams

  def infer_shape(self, in_shapes: ShapeList) -> InferResult:
    return same_shape(in_shapes, 1, self.type_string())

  def declare_backward_dependency(self, out_grad, in_data, out_data):
    return [*out_grad, *out_data]


class DropoutParams(BaseModel):
  model_config = ConfigDict(extra="forbid", frozen=True)

  p: float = Field(0.5, ge=0.0, lt=1.0, description="Fraction of units dropped.")


@register_op("Dropout")
class Dropout(OperatorProperty):
  """
  Random unit dropping.

  Returns the output and a hidden mask; only the output is visible as a head.
  """

  Params = DropoutParams

  def list_returns(self) -> List[str]:
    return ["output", "mask"]

  def num_visible_returns(self) -> int:
    return 1

  def infer_shape(self, in_shapes: ShapeList) -> InferResult:
    return same_shape(in_shapes, 2, self.type_string())

  def declare_backward_dependency(self, out_grad, in_data, out_data):
    return [*out_grad, out_data[1]]


class SliceChannelParams(BaseModel):
  model_config = ConfigDict(extra="forbid", frozen=True)

  num_outputs: int = Field(..., ge=1, description="Number of equal slices.")
  axis: int = Field(1, description="Axis to split along; negative values count from the end.")


@register_op("SliceChannel")
class SliceChannel(OperatorProperty):
  """Splits ``data`` into ``num_outputs`` equal parts along ``axis``."""

  Params = SliceChannelParams

  def list_returns(self) -> List[str]:
    return [f"output{i}" for i in range(self.params.num_outputs)]

  def infer_shape(self, in_shapes: ShapeList) -> InferResult:
    data = in_shapes[0]
    if data is None:
      return None
    ndim = len(data)
    axis = self.params.axis + ndim if self.params.axis < 0 else self.params.axis
    if not 0 <= axis < ndim:
      raise ShapeMismatchError(f"{self.type_string()}: axis {self.params.axis} out of range for shape {data}")
    num = self.params.num_outputs
    if data[axis] % num != 0:
      raise ShapeMismatchError(
        f"{self.type_string()}: dimension {data[axis]} along axis {axis} is not divisible by {num}"
      )
    out = list(data)
    out[axis] = data[axis] // num
    return [tuple(data)], [tuple(out)] * num

  def declare_backward_dependency(self, out_grad, in_data, out_data):
    return list(out_grad)
