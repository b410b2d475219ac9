"""
Operator Property Contract.

An `OperatorProperty` describes one operator type to the graph core: its
argument and return names, how many returns are visible, how shapes flow
through it, and which forward values its gradient depends on. It never
computes anything numerically.

Parameters are declared as a Pydantic model on each subclass (``Params``) and
validated when the operator is constructed.
"""

import abc
from typing import Any, ClassVar, List, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from symgraph.errors import OperatorParamError, ShapeMismatchError

Shape = Tuple[int, ...]
"""A concrete tensor shape."""

ShapeList = List[Optional[Shape]]
"""Per-slot shapes where None marks an unknown shape."""

InferResult = Optional[Tuple[ShapeList, ShapeList]]
"""(input shapes, output shapes), or None when the inputs do not constrain enough."""

T = TypeVar("T")


class EmptyParams(BaseModel):
  """Parameter schema for operators that take no parameters."""

  model_config = ConfigDict(extra="forbid", frozen=True)


class OperatorProperty(abc.ABC):
  """
  Base class for all operators.

  Subclasses set ``type_name`` and, if they take parameters, ``Params``.
  The argument/return lists may depend on parameter values.

  Attributes:
      params (BaseModel): The validated parameters.
  """

  type_name: ClassVar[str] = ""
  Params: ClassVar[Type[BaseModel]] = EmptyParams

  def __init__(self, **kwargs: Any):
    """
    Validates parameters against the operator's ``Params`` schema.

    Raises:
        OperatorParamError: If the parameters do not validate.
    """
    try:
      self.params = self.Params.model_validate(kwargs)
    except ValidationError as e:
      raise OperatorParamError(f"Invalid parameters for operator {self.type_string()}: {e}") from e

  def copy(self) -> "OperatorProperty":
    """Returns an independent operator with the same parameters."""
    return type(self)(**self.params.model_dump())

  def type_string(self) -> str:
    """Display name of the operator type."""
    return self.type_name or type(self).__name__

  def list_arguments(self) -> List[str]:
    """Ordered names of the required inputs."""
    return ["data"]

  def list_returns(self) -> List[str]:
    """Ordered names of all outputs, visible ones first."""
    return ["output"]

  def num_returns(self) -> int:
    return len(self.list_returns())

  def num_visible_returns(self) -> int:
    """Number of outputs exposed as Symbol heads."""
    return self.num_returns()

  @abc.abstractmethod
  def infer_shape(self, in_shapes: ShapeList) -> InferResult:
    """
    Propagates shapes through the operator.

    Args:
        in_shapes (ShapeList): One entry per argument; None where unknown.

    Returns:
        InferResult: Completed input shapes and all output shapes, or None
        when the known inputs do not determine the outputs.

    Raises:
        ShapeMismatchError: If the known shapes contradict each other.
    """

  def declare_backward_dependency(
    self, out_grad: Sequence[T], in_data: Sequence[T], out_data: Sequence[T]
  ) -> List[T]:
    """
    Selects the values the gradient computation reads.

    The returned list becomes the input list of the synthesized gradient
    node. The default depends on everything.

    Args:
        out_grad: Gradient entries, one per visible output.
        in_data: Forward input entries, one per argument.
        out_data: Forward output entries, one per return.

    Returns:
        List: The dependencies in the order the gradient node consumes them.
    """
    return [*out_grad, *in_data, *out_data]

  def __repr__(self) -> str:
    params = self.params.model_dump()
    if not params:
      return f"{self.type_string()}()"
    args = ", ".join(f"{k}={v!r}" for k, v in params.items())
    return f"{self.type_string()}({args})"


def same_shape(in_shapes: ShapeList, num_outputs: int = 1, op_name: str = "") -> InferResult:
  """
  Shape rule for element-wise operators: every input and output share one shape.

  Unknown inputs are filled from any known one.

  Args:
      in_shapes (ShapeList): Input shapes.
      num_outputs (int): Number of outputs to produce.
      op_name (str): Operator name for error messages.

  Returns:
      InferResult: Filled inputs and outputs, or None if no input shape is known.

  Raises:
      ShapeMismatchError: If two known inputs differ.
  """
  known = [s for s in in_shapes if s is not None]
  if not known:
    return None
  ref = known[0]
  for s in known[1:]:
    if s != ref:
      raise ShapeMismatchError(f"{op_name}: incompatible input shapes {ref} and {s}", expected=ref, actual=s)
  return [ref] * len(in_shapes), [ref] * num_outputs


def check_shape(op_name: str, arg_name: str, actual: Optional[Shape], expected: Shape) -> Shape:
  """
  Reconciles an optional known shape with the shape an operator requires.

  Returns:
      Shape: The expected shape.

  Raises:
      ShapeMismatchError: If ``actual`` is known and differs.
  """
  if actual is not None and tuple(actual) != tuple(expected):
    raise ShapeMismatchError(
      f"{op_name}: shape of argument '{arg_name}' is {tuple(actual)}, expected {tuple(expected)}",
      expected=tuple(expected),
      actual=tuple(actual),
    )
  return tuple(expected)
