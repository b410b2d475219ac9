"""
Data structures returned by graph queries.

Defines the `ShapeInferenceResult` Pydantic model, which pairs inferred
shapes with the argument and output names they belong to.
"""

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


class ShapeInferenceResult(BaseModel):
  """
  Outcome of `Symbol.infer_shape`.

  Shapes are listed in canonical argument order and head order; ``None``
  marks a shape that could not be determined.
  """

  complete: bool = Field(..., description="True if every argument and output shape is known.")
  arg_names: List[str] = Field(default_factory=list, description="Argument names in canonical order.")
  arg_shapes: List[Optional[Tuple[int, ...]]] = Field(default_factory=list, description="Argument shapes.")
  out_names: List[str] = Field(default_factory=list, description="Output names in head order.")
  out_shapes: List[Optional[Tuple[int, ...]]] = Field(default_factory=list, description="Output shapes.")
  ignored: List[str] = Field(default_factory=list, description="Provided names that matched no argument.")

  @property
  def arg_shape_dict(self) -> Dict[str, Optional[Tuple[int, ...]]]:
    """
    Argument shapes keyed by name.

    Returns:
        Dict[str, Optional[Tuple[int, ...]]]: Name to shape; with duplicated names the last one wins.
    """
    return dict(zip(self.arg_names, self.arg_shapes))

  @property
  def out_shape_dict(self) -> Dict[str, Optional[Tuple[int, ...]]]:
    """Output shapes keyed by return name."""
    return dict(zip(self.out_names, self.out_shapes))
