"""
Tests for the built-in operators.
"""

import pytest

from symgraph.enums import ActivationType
from symgraph.errors import OperatorParamError, ShapeMismatchError
from symgraph.ops.registry import create_operator


def test_parameter_validation():
  with pytest.raises(OperatorParamError):
    create_operator("FullyConnected")
  with pytest.raises(OperatorParamError):
    create_operator("FullyConnected", num_hidden=0)
  with pytest.raises(OperatorParamError):
    create_operator("FullyConnected", num_hidden=2, bogus=True)
  with pytest.raises(OperatorParamError):
    create_operator("Activation", act_type="swish")
  with pytest.raises(OperatorParamError):
    create_operator("Dropout", p=1.0)
  with pytest.raises(OperatorParamError):
    create_operator("Add", scale=2)


def test_activation_enum_coercion():
  op = create_operator("Activation", act_type="relu")
  assert op.params.act_type == ActivationType.RELU


def test_copy_is_independent_and_equal():
  op = create_operator("Activation", act_type="tanh")
  clone = op.copy()
  assert clone is not op
  assert clone.params == op.params
  assert type(clone) is type(op)


def test_repr():
  assert repr(create_operator("Add")) == "Add()"
  assert repr(create_operator("FullyConnected", num_hidden=2)) == "FullyConnected(num_hidden=2, no_bias=False)"


def test_argument_lists_depend_on_params():
  assert create_operator("FullyConnected", num_hidden=2).list_arguments() == ["data", "weight", "bias"]
  assert create_operator("FullyConnected", num_hidden=2, no_bias=True).list_arguments() == ["data", "weight"]
  assert create_operator("ElementWiseSum", num_args=3).list_arguments() == ["arg0", "arg1", "arg2"]
  assert create_operator("SliceChannel", num_outputs=2).list_returns() == ["output0", "output1"]


def test_dropout_hides_mask():
  op = create_operator("Dropout")
  assert op.list_returns() == ["output", "mask"]
  assert op.num_returns() == 2
  assert op.num_visible_returns() == 1


def test_fully_connected_shapes():
  op = create_operator("FullyConnected", num_hidden=5)
  assert op.infer_shape([None, None, None]) is None
  in_shapes, out_shapes = op.infer_shape([(4, 7), None, None])
  assert in_shapes == [(4, 7), (5, 7), (5,)]
  assert out_shapes == [(4, 5)]

  with pytest.raises(ShapeMismatchError):
    op.infer_shape([(4, 7), None, (6,)])
  with pytest.raises(ShapeMismatchError):
    op.infer_shape([(), None, None])


def test_elementwise_shapes():
  op = create_operator("Mul")
  assert op.infer_shape([None, (2, 2)]) == ([(2, 2), (2, 2)], [(2, 2)])
  with pytest.raises(ShapeMismatchError):
    op.infer_shape([(2, 2), (2, 3)])


def test_slice_channel_negative_axis():
  op = create_operator("SliceChannel", num_outputs=2, axis=-1)
  _, out = op.infer_shape([(3, 8)])
  assert out == [(3, 4), (3, 4)]

  with pytest.raises(ShapeMismatchError):
    create_operator("SliceChannel", num_outputs=2, axis=3).infer_shape([(3, 8)])


def test_backward_dependencies():
  og, ind, outd = ["g"], ["a", "b"], ["o"]
  assert create_operator("Add").declare_backward_dependency(og, ind, outd) == ["g"]
  assert create_operator("Mul").declare_backward_dependency(og, ind, outd) == ["g", "a", "b"]
  assert create_operator("Activation", act_type="relu").declare_backward_dependency(og, ["a"], outd) == ["g", "o"]
  assert create_operator("Dropout").declare_backward_dependency(og, ["a"], ["o", "m"]) == ["g", "m"]
  assert create_operator("ZerosLike").declare_backward_dependency(og, ["a"], outd) == []
