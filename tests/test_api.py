"""
Tests for the functional graph API.
"""

import pytest

import symgraph
from symgraph.api import Activation, FullyConnected, Group, Mul, Variable
from symgraph.core.naming import PrefixNameManager, use_name_manager
from symgraph.errors import OperatorParamError


def test_every_operator_has_a_constructor():
  for op_name in symgraph.ops.list_operators():
    assert op_name in symgraph.api.__all__
    assert callable(getattr(symgraph, op_name))


def test_default_names_from_name_manager():
  x = Variable("x")
  fc = FullyConnected(data=x, num_hidden=4)
  assert fc.heads[0].node.name == "fullyconnected0"
  assert fc.list_arguments() == ["x", "fullyconnected0_weight", "fullyconnected0_bias"]

  fc2 = FullyConnected(data=fc, num_hidden=2)
  assert fc2.heads[0].node.name == "fullyconnected1"


def test_prefixed_names():
  with use_name_manager(PrefixNameManager("block1_")):
    act = Activation(data=Variable("x"), act_type="sigmoid")
  assert act.list_returns() == ["block1_activation0_output"]


def test_positional_inputs():
  z = Mul(Variable("a"), Variable("b"), name="z")
  assert z.list_arguments() == ["a", "b"]
  assert z.list_returns() == ["z_output"]


def test_positional_non_symbol_rejected():
  with pytest.raises(TypeError):
    Mul(Variable("a"), 3)


def test_invalid_params_raise():
  with pytest.raises(OperatorParamError):
    FullyConnected(data=Variable("x"), num_hidden=-1)


def test_group_and_top_level_exports():
  g = Group([Variable("a"), Variable("b")])
  assert isinstance(g, symgraph.Symbol)
  assert symgraph.Variable is Variable
  assert symgraph.__version__


def test_constructor_metadata():
  assert FullyConnected.__name__ == "FullyConnected"
  assert "FullyConnected" in FullyConnected.__doc__
