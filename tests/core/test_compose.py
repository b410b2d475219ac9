"""
Tests for positional and keyword composition.
"""

import pytest

from symgraph import Symbol
from symgraph.api import SliceChannel, Variable
from symgraph.errors import (
  ArityMismatchError,
  DuplicateArgumentNameError,
  NotComposableError,
  UnmatchedKeywordError,
  UnsupportedTupleArgumentError,
)
from symgraph.ops.registry import create_operator


def _atom(op_name, **params):
  return Symbol.create(create_operator(op_name, **params))


def test_positional_arity_checked_on_atomic():
  add = _atom("Add")
  with pytest.raises(ArityMismatchError) as excinfo:
    add(_atom("ZerosLike"))
  assert (excinfo.value.required, excinfo.value.provided) == (2, 1)

  with pytest.raises(ArityMismatchError):
    add(_atom("ZerosLike"), _atom("ZerosLike"), _atom("ZerosLike"))


def test_positional_exact_arity_binds_everything():
  add = _atom("Add")
  bound = add(_atom("ZerosLike"), _atom("ZerosLike"), name="sum")
  assert bound.list_arguments() == []
  assert bound.heads[0].node.name == "sum"
  # The callee is untouched.
  assert add.is_atomic()


def test_positional_with_variables():
  out = _atom("Add")(Variable("a"), Variable("b"), name="s")
  assert out.list_arguments() == ["a", "b"]


def test_keyword_partial_binding_generates_placeholders():
  fc = _atom("FullyConnected", num_hidden=3, no_bias=True)
  out = fc(data=_atom("ZerosLike"), name="fc")
  assert out.list_arguments() == ["fc_weight"]


def test_keyword_partial_binding_with_variable():
  fc = _atom("FullyConnected", num_hidden=3)
  out = fc(data=Variable("x"), name="fc")
  assert out.list_arguments() == ["x", "fc_weight", "fc_bias"]


def test_keyword_without_name_uses_bare_argument_names():
  out = _atom("FullyConnected", num_hidden=3)(data=Variable("x"))
  assert out.list_arguments() == ["x", "weight", "bias"]


def test_calling_twice_gives_independent_graphs():
  fc = _atom("FullyConnected", num_hidden=3)
  first = fc(data=Variable("a"), name="f1")
  second = fc(data=Variable("b"), name="f2")
  assert first.list_arguments() == ["a", "f1_weight", "f1_bias"]
  assert second.list_arguments() == ["b", "f2_weight", "f2_bias"]
  assert first.heads[0].node is not second.heads[0].node
  assert fc.is_atomic()


def test_positional_reuses_argument_for_shared_variable():
  x = Variable("x")
  square = x * x
  replacement = _atom("ZerosLike")

  square.compose(replacement, name="sq")

  node = square.heads[0].node
  assert square.list_arguments() == []
  assert node.inputs[0].node is replacement.heads[0].node
  assert node.inputs[1].node is replacement.heads[0].node


def test_positional_composite_arity_mismatch_leaves_graph():
  net = Variable("a") * Variable("b")
  before = net.debug_str()
  with pytest.raises(ArityMismatchError) as excinfo:
    net.compose(Variable("p"))
  assert (excinfo.value.required, excinfo.value.provided) == (2, 1)
  assert net.debug_str() == before


def test_keyword_on_composite():
  net = Variable("a") * Variable("b")
  net.compose(b=Variable("q"), name="prod")
  assert net.list_arguments() == ["a", "q"]
  assert net.heads[0].node.name == "prod"


def test_unknown_keyword_leaves_graph_unmodified():
  net = Variable("a") * Variable("b")
  before = net.list_arguments()
  name_before = net.heads[0].node.name

  with pytest.raises(UnmatchedKeywordError) as excinfo:
    net.compose(a=Variable("p"), nope=Variable("q"), name="renamed")

  assert excinfo.value.unmatched == ["nope"]
  assert excinfo.value.candidates == ["a", "b"]
  assert "Keyword argument name nope not found." in str(excinfo.value)
  assert "\t[1]b" in str(excinfo.value)
  assert net.list_arguments() == before
  assert net.heads[0].node.name == name_before


def test_unknown_keyword_on_atomic():
  add = _atom("Add")
  with pytest.raises(UnmatchedKeywordError) as excinfo:
    add.compose(left=Variable("x"))
  assert excinfo.value.candidates == ["lhs", "rhs"]
  assert add.is_atomic()


def test_duplicate_names_reject_keyword_composition():
  net = Variable("x") + Variable("x")
  with pytest.raises(DuplicateArgumentNameError) as excinfo:
    net.compose(x=Variable("y"))
  assert excinfo.value.duplicates == {"x": 2}


def test_tuple_argument_rejected():
  parts = SliceChannel(Variable("x"), num_outputs=2)
  with pytest.raises(UnsupportedTupleArgumentError) as excinfo:
    _atom("Add")(parts, Variable("y"))
  assert excinfo.value.position == "0"

  with pytest.raises(UnsupportedTupleArgumentError) as excinfo:
    _atom("Add")(lhs=parts)
  assert excinfo.value.position == "lhs"


def test_not_composable_targets():
  with pytest.raises(NotComposableError):
    Variable("x").compose(Variable("y"))

  parts = _atom("SliceChannel", num_outputs=2)
  with pytest.raises(NotComposableError):
    parts.compose(Variable("x"))


def test_mixed_positional_and_keyword_rejected():
  with pytest.raises(TypeError):
    _atom("Add")(Variable("a"), rhs=Variable("b"))
