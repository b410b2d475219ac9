"""
Tests for lowering Symbols into the canonical static graph.
"""

from symgraph.api import FullyConnected, Group, Variable
from symgraph.compiler.static_graph import StaticEntry, StaticGraph, StaticNode


def _fc():
  return FullyConnected(data=Variable("x"), num_hidden=2, name="fc")


def test_ids_follow_traversal_order():
  graph = _fc().to_static_graph()
  assert [n.name for n in graph.nodes] == ["fc", "x", "fc_weight", "fc_bias"]
  assert graph.arg_nodes == [1, 2, 3]
  assert graph.list_arguments() == ["x", "fc_weight", "fc_bias"]
  assert graph.heads == [StaticEntry(0, 0)]
  assert graph.nodes[0].inputs == [StaticEntry(1, 0), StaticEntry(2, 0), StaticEntry(3, 0)]


def test_lowering_copies_operators():
  sym = _fc()
  graph = sym.to_static_graph()
  assert graph.nodes[0].op is not sym.heads[0].node.op
  assert graph.nodes[0].op.params.num_hidden == 2


def test_each_lowering_is_fresh():
  sym = _fc()
  g1, g2 = sym.to_static_graph(), sym.to_static_graph()
  g1.add_node(StaticNode(name="extra"))
  assert len(g2.nodes) == 4


def test_shared_variable_lowered_once():
  x = Variable("x")
  graph = (x * x).to_static_graph()
  assert len(graph.nodes) == 2
  assert graph.nodes[0].inputs == [StaticEntry(1, 0), StaticEntry(1, 0)]


def test_group_heads():
  x = Variable("x")
  graph = Group([x, x * Variable("y")]).to_static_graph()
  assert [n.name for n in graph.nodes] == ["mul0", "y", "x"]
  assert graph.arg_nodes == [1, 2]
  assert graph.heads == [StaticEntry(2, 0), StaticEntry(0, 0)]


def test_backward_source_ids_resolved():
  x, y = Variable("x"), Variable("y")
  g = (x * y).grad(["x"])
  graph = g.to_static_graph()

  grad_node = graph.nodes[0]
  assert grad_node.is_gradient()
  assert graph.nodes[grad_node.backward_source_id].name == "mul0"
  assert graph.num_outputs(0) == 2


def test_topo_order_places_producers_first():
  graph = _fc().to_static_graph()
  order = graph.topo_order()
  assert sorted(order) == [0, 1, 2, 3]
  assert order.index(0) == 3


def test_topo_order_includes_backward_source():
  graph = StaticGraph()
  graph.add_node(StaticNode(name="x"))
  graph.add_node(StaticNode(name="g", inputs=[StaticEntry(0)], backward_source_id=2))
  graph.add_node(StaticNode(name="f", inputs=[StaticEntry(0)]))
  order = graph.topo_order()
  assert order.index(2) < order.index(1)
  assert order.index(0) < order.index(2)


def test_num_outputs_for_variables_and_ops():
  graph = _fc().to_static_graph()
  assert graph.num_outputs(0) == 1
  assert graph.num_outputs(1) == 1
