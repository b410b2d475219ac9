"""
Tests for deterministic graph traversal.
"""

from symgraph.core.node import DataEntry, Node
from symgraph.core.traversal import collect_nodes, dfs_visit
from symgraph.ops.registry import create_operator


def _op(name, *inputs):
  return Node(op=create_operator("Add"), name=name, inputs=[DataEntry(n) for n in inputs])


def test_preorder_left_to_right():
  x, y = Node(name="x"), Node(name="y")
  root = _op("root", x, y)
  assert [n.name for n in collect_nodes([DataEntry(root)])] == ["root", "x", "y"]


def test_diamond_visits_shared_node_once():
  """
  root -> left -> x, root -> right -> x: x must be visited exactly once.
  """
  x = Node(name="x")
  left = _op("left", x, x)
  right = _op("right", x, x)
  root = _op("root", left, right)

  visited = []
  dfs_visit([DataEntry(root)], visited.append)

  assert len(visited) == 4
  assert [n.name for n in visited] == ["root", "left", "x", "right"]


def test_multiple_heads_last_head_first():
  a, b = Node(name="a"), Node(name="b")
  assert [n.name for n in collect_nodes([DataEntry(a), DataEntry(b)])] == ["b", "a"]


def test_multiple_heads_subgraph_order():
  a, p, b, q = (Node(name=n) for n in "apbq")
  first = _op("first", a, p)
  second = _op("second", b, q)
  names = [n.name for n in collect_nodes([DataEntry(first), DataEntry(second)])]
  assert names == ["second", "b", "q", "first", "a", "p"]


def test_head_shared_with_other_subgraph_keeps_seed_position():
  x = Node(name="x")
  root = _op("root", x, Node(name="y"))
  names = [n.name for n in collect_nodes([DataEntry(x), DataEntry(root)])]
  assert names == ["root", "y", "x"]


def test_repeated_head_visited_once():
  a = Node(name="a")
  assert collect_nodes([DataEntry(a, 0), DataEntry(a, 1)]) == [a]


def test_backward_source_is_reachable():
  x = Node(name="x")
  forward = _op("f", x, x)
  seed = Node(name="seed")
  grad = Node(name="g", inputs=[DataEntry(seed)], backward_source=forward)
  names = [n.name for n in collect_nodes([DataEntry(grad)])]
  assert names == ["g", "seed", "f", "x"]


def test_empty_heads():
  assert collect_nodes([]) == []
