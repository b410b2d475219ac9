"""
Canonical Static Graph.

The index-addressed form of a symbolic graph. Nodes live in a flat list in
traversal order, edges are ``(source_id, index)`` pairs, and the variable
nodes are listed separately in ``arg_nodes``; that order is the externally
visible argument order used for shape binding and gradients.

The static graph is a derived, disposable view. `to_static_graph` lowers the
shared-reference graph of a Symbol into it; nothing ever flows back except
through `symgraph.core.grad`, which re-attaches newly appended nodes.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Tuple

from symgraph.core.node import DataEntry
from symgraph.core.traversal import collect_nodes
from symgraph.utils.console import log_debug

if TYPE_CHECKING:
  from symgraph.ops.base import OperatorProperty, Shape, ShapeList


@dataclass(frozen=True)
class StaticEntry:
  """Output ``index`` of node ``source_id``."""

  source_id: int
  index: int = 0


@dataclass
class StaticNode:
  """
  A node of the canonical graph.

  Attributes:
      op: Operator instance (a copy of the symbolic node's), or None.
      name: Node name.
      inputs: Input edges by id.
      backward_source_id: Id of the forward node of a gradient node, or -1.
  """

  op: Optional["OperatorProperty"] = None
  name: str = ""
  inputs: List[StaticEntry] = field(default_factory=list)
  backward_source_id: int = -1

  def is_variable(self) -> bool:
    return self.op is None and self.backward_source_id < 0

  def is_gradient(self) -> bool:
    return self.op is None and self.backward_source_id >= 0


@dataclass
class StaticGraph:
  """
  Flat, id-addressed representation of a symbolic graph.

  Attributes:
      nodes: All nodes; a node's id is its position.
      arg_nodes: Ids of variable nodes, in traversal order.
      heads: Output entries.
  """

  nodes: List[StaticNode] = field(default_factory=list)
  arg_nodes: List[int] = field(default_factory=list)
  heads: List[StaticEntry] = field(default_factory=list)

  def num_outputs(self, nid: int) -> int:
    """
    Number of outputs of a node.

    Variables have one output; gradient nodes have one output per input of
    their backward source.
    """
    node = self.nodes[nid]
    if node.op is not None:
      return node.op.num_returns()
    if node.backward_source_id >= 0:
      return len(self.nodes[node.backward_source_id].inputs)
    return 1

  def list_arguments(self) -> List[str]:
    return [self.nodes[nid].name for nid in self.arg_nodes]

  def add_node(self, node: StaticNode) -> int:
    """Appends a node and returns its id."""
    self.nodes.append(node)
    return len(self.nodes) - 1

  def topo_order(self) -> List[int]:
    """
    Topologically sorts the node ids, producers before consumers.

    A gradient node is placed after its backward source. Nodes not reachable
    from the heads are included as well.

    Returns:
        List[int]: Every node id exactly once.
    """
    order: List[int] = []
    state: Dict[int, int] = {}  # 1 = on stack, 2 = done

    def deps(nid: int) -> List[int]:
      node = self.nodes[nid]
      out = [e.source_id for e in node.inputs]
      if node.backward_source_id >= 0:
        out.append(node.backward_source_id)
      return out

    for root in range(len(self.nodes)):
      if root in state:
        continue
      stack: List[Tuple[int, int]] = [(root, 0)]
      state[root] = 1
      while stack:
        nid, pos = stack[-1]
        children = deps(nid)
        if pos < len(children):
          stack[-1] = (nid, pos + 1)
          child = children[pos]
          if child not in state:
            state[child] = 1
            stack.append((child, 0))
        else:
          stack.pop()
          state[nid] = 2
          order.append(nid)
    return order

  def make_backward_pass(self) -> Tuple[List[int], List[StaticEntry]]:
    """
    Appends gradient nodes. See `symgraph.compiler.backward.make_backward_pass`.
    """
    from symgraph.compiler.backward import make_backward_pass

    return make_backward_pass(self)

  def infer_shape(
    self, arg_shapes: "ShapeList"
  ) -> Tuple[bool, List[Optional["Shape"]], List[Optional["Shape"]]]:
    """
    Infers shapes. See `symgraph.compiler.shape_inference.infer_shape`.
    """
    from symgraph.compiler.shape_inference import infer_shape

    return infer_shape(self, arg_shapes)


def to_static_graph(heads: Iterable[DataEntry]) -> StaticGraph:
  """
  Lowers a shared-reference graph into a fresh `StaticGraph`.

  Ids are assigned in `dfs_visit` order. Operators are copied, so the result
  shares no mutable state with the symbolic graph.

  Args:
      heads: Head entries of the Symbol to lower.

  Returns:
      StaticGraph: The canonical graph.
  """
  heads = list(heads)
  order = collect_nodes(heads)
  node_index = {id(n): nid for nid, n in enumerate(order)}

  graph = StaticGraph()
  for nid, node in enumerate(order):
    if node.is_variable():
      graph.arg_nodes.append(nid)
    backward_id = -1
    if node.backward_source is not None:
      backward_id = node_index[id(node.backward_source)]
    graph.nodes.append(
      StaticNode(
        op=node.op.copy() if node.op is not None else None,
        name=node.name,
        inputs=[StaticEntry(node_index[id(e.node)], e.index) for e in node.inputs],
        backward_source_id=backward_id,
      )
    )

  graph.heads = [StaticEntry(node_index[id(h.node)], h.index) for h in heads]
  log_debug(f"Lowered graph: {len(graph.nodes)} nodes, {len(graph.arg_nodes)} arguments, {len(graph.heads)} heads")
  return graph
