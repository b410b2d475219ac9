"""
Backward Pass Synthesis.

Extends a `StaticGraph` in place with the nodes that compute gradients of its
heads with respect to its arguments.

Algorithm:
    1.  Append one head-gradient variable per head. These are the seeds fed
        by the caller (e.g. ``fc1_output_grad``).
    2.  Walk the forward operator nodes in reverse topological order. For
        every node whose outputs received gradient:
        a. Aggregate each visible output's gradient contributions: one
           contribution is used as is, several are summed by an
           `ElementWiseSum` node, none become a `ZerosLike` node.
        b. Append a gradient node with ``backward_source_id`` set to the
           forward node. Its inputs are whatever the operator declares in
           `declare_backward_dependency`; its output ``i`` is the gradient of
           forward input ``i``.
        c. Record output ``i`` as a contribution to the producer of input ``i``.
    3.  Aggregate the contributions reaching each argument node.

Gradient nodes already present in the graph are left alone; only operator
nodes are differentiated.
"""

from collections import defaultdict
from typing import Dict, List, Tuple

from symgraph.compiler.static_graph import StaticEntry, StaticGraph, StaticNode
from symgraph.core.naming import gradient_name, output_name
from symgraph.ops.elemwise import ElementWiseSum, ZerosLike
from symgraph.utils.console import log_debug

GradMap = Dict[Tuple[int, int], List[StaticEntry]]


def make_backward_pass(graph: StaticGraph) -> Tuple[List[int], List[StaticEntry]]:
  """
  Appends gradient nodes to ``graph``.

  Args:
      graph: The canonical graph; modified in place.

  Returns:
      Tuple[List[int], List[StaticEntry]]: Ids of the head-gradient seed
      nodes (one per head), and for every entry of ``graph.arg_nodes`` the
      entry realizing that argument's gradient.
  """
  num_forward = len(graph.nodes)
  order = graph.topo_order()
  grads: GradMap = defaultdict(list)

  head_grad_nodes: List[int] = []
  for head in graph.heads:
    seed_name = gradient_name(_entry_name(graph, head))
    nid = graph.add_node(StaticNode(name=seed_name))
    head_grad_nodes.append(nid)
    grads[(head.source_id, head.index)].append(StaticEntry(nid, 0))

  for nid in reversed(order):
    if nid >= num_forward:
      continue
    node = graph.nodes[nid]
    if node.op is None:
      continue
    op = node.op
    num_visible = op.num_visible_returns()
    if not any(grads.get((nid, k)) for k in range(num_visible)):
      continue

    out_grad = [
      _aggregate(graph, grads.get((nid, k), []), StaticEntry(nid, k), _entry_name(graph, StaticEntry(nid, k)))
      for k in range(num_visible)
    ]
    in_data = list(node.inputs)
    out_data = [StaticEntry(nid, k) for k in range(op.num_returns())]
    deps = op.declare_backward_dependency(out_grad, in_data, out_data)

    bw_id = graph.add_node(
      StaticNode(name=gradient_name(node.name, "backward"), inputs=list(deps), backward_source_id=nid)
    )
    for i, entry in enumerate(node.inputs):
      grads[(entry.source_id, entry.index)].append(StaticEntry(bw_id, i))

  arg_grads: List[StaticEntry] = []
  for nid in graph.arg_nodes:
    name = graph.nodes[nid].name
    arg_grads.append(_aggregate(graph, grads.get((nid, 0), []), StaticEntry(nid, 0), name))

  log_debug(
    f"Backward pass appended {len(graph.nodes) - num_forward} nodes "
    f"({len(head_grad_nodes)} head gradients, {len(arg_grads)} argument gradients)"
  )
  return head_grad_nodes, arg_grads


def _entry_name(graph: StaticGraph, entry: StaticEntry) -> str:
  node = graph.nodes[entry.source_id]
  if node.op is None:
    return node.name
  return output_name(node.name, node.op.list_returns()[entry.index])


def _aggregate(graph: StaticGraph, contributions: List[StaticEntry], like: StaticEntry, name: str) -> StaticEntry:
  """
  Reduces the gradient contributions of one entry to a single entry.

  Args:
      graph: Graph to append aggregation nodes to.
      contributions: Gradient entries flowing into the same forward entry.
      like: The forward entry, used as the shape source for zeros.
      name: Base name for appended nodes.

  Returns:
      StaticEntry: The aggregated gradient.
  """
  if len(contributions) == 1:
    return contributions[0]
  if not contributions:
    nid = graph.add_node(StaticNode(op=ZerosLike(), name=gradient_name(name, "zeros"), inputs=[like]))
    return StaticEntry(nid, 0)
  nid = graph.add_node(
    StaticNode(
      op=ElementWiseSum(num_args=len(contributions)),
      name=gradient_name(name, "grad_sum"),
      inputs=list(contributions),
    )
  )
  return StaticEntry(nid, 0)
