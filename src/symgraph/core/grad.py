"""
Gradient Graph Construction.

Differentiation runs on the canonical graph and the result is grafted back
onto the shared-reference graph:

1.  Lower the Symbol and let `StaticGraph.make_backward_pass` append gradient
    nodes after the forward nodes.
2.  Collect the Symbol's existing nodes in traversal order. Their positions
    equal their canonical ids, so the forward part of the gradient graph
    reuses them instead of copying.
3.  For every appended canonical node, in id order, allocate a shared node
    and resolve its inputs and backward source through the id table. Appended
    nodes can reference earlier appended nodes, so the table grows as we go.
4.  Select the gradient entries of the requested arguments.
"""

from typing import TYPE_CHECKING, Dict, List, Sequence

from symgraph.core.node import DataEntry, Node
from symgraph.core.traversal import collect_nodes
from symgraph.errors import UnmatchedKeywordError
from symgraph.utils.console import log_debug

if TYPE_CHECKING:
  from symgraph.core.symbol import Symbol


def make_gradient_symbol(symbol: "Symbol", wrt: Sequence[str]) -> "Symbol":
  """
  Builds the gradient of ``symbol`` with respect to the named arguments.

  Args:
      symbol: The forward Symbol.
      wrt: Argument names, in the order the gradient heads should appear.

  Returns:
      Symbol: One head per requested name.

  Raises:
      UnmatchedKeywordError: If a name is not an argument of ``symbol``.
  """
  from symgraph.core.symbol import Symbol

  graph = symbol.to_static_graph()
  arg_list = graph.list_arguments()
  arg_index: Dict[str, int] = {name: i for i, name in enumerate(arg_list)}

  unmatched = [name for name in wrt if name not in arg_index]
  if unmatched:
    raise UnmatchedKeywordError("Symbol.grad", unmatched, symbol.list_arguments())

  num_forward = len(graph.nodes)
  _, arg_grads = graph.make_backward_pass()

  shared: List[Node] = collect_nodes(symbol.heads)
  for nid in range(num_forward, len(graph.nodes)):
    static_node = graph.nodes[nid]
    node = Node(op=static_node.op, name=static_node.name)
    if static_node.backward_source_id >= 0:
      node.backward_source = shared[static_node.backward_source_id]
    node.inputs = [DataEntry(shared[e.source_id], e.index) for e in static_node.inputs]
    shared.append(node)

  heads = []
  for name in wrt:
    entry = arg_grads[arg_index[name]]
    heads.append(DataEntry(shared[entry.source_id], entry.index))

  log_debug(f"Gradient graph for {list(wrt)}: {len(graph.nodes) - num_forward} new nodes")
  return Symbol(heads)
