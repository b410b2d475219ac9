"""
Deterministic Graph Traversal.

Every higher level operation (introspection, copying, composition, lowering,
differentiation) walks the graph through `dfs_visit`, so its visiting order is
the canonical node order of the whole package. In particular it fixes the
integer ids of the canonical static graph and the order of
`Symbol.list_arguments`.

Algorithm:
    1.  Seed an explicit stack with the head nodes, in head order. The stack
        is LIFO, so the last head is visited first.
    2.  Mark a node visited when it is *discovered* (pushed), not when it is
        popped, so reconverging paths (diamonds) never visit a node twice.
    3.  Pop a node, visit it, then push its undiscovered children in reverse
        so siblings come off the stack left to right.

The result is a preorder: every node is visited before its children, and a
node already discovered through another path is skipped.
"""

from typing import Callable, Iterable, List, Set

from symgraph.core.node import DataEntry, Node


def dfs_visit(heads: Iterable[DataEntry], fvisit: Callable[[Node], None]) -> None:
  """
  Visits every node reachable from `heads` exactly once.

  Reachability follows input edges and backward-source links.

  Args:
      heads: Head entries to start from.
      fvisit: Callback receiving each node.
  """
  stack: List[Node] = []
  visited: Set[int] = set()

  for head in heads:
    if id(head.node) not in visited:
      visited.add(id(head.node))
      stack.append(head.node)

  while stack:
    node = stack.pop()
    fvisit(node)
    for child in reversed(node.children()):
      if id(child) not in visited:
        stack.append(child)
        visited.add(id(child))


def collect_nodes(heads: Iterable[DataEntry]) -> List[Node]:
  """
  Collects the reachable nodes in traversal order.

  Args:
      heads: Head entries to start from.

  Returns:
      List[Node]: Nodes in the order `dfs_visit` visits them.
  """
  order: List[Node] = []
  dfs_visit(heads, order.append)
  return order
