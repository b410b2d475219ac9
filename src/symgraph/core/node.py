"""
Graph Nodes and Data References.

A `Node` is the atomic structural unit of a symbolic graph. It comes in three
variants, told apart purely by which fields are populated:

- **Variable**: no operator and no backward source. A named free placeholder.
- **Operator node**: owns an operator instance. With no inputs it is *atomic*
  (created but not yet composed); with inputs it is composed.
- **Gradient node**: no operator of its own but a backward source, the
  forward node whose operator type it borrows for display.

Nodes are shared by reference: every `DataEntry` pointing at a node keeps it
alive, and two Symbols built without copying see each other's mutations.
Equality and hashing are by identity so nodes can key identity maps.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from symgraph.enums import NodeKind

if TYPE_CHECKING:
  from symgraph.ops.base import OperatorProperty


@dataclass(eq=False)
class Node:
  """
  A vertex of the symbolic graph.

  Attributes:
      op: Operator instance owned by this node, or None.
      name: Node name; may be empty for uncomposed operators.
      inputs: Ordered input edges.
      backward_source: Forward node this gradient node is derived from.
  """

  op: Optional["OperatorProperty"] = None
  name: str = ""
  inputs: List["DataEntry"] = field(default_factory=list)
  backward_source: Optional["Node"] = None

  def is_variable(self) -> bool:
    """True for free placeholders, regardless of name."""
    return self.op is None and self.backward_source is None

  def is_atomic(self) -> bool:
    """True for an operator node that has not been composed yet."""
    return self.op is not None and not self.inputs

  def is_gradient(self) -> bool:
    """True for a node synthesized by the backward pass."""
    return self.op is None and self.backward_source is not None

  @property
  def kind(self) -> NodeKind:
    """The structural variant of the node."""
    if self.op is not None:
      return NodeKind.OPERATOR
    if self.backward_source is not None:
      return NodeKind.GRADIENT
    return NodeKind.VARIABLE

  def type_string(self) -> str:
    """
    Display type of the node.

    Gradient nodes report the type of their backward source's operator.

    Returns:
        str: Operator type name, or 'Variable'.
    """
    if self.op is not None:
      return self.op.type_string()
    if self.backward_source is not None:
      return self.backward_source.type_string()
    return "Variable"

  def children(self) -> List["Node"]:
    """
    Nodes discovered from this node during traversal, in visiting order.

    Inputs come first, left to right; the backward source, if any, comes last.
    """
    nodes = [e.node for e in self.inputs]
    if self.backward_source is not None:
      nodes.append(self.backward_source)
    return nodes

  def __repr__(self) -> str:
    return f"Node({self.kind.value}: {self.name!r}, type={self.type_string()}, inputs={len(self.inputs)})"


@dataclass(frozen=True)
class DataEntry:
  """
  Reference to the index-th output of a node.

  Used both as an input edge and as one of a Symbol's heads.
  """

  node: Node
  index: int = 0

  def __repr__(self) -> str:
    return f"DataEntry({self.node.name!r}[{self.index}])"
