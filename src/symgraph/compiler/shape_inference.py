"""
Shape Inference over the Canonical Graph.

Propagates known argument shapes through the graph until nothing changes.
Operators compute output shapes from input shapes and may also fill in
unknown input shapes (e.g. `FullyConnected` derives its weight shape from the
data shape), which can in turn unlock other consumers of the same argument;
hence the fixed-point loop rather than a single sweep.

Gradient nodes produce the shapes of their backward source's inputs.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from symgraph.compiler.static_graph import StaticGraph
from symgraph.errors import ArityMismatchError, ShapeMismatchError
from symgraph.ops.base import Shape
from symgraph.utils.console import log_debug

ShapeMap = Dict[Tuple[int, int], Shape]


def infer_shape(
  graph: StaticGraph, arg_shapes: Sequence[Optional[Sequence[int]]]
) -> Tuple[bool, List[Optional[Shape]], List[Optional[Shape]]]:
  """
  Infers the shapes of all arguments and heads.

  Args:
      graph: The canonical graph.
      arg_shapes: One entry per ``graph.arg_nodes``; None where unknown.

  Returns:
      Tuple[bool, List, List]: Whether every argument and head shape is
      known, the argument shapes, and the head shapes.

  Raises:
      ArityMismatchError: If ``arg_shapes`` does not match the argument count.
      ShapeMismatchError: If two shapes for the same entry contradict.
  """
  if len(arg_shapes) != len(graph.arg_nodes):
    raise ArityMismatchError(len(graph.arg_nodes), len(arg_shapes))

  shapes: ShapeMap = {}
  for nid, shape in zip(graph.arg_nodes, arg_shapes):
    if shape is not None:
      shapes[(nid, 0)] = tuple(shape)

  order = graph.topo_order()
  passes = 0
  changed = True
  while changed:
    changed = False
    passes += 1
    for nid in order:
      if _infer_node(graph, nid, shapes):
        changed = True

  out_args = [shapes.get((nid, 0)) for nid in graph.arg_nodes]
  out_heads = [shapes.get((h.source_id, h.index)) for h in graph.heads]
  complete = all(s is not None for s in out_args) and all(s is not None for s in out_heads)
  log_debug(f"Shape inference finished after {passes} passes, complete={complete}")
  return complete, out_args, out_heads


def _infer_node(graph: StaticGraph, nid: int, shapes: ShapeMap) -> bool:
  node = graph.nodes[nid]
  if node.is_variable():
    return False

  in_shapes = [shapes.get((e.source_id, e.index)) for e in node.inputs]

  if node.op is not None:
    # Uncomposed operators have no input edges to read from.
    if not node.inputs and node.op.list_arguments():
      return False
    result = node.op.infer_shape(in_shapes)
    if result is None:
      return False
    new_in, new_out = result
  else:
    source = graph.nodes[node.backward_source_id]
    new_in = in_shapes
    new_out = [shapes.get((e.source_id, e.index)) for e in source.inputs]

  changed = False
  for entry, shape in zip(node.inputs, new_in):
    changed |= _assign(shapes, (entry.source_id, entry.index), shape, node.name)
  for k, shape in enumerate(new_out):
    changed |= _assign(shapes, (nid, k), shape, node.name)
  return changed


def _assign(shapes: ShapeMap, key: Tuple[int, int], shape: Optional[Shape], where: str) -> bool:
  if shape is None:
    return False
  shape = tuple(shape)
  known = shapes.get(key)
  if known is None:
    shapes[key] = shape
    return True
  if known != shape:
    raise ShapeMismatchError(
      f"Shape inconsistent at node '{where}': known {known}, inferred {shape}", expected=known, actual=shape
    )
  return False
