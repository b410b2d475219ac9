"""
Symbol: the public graph handle.

A `Symbol` is an ordered list of head entries. The graph it denotes is
implicit: every node reachable from the heads. Symbols are cheap views and
freely share nodes; `copy` is the only way to obtain a graph that shares
nothing with its source.

Mutation happens only through `compose`. The functional form
(``sym(...)``) copies first, so graphs built by calling stay independent of
the callee.

Usage
-----

.. code-block:: python

    from symgraph import Symbol
    from symgraph.ops import create_operator

    x = Symbol.create_variable("x")
    fc = Symbol.create(create_operator("FullyConnected", num_hidden=4))
    net = fc(data=x, name="fc1")
    net.list_arguments()  # ['x', 'fc1_weight', 'fc1_bias']
"""

import io
from collections import Counter
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, TextIO, Tuple

from rich.markup import escape

from symgraph.compiler.static_graph import StaticGraph, to_static_graph
from symgraph.config import get_config
from symgraph.core.compose import compose_keyword, compose_positional
from symgraph.core.naming import get_name_manager, output_name
from symgraph.core.node import DataEntry, Node
from symgraph.core.results import ShapeInferenceResult
from symgraph.core.traversal import collect_nodes, dfs_visit
from symgraph.errors import ArityMismatchError, IndexOutOfRangeError, UnmatchedKeywordError, format_keyword_mismatch
from symgraph.ops.base import OperatorProperty
from symgraph.utils.console import log_debug, log_warning


class Symbol:
  """
  Handle to a symbolic graph through its ordered outputs.

  Attributes:
      heads (List[DataEntry]): The externally visible outputs.
  """

  def __init__(self, heads: Optional[Iterable[DataEntry]] = None):
    self.heads: List[DataEntry] = list(heads) if heads is not None else []

  # --- Construction ---

  @classmethod
  def create_variable(cls, name: str) -> "Symbol":
    """Creates a single free variable."""
    return cls([DataEntry(Node(name=name), 0)])

  @classmethod
  def create(cls, op: OperatorProperty) -> "Symbol":
    """
    Creates an atomic Symbol over a fresh, uncomposed operator node.

    Args:
        op (OperatorProperty): The operator; ownership passes to the new node.

    Returns:
        Symbol: One head per visible return of ``op``.
    """
    node = Node(op=op)
    return cls([DataEntry(node, i) for i in range(op.num_visible_returns())])

  @classmethod
  def create_group(cls, symbols: Iterable["Symbol"]) -> "Symbol":
    """Concatenates the heads of ``symbols``, in order."""
    heads: List[DataEntry] = []
    for s in symbols:
      heads.extend(s.heads)
    return cls(heads)

  # --- Structure ---

  def num_returns(self) -> int:
    """Number of heads."""
    return len(self.heads)

  def is_atomic(self) -> bool:
    """True for a single head over an uncomposed operator node."""
    return len(self.heads) == 1 and self.heads[0].node.is_atomic()

  def __len__(self) -> int:
    return len(self.heads)

  def __iter__(self) -> Iterator["Symbol"]:
    return (self[i] for i in range(len(self.heads)))

  def __getitem__(self, index: int) -> "Symbol":
    """
    Selects one output.

    Args:
        index (int): Output position.

    Returns:
        Symbol: ``self`` when there is a single return, else a single-head
        view sharing the same graph.

    Raises:
        IndexOutOfRangeError: If ``index`` is not a valid output position.
    """
    nreturn = self.num_returns()
    if not 0 <= index < nreturn:
      raise IndexOutOfRangeError(index, nreturn)
    if nreturn == 1:
      return self
    return Symbol([self.heads[index]])

  def copy(self) -> "Symbol":
    """
    Deep-copies the graph.

    Returns:
        Symbol: A structurally identical Symbol sharing no node with ``self``.
    """
    old_new: Dict[int, Node] = {}
    order = collect_nodes(self.heads)
    for node in order:
      old_new[id(node)] = Node(op=node.op.copy() if node.op is not None else None, name=node.name)

    for node in order:
      new_node = old_new[id(node)]
      new_node.inputs = [DataEntry(old_new[id(e.node)], e.index) for e in node.inputs]
      if node.backward_source is not None:
        new_node.backward_source = old_new[id(node.backward_source)]

    log_debug(f"Copied graph with {len(order)} nodes")
    return Symbol([DataEntry(old_new[id(h.node)], h.index) for h in self.heads])

  def __copy__(self) -> "Symbol":
    return self.copy()

  def __deepcopy__(self, memo) -> "Symbol":
    return self.copy()

  # --- Introspection ---

  def list_arguments(self) -> List[str]:
    """
    Names of the free variables, in traversal order.

    Atomic Symbols report their operator's declared arguments instead.
    """
    if self.is_atomic():
      return self.heads[0].node.op.list_arguments()
    ret: List[str] = []

    def visit(node: Node) -> None:
      if node.is_variable():
        ret.append(node.name)

    dfs_visit(self.heads, visit)
    return ret

  def list_returns(self) -> List[str]:
    """Names of the outputs, in head order."""
    ret = []
    for head in self.heads:
      node = head.node
      if node.is_variable():
        ret.append(node.name)
      elif node.op is None:
        # Output i of a gradient node is the gradient of its source's argument i.
        source_args = node.backward_source.op.list_arguments()
        ret.append(output_name(node.name, source_args[head.index]))
      else:
        ret.append(output_name(node.name, node.op.list_returns()[head.index]))
    return ret

  def find_duplicate_args(self) -> Tuple[int, Dict[str, int]]:
    """
    Counts how often each free-variable name occurs at distinct nodes.

    Returns:
        Tuple[int, Dict[str, int]]: The highest count (1 when no name repeats)
        and the count per name.
    """
    counts: Counter = Counter()

    def visit(node: Node) -> None:
      if node.is_variable():
        counts[node.name] += 1

    dfs_visit(self.heads, visit)
    return max(counts.values(), default=1), dict(counts)

  def debug_str(self) -> str:
    """
    Human-readable listing of the graph.

    Returns:
        str: For atomic Symbols the operator type and arguments, otherwise the
        outputs followed by every node in traversal order.
    """
    buf = io.StringIO()
    self.print(buf)
    return buf.getvalue()

  def print(self, stream: TextIO) -> None:
    """Writes `debug_str` to ``stream``."""
    if self.is_atomic():
      stream.write(f"AtomicFunction Type:{self.heads[0].node.type_string()}\nInputs:\n")
      for i, arg in enumerate(self.list_arguments()):
        stream.write(f"\targ[{i}]={arg}\n")
      return

    stream.write("Outputs:\n")
    for i, head in enumerate(self.heads):
      stream.write(f"\toutput[{i}]={head.node.name}({head.index})\n")

    def visit(node: Node) -> None:
      if node.is_variable():
        stream.write(f"Variable:{node.name}\n")
        return
      stream.write(f"Name: {node.name} Type:{node.type_string()}\nInputs:\n")
      for i, entry in enumerate(node.inputs):
        stream.write(f"\targ[{i}]={entry.node.name}({entry.index})\n")

    dfs_visit(self.heads, visit)

  def __repr__(self) -> str:
    if len(self.heads) == 1:
      return f"<Symbol {self.heads[0].node.name}>"
    return f"<Symbol group [{', '.join(self.list_returns())}]>"

  # --- Composition ---

  def compose(self, *args: "Symbol", name: str = "", **kwargs: "Symbol") -> None:
    """
    Binds free variables in place.

    Use either positional or keyword arguments, not both. With neither, an
    atomic Symbol gets a placeholder variable for every argument. This
    mutates every Symbol sharing the target nodes; prefer calling the Symbol,
    which copies.

    Args:
        *args: Positional argument Symbols.
        name (str): New name of the composed node.
        **kwargs: Keyword argument Symbols.

    Raises:
        TypeError: If positional and keyword arguments are mixed.
    """
    if args and kwargs:
      raise TypeError("compose accepts either positional or keyword arguments, not both")
    if args:
      compose_positional(self, args, name)
    else:
      compose_keyword(self, kwargs, name)

  def __call__(self, *args: "Symbol", name: str = "", **kwargs: "Symbol") -> "Symbol":
    """Returns a composed copy; ``self`` is left unchanged."""
    s = self.copy()
    s.compose(*args, name=name, **kwargs)
    return s

  def _binary(self, other: object, op_name: str) -> "Symbol":
    from symgraph.ops.registry import create_operator

    if not isinstance(other, Symbol):
      return NotImplemented
    atom = Symbol.create(create_operator(op_name))
    atom.compose(self, other, name=get_name_manager().get(None, op_name))
    return atom

  def __add__(self, other: object) -> "Symbol":
    return self._binary(other, "Add")

  def __sub__(self, other: object) -> "Symbol":
    return self._binary(other, "Sub")

  def __mul__(self, other: object) -> "Symbol":
    return self._binary(other, "Mul")

  # --- Lowering and analysis ---

  def to_static_graph(self) -> StaticGraph:
    """Lowers the graph into a fresh canonical `StaticGraph`."""
    return to_static_graph(self.heads)

  def _bound_view(self) -> "Symbol":
    """
    A Symbol whose canonical arguments are exactly `list_arguments`.

    An atomic Symbol has no variable nodes to lower, so analysis runs on a
    copy whose inputs are variables named after the declared arguments.
    """
    if not self.is_atomic():
      return self
    bound = self.copy()
    node = bound.heads[0].node
    node.inputs = [DataEntry(Node(name=arg), 0) for arg in node.op.list_arguments()]
    return bound

  def grad(self, wrt: Sequence[str]) -> "Symbol":
    """
    Builds the gradient graph.

    The returned Symbol shares the forward nodes of ``self``; an atomic
    Symbol is differentiated through a copy bound to variables named after
    its arguments. The free variables include one head-gradient seed per
    output of ``self`` (``<output name>_grad``).

    Args:
        wrt (Sequence[str]): Argument names to differentiate with respect to.

    Returns:
        Symbol: One gradient head per requested name, in order.

    Raises:
        UnmatchedKeywordError: If a name is not an argument.
    """
    from symgraph.core.grad import make_gradient_symbol

    return make_gradient_symbol(self._bound_view(), wrt)

  def infer_shape(self, *shapes: Optional[Sequence[int]], **known: Sequence[int]) -> ShapeInferenceResult:
    """
    Infers argument and output shapes.

    With no arguments every argument shape starts unknown. Shapes may be
    given positionally, in `list_arguments` order, or by name.

    Names that match no argument raise `UnmatchedKeywordError` in strict
    mode; otherwise they are reported in a warning, listed in
    ``result.ignored``, and inference runs with the names that did match.

    Returns:
        ShapeInferenceResult: The inferred shapes.

    Raises:
        TypeError: If positional and keyword shapes are mixed.
        ArityMismatchError: If the positional count does not match.
        ShapeMismatchError: If the shapes contradict each other.
    """
    if shapes and known:
      raise TypeError("infer_shape accepts either positional or keyword shapes, not both")

    graph = self._bound_view().to_static_graph()
    arg_names = graph.list_arguments()
    arg_shapes: List[Optional[Tuple[int, ...]]] = [None] * len(arg_names)

    if shapes:
      if len(shapes) != len(arg_names):
        raise ArityMismatchError(len(arg_names), len(shapes))
      arg_shapes = [tuple(s) if s is not None else None for s in shapes]

    for i, arg_name in enumerate(arg_names):
      if arg_name in known:
        arg_shapes[i] = tuple(known[arg_name])

    ignored = [k for k in known if k not in arg_names]
    if ignored:
      if get_config().strict_mode:
        raise UnmatchedKeywordError("Symbol.infer_shape", ignored, self.list_arguments())
      log_warning(escape(format_keyword_mismatch("Symbol.infer_shape", ignored, self.list_arguments())))

    complete, inferred_args, inferred_outs = graph.infer_shape(arg_shapes)
    return ShapeInferenceResult(
      complete=complete,
      arg_names=arg_names,
      arg_shapes=inferred_args,
      out_names=self.list_returns(),
      out_shapes=inferred_outs,
      ignored=ignored,
    )
