"""
Composition Engine.

Binds the free variables of a Symbol to other Symbols, in place. These are
the mutating primitives behind `Symbol.compose`; `Symbol.__call__` copies the
Symbol first so the callee stays reusable.

Both flavours follow the same discipline: validate everything, build a
rewrite plan, and only then apply it. A failing call leaves the graph
untouched, including the name of the target node.

Positional binding:
    - Atomic target: the operator's declared arguments define the arity and
      the inputs are filled in order.
    - Composite target: input edges that point at variables are collected in
      traversal order. The first edge reaching each distinct variable takes the
      next positional argument; later edges reaching the same variable reuse
      it. The number of distinct variables must equal the argument count.

Keyword binding:
    - Atomic target: declared arguments missing from ``kwargs`` get a fresh
      placeholder variable named by `auto_variable_name`.
    - Composite target: the graph must not contain two variables sharing a
      name; every key must match a variable.
"""

from typing import TYPE_CHECKING, Dict, List, Mapping, Sequence, Set, Tuple

from symgraph.core.naming import auto_variable_name
from symgraph.core.node import DataEntry, Node
from symgraph.core.traversal import dfs_visit
from symgraph.errors import (
  ArityMismatchError,
  DuplicateArgumentNameError,
  NotComposableError,
  UnmatchedKeywordError,
  UnsupportedTupleArgumentError,
)
from symgraph.utils.console import log_debug

if TYPE_CHECKING:
  from symgraph.core.symbol import Symbol

RewritePlan = List[Tuple[Node, int, DataEntry]]
"""(consumer node, input slot, replacement entry) triples."""


def _check_composable(symbol: "Symbol") -> Node:
  if symbol.num_returns() != 1:
    raise NotComposableError(
      f"Only composition of single-return symbols is supported, this Symbol has {symbol.num_returns()} returns"
    )
  head_node = symbol.heads[0].node
  if head_node.is_variable():
    raise NotComposableError(f"Variable '{head_node.name}' cannot be composed")
  return head_node


def _apply(plan: RewritePlan) -> None:
  for node, slot, entry in plan:
    node.inputs[slot] = entry


def compose_positional(symbol: "Symbol", args: Sequence["Symbol"], name: str = "") -> None:
  """
  Binds free variables of ``symbol`` positionally.

  Args:
      symbol: The Symbol to mutate.
      args: Single-return Symbols, one per free variable.
      name: New name of the target node.

  Raises:
      NotComposableError: If ``symbol`` has several returns or is a variable.
      UnsupportedTupleArgumentError: If an argument has several returns.
      ArityMismatchError: If the argument count does not match.
  """
  head_node = _check_composable(symbol)
  for i, arg in enumerate(args):
    if arg.num_returns() != 1:
      raise UnsupportedTupleArgumentError(str(i), arg.num_returns())

  if symbol.is_atomic():
    required = head_node.op.list_arguments()
    if len(args) != len(required):
      raise ArityMismatchError(len(required), len(args))
    head_node.inputs = [arg.heads[0] for arg in args]
  else:
    replace_map: Dict[int, DataEntry] = {}
    pending: List[Tuple[Node, int, int]] = []
    arg_counter = 0

    def visit(node: Node) -> None:
      nonlocal arg_counter
      for slot, entry in enumerate(node.inputs):
        if not entry.node.is_variable():
          continue
        key = id(entry.node)
        if key not in replace_map:
          if arg_counter < len(args):
            replace_map[key] = args[arg_counter].heads[0]
          arg_counter += 1
        pending.append((node, slot, key))

    dfs_visit(symbol.heads, visit)
    if arg_counter != len(args):
      raise ArityMismatchError(arg_counter, len(args))
    _apply([(node, slot, replace_map[key]) for node, slot, key in pending])

  head_node.name = name
  log_debug(f"Composed '{name}' positionally with {len(args)} arguments")


def compose_keyword(symbol: "Symbol", kwargs: Mapping[str, "Symbol"], name: str = "") -> None:
  """
  Binds free variables of ``symbol`` by name.

  Args:
      symbol: The Symbol to mutate.
      kwargs: Argument name to single-return Symbol.
      name: New name of the target node; also prefixes auto-generated variables.

  Raises:
      NotComposableError: If ``symbol`` has several returns or is a variable.
      UnsupportedTupleArgumentError: If a value has several returns.
      DuplicateArgumentNameError: If the composite graph repeats a variable name.
      UnmatchedKeywordError: If a key matches no argument.
  """
  head_node = _check_composable(symbol)
  for key, value in kwargs.items():
    if value.num_returns() != 1:
      raise UnsupportedTupleArgumentError(key, value.num_returns())

  if symbol.is_atomic():
    required = head_node.op.list_arguments()
    unmatched = [k for k in kwargs if k not in required]
    if unmatched:
      raise UnmatchedKeywordError("Symbol.compose", unmatched, required)

    new_inputs: List[DataEntry] = []
    for arg_name in required:
      if arg_name in kwargs:
        new_inputs.append(kwargs[arg_name].heads[0])
      else:
        new_inputs.append(DataEntry(Node(name=auto_variable_name(name, arg_name)), 0))
    head_node.inputs = new_inputs
  else:
    max_dup, counts = symbol.find_duplicate_args()
    if max_dup > 1:
      raise DuplicateArgumentNameError({k: v for k, v in counts.items() if v > 1})

    plan: RewritePlan = []
    matched: Set[int] = set()
    matched_names: Set[str] = set()

    def visit(node: Node) -> None:
      for slot, entry in enumerate(node.inputs):
        var = entry.node
        if var.is_variable() and var.name in kwargs:
          plan.append((node, slot, kwargs[var.name].heads[0]))
          matched.add(id(var))
          matched_names.add(var.name)

    dfs_visit(symbol.heads, visit)
    if len(matched) != len(kwargs):
      unmatched = [k for k in kwargs if k not in matched_names]
      raise UnmatchedKeywordError("Symbol.compose", unmatched, symbol.list_arguments())
    _apply(plan)

  head_node.name = name
  log_debug(f"Composed '{name}' with keywords {sorted(kwargs)}")
