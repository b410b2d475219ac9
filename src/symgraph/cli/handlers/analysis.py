"""CLI handlers for shape inference and differentiation."""

from typing import Any, Dict, List, Tuple

from rich.markup import escape
from rich.table import Table

from symgraph.cli.handlers.inspect import build_composed
from symgraph.errors import SymbolError
from symgraph.utils.console import console, log_error, log_success, log_warning


def handle_infer_shape(op_name: str, params: Dict[str, Any], shapes: Dict[str, Tuple[int, ...]], name: str) -> int:
  """Handles 'infer-shape' command."""
  try:
    sym = build_composed(op_name, params, name)
    result = sym.infer_shape(**shapes)
  except SymbolError as e:
    log_error(escape(str(e)))
    return 1

  table = Table(title=f"Shapes of {op_name}")
  table.add_column("Kind")
  table.add_column("Name", style="bold blue")
  table.add_column("Shape", style="bold magenta")
  for arg_name, shape in zip(result.arg_names, result.arg_shapes):
    table.add_row("argument", arg_name, str(shape) if shape is not None else "?")
  for out_name, shape in zip(result.out_names, result.out_shapes):
    table.add_row("output", out_name, str(shape) if shape is not None else "?")
  console.print(table)

  if result.complete:
    log_success("All shapes inferred")
  else:
    log_warning("Shape inference is incomplete; provide more argument shapes")
  return 0


def handle_grad(op_name: str, params: Dict[str, Any], wrt: List[str], name: str) -> int:
  """Handles 'grad' command."""
  try:
    sym = build_composed(op_name, params, name)
    grad_sym = sym.grad(wrt or sym.list_arguments())
  except SymbolError as e:
    log_error(escape(str(e)))
    return 1

  console.print(grad_sym.debug_str(), markup=False, highlight=False)
  console.print(f"Gradient outputs: {grad_sym.list_returns()}", markup=False)
  console.print(f"Gradient arguments: {grad_sym.list_arguments()}", markup=False)
  return 0
