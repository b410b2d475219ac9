"""CLI handlers for operator inspection."""

from typing import Any, Dict, List

from pydantic import BaseModel
from rich.markup import escape
from rich.table import Table

from symgraph.core.symbol import Symbol
from symgraph.errors import SymbolError
from symgraph.ops.registry import create_operator, get_op_class, list_operators
from symgraph.utils.console import console, log_error


def _describe_params(schema: type) -> str:
  """Renders a parameter schema as 'name (required), other=default'."""
  if not issubclass(schema, BaseModel):
    return ""
  parts = []
  for field_name, info in schema.model_fields.items():
    if info.is_required():
      parts.append(f"{field_name} (required)")
    else:
      default = info.default.value if hasattr(info.default, "value") else info.default
      parts.append(f"{field_name}={default!r}")
  return ", ".join(parts)


def build_composed(op_name: str, params: Dict[str, Any], name: str = "") -> Symbol:
  """
  Creates an operator and binds every argument to an auto-generated variable.

  Args:
      op_name (str): Registered operator name.
      params (Dict[str, Any]): Operator parameters.
      name (str): Node name; also prefixes the generated variables.

  Returns:
      Symbol: The composed Symbol, one head per visible return.
  """
  sym = Symbol.create(create_operator(op_name, **params))
  Symbol(sym.heads[:1]).compose(name=name)
  return sym


def handle_ops() -> int:
  """Handles 'ops' command."""
  table = Table(title="Registered Operators")
  table.add_column("Operator", style="bold")
  table.add_column("Parameters")
  table.add_column("Arguments")
  table.add_column("Returns")

  for op_name in list_operators():
    op_cls = get_op_class(op_name)
    try:
      op = op_cls()
      args: List[str] = op.list_arguments()
      rets: List[str] = op.list_returns()[: op.num_visible_returns()]
      arg_text, ret_text = ", ".join(args), ", ".join(rets)
    except SymbolError:
      arg_text, ret_text = "(depends on parameters)", "(depends on parameters)"
    table.add_row(op_name, _describe_params(op_cls.Params), arg_text, ret_text)

  console.print(table)
  return 0


def handle_describe(op_name: str, params: Dict[str, Any], name: str) -> int:
  """Handles 'describe' command."""
  try:
    atomic = Symbol.create(create_operator(op_name, **params))
    composed = build_composed(op_name, params, name)
  except SymbolError as e:
    log_error(escape(str(e)))
    return 1

  console.print("[bold]Atomic symbol[/bold]")
  console.print(atomic.debug_str(), markup=False, highlight=False)
  console.print("[bold]Composed symbol[/bold]")
  console.print(composed.debug_str(), markup=False, highlight=False)
  console.print(f"Arguments: {composed.list_arguments()}", markup=False)
  console.print(f"Returns: {composed.list_returns()}", markup=False)
  return 0
