"""
Main Entry Point for the symgraph CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `symgraph.cli.commands`.
"""

import argparse
from typing import Dict, List, Optional, Tuple

from rich.markup import escape

from symgraph import __version__
from symgraph.cli import commands
from symgraph.config import RuntimeConfig, parse_cli_key_values, parse_shape, set_config
from symgraph.utils.console import log_error


def _parse_shapes(items: Optional[List[str]]) -> Dict[str, Tuple[int, ...]]:
  """Parses repeated 'name=d0,d1,...' options."""
  shapes = {}
  for item in items or []:
    if "=" not in item:
      raise ValueError(f"Invalid shape '{item}'. Expected 'name=d0,d1,...'.")
    key, dims = item.split("=", 1)
    shapes[key.strip()] = parse_shape(dims)
  return shapes


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="symgraph: symbolic computation graph inspector")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("--strict", action="store_true", default=None, help="Treat unmatched names as errors")
  parser.add_argument("--log-level", default=None, help="Log level (default: from toml, else WARNING)")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: OPS ---
  subparsers.add_parser("ops", help="List registered operators")

  def add_op_args(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("op", help="Operator name (e.g. FullyConnected)")
    cmd.add_argument("--param", nargs="*", help="Operator parameters in key=value format (e.g. num_hidden=10)")
    cmd.add_argument("--name", default="", help="Node name; also prefixes generated variables")

  # --- Command: DESCRIBE ---
  cmd_desc = subparsers.add_parser("describe", help="Show an operator's atomic and composed symbol")
  add_op_args(cmd_desc)

  # --- Command: INFER-SHAPE ---
  cmd_shape = subparsers.add_parser("infer-shape", help="Infer shapes of an operator's arguments and outputs")
  add_op_args(cmd_shape)
  cmd_shape.add_argument("--shape", nargs="*", help="Known shapes as name=d0,d1 (e.g. data=64,100)")

  # --- Command: GRAD ---
  cmd_grad = subparsers.add_parser("grad", help="Show the gradient graph of an operator")
  add_op_args(cmd_grad)
  cmd_grad.add_argument("--wrt", nargs="*", help="Arguments to differentiate (default: all)")

  args = parser.parse_args(argv)

  try:
    set_config(RuntimeConfig.load(strict_mode=args.strict, log_level=args.log_level))
    params = parse_cli_key_values(getattr(args, "param", None))
    shapes = _parse_shapes(getattr(args, "shape", None))
  except ValueError as e:
    log_error(escape(str(e)))
    return 1

  if args.command == "ops":
    return commands.handle_ops()

  elif args.command == "describe":
    return commands.handle_describe(args.op, params, args.name)

  elif args.command == "infer-shape":
    return commands.handle_infer_shape(args.op, params, shapes, args.name)

  elif args.command == "grad":
    return commands.handle_grad(args.op, params, args.wrt or [], args.name)

  return 1


if __name__ == "__main__":
  import sys

  sys.exit(main())
