"""
Tests for the console proxy and log helpers.
"""

from io import StringIO

from rich.console import Console

from symgraph.config import RuntimeConfig, set_config
from symgraph.utils.console import (
  console,
  get_console,
  log_debug,
  log_error,
  log_info,
  log_success,
  log_warning,
  set_console,
)


def test_set_console_swaps_backend():
  custom = Console(file=StringIO())
  set_console(custom)
  assert get_console() is custom
  assert console.backend is custom


def test_console_print_goes_to_backend(captured_console):
  console.print("hello graph")
  assert "hello graph" in captured_console.getvalue()


def test_default_level_hides_info(captured_console):
  log_info("quiet")
  log_success("also quiet")
  log_warning("careful")
  log_error("broken")
  output = captured_console.getvalue()
  assert "quiet" not in output
  assert "careful" in output
  assert "broken" in output


def test_debug_level_shows_traces(captured_console):
  set_config(RuntimeConfig(log_level="DEBUG"))
  log_debug("Lowered graph: [3 nodes]")
  log_info("info shown")
  log_success("done")
  output = captured_console.getvalue()
  assert "Lowered graph: [3 nodes]" in output
  assert "info shown" in output
  assert "done" in output
