"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Global state isolation (configuration, default names, console backend).
- A captured console fixture for asserting on log output.
"""

import sys
from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console

# Add src to path so we can import 'symgraph' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from symgraph.config import reset_config  # noqa: E402
from symgraph.core.naming import reset_name_manager  # noqa: E402
from symgraph.utils.console import reset_console, set_console  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_global_state():
  """
  Ensures config changes and default-name counters do not leak between tests.
  """
  reset_config()
  reset_name_manager()
  yield
  reset_config()
  reset_name_manager()
  reset_console()


@pytest.fixture
def captured_console():
  """
  Redirects all console and log output into a buffer.

  Returns:
      StringIO: The buffer receiving the output.
  """
  buf = StringIO()
  set_console(Console(file=buf, width=200, force_terminal=False, color_system=None))
  return buf
