"""
Naming Conventions.

Pure helpers that derive names for synthesized graph elements, plus the
`NameManager` that hands out default names to operator symbols created
through the functional API.

Keeping these rules in one place lets them be tested in isolation and changed
without touching composition logic.
"""

from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from symgraph.config import get_config


def _separator(separator: Optional[str]) -> str:
  return separator if separator is not None else get_config().name_separator


def auto_variable_name(group_name: str, arg_name: str, separator: Optional[str] = None) -> str:
  """
  Name of a placeholder variable synthesized for an unbound operator argument.

  Args:
      group_name (str): Name supplied to the composition call; may be empty.
      arg_name (str): The operator's declared argument name.
      separator (Optional[str]): Joiner; defaults to the configured separator.

  Returns:
      str: ``arg_name`` when there is no group name, else ``group_name + sep + arg_name``.
  """
  if not group_name:
    return arg_name
  return f"{group_name}{_separator(separator)}{arg_name}"


def output_name(node_name: str, return_name: str, separator: Optional[str] = None) -> str:
  """
  Externally visible name of an operator output.

  Args:
      node_name (str): Name of the producing node; may be empty.
      return_name (str): The operator's declared name for that output.
      separator (Optional[str]): Joiner; defaults to the configured separator.

  Returns:
      str: The combined name, or the bare return name for unnamed nodes.
  """
  if not node_name:
    return return_name
  return f"{node_name}{_separator(separator)}{return_name}"


def gradient_name(base: str, suffix: str = "grad", separator: Optional[str] = None) -> str:
  """Name of a node synthesized by the backward pass (e.g. 'fc1_backward', 'x_grad')."""
  if not base:
    return suffix
  return f"{base}{_separator(separator)}{suffix}"


class NameManager:
  """
  Hands out unique default names per operator hint.

  ``get(None, "FullyConnected")`` returns ``fullyconnected0``, then
  ``fullyconnected1`` and so on. An explicit name is returned unchanged.
  """

  def __init__(self) -> None:
    self._counter: Dict[str, int] = {}

  def get(self, name: Optional[str], hint: str) -> str:
    """
    Resolves the name for a new symbol.

    Args:
        name (Optional[str]): Caller-supplied name, used verbatim when given.
        hint (str): Operator type used to build a default name.

    Returns:
        str: The resolved name.
    """
    if name:
      return name
    key = hint.lower()
    index = self._counter.get(key, 0)
    self._counter[key] = index + 1
    return f"{key}{index}"


class PrefixNameManager(NameManager):
  """A `NameManager` that prepends a fixed prefix to every name."""

  def __init__(self, prefix: str) -> None:
    super().__init__()
    self.prefix = prefix

  def get(self, name: Optional[str], hint: str) -> str:
    return self.prefix + super().get(name, hint)


_CURRENT_MANAGER = NameManager()


def get_name_manager() -> NameManager:
  return _CURRENT_MANAGER


def reset_name_manager() -> None:
  """Drops all default-name counters."""
  global _CURRENT_MANAGER
  _CURRENT_MANAGER = NameManager()


@contextmanager
def use_name_manager(manager: Optional[NameManager] = None) -> Iterator[NameManager]:
  """
  Context manager to temporarily switch the active name manager:

      with use_name_manager(PrefixNameManager("block1_")):
          fc = FullyConnected(data=x, num_hidden=4)  # named 'block1_fullyconnected0'
  """
  global _CURRENT_MANAGER
  prev = _CURRENT_MANAGER
  try:
    _CURRENT_MANAGER = manager or NameManager()
    yield _CURRENT_MANAGER
  finally:
    _CURRENT_MANAGER = prev
