"""
Error Taxonomy.

Every failure raised by the graph core is a precondition violation. Each kind
has its own exception class so callers can distinguish them, and all of them
derive from `SymbolError` (itself a `ValueError`) so a single ``except`` can
catch any graph-construction failure.

Failures are raised before any mutation is applied: an operation that raises
leaves the graph exactly as it found it.
"""

from typing import Iterable, List, Optional, Sequence


class SymbolError(ValueError):
  """Base class for all graph construction and introspection failures."""


class ArityMismatchError(SymbolError):
  """
  Positional composition supplied the wrong number of arguments.

  Attributes:
      required (int): Number of arguments the target expects.
      provided (int): Number of arguments supplied by the caller.
  """

  def __init__(self, required: int, provided: int):
    self.required = required
    self.provided = provided
    super().__init__(f"Incorrect number of arguments, requires {required}, provided {provided}")


class UnsupportedTupleArgumentError(SymbolError):
  """An argument Symbol has more than one return where a single value is required."""

  def __init__(self, position: str, num_returns: int):
    self.position = position
    self.num_returns = num_returns
    super().__init__(f"Argument {position} is a tuple with {num_returns} returns, a single return is required")


class NotComposableError(SymbolError):
  """The target Symbol has several returns, or is a bare Variable."""


class DuplicateArgumentNameError(SymbolError):
  """
  Keyword composition was attempted on a graph with repeated free-variable names.

  Attributes:
      duplicates (Dict[str, int]): Each duplicated name mapped to its occurrence count.
  """

  def __init__(self, duplicates: dict):
    self.duplicates = dict(duplicates)
    details = ", ".join(f'"{k}" occurs in {v} places' for k, v in sorted(self.duplicates.items()))
    super().__init__(
      f"Keyword argument call is not supported because argument names are duplicated in the Symbol: {details}"
    )


class UnmatchedKeywordError(SymbolError):
  """
  One or more caller-supplied names match no candidate.

  The message lists every unmatched name together with the full candidate
  list so that typos are easy to spot.

  Attributes:
      unmatched (List[str]): Names that did not match.
      candidates (List[str]): Names that would have been accepted.
      source (str): The operation that rejected the names.
  """

  def __init__(self, source: str, unmatched: Iterable[str], candidates: Sequence[str]):
    self.source = source
    self.unmatched: List[str] = list(unmatched)
    self.candidates: List[str] = list(candidates)
    super().__init__(format_keyword_mismatch(source, self.unmatched, self.candidates))


class IndexOutOfRangeError(SymbolError, IndexError):
  """Head indexing beyond the number of returns."""

  def __init__(self, index: int, num_returns: int):
    self.index = index
    self.num_returns = num_returns
    super().__init__(f"Symbol index {index} out of range, the Symbol has {num_returns} returns")


class OperatorParamError(SymbolError):
  """Operator parameters failed validation."""


class UnknownOperatorError(UnmatchedKeywordError):
  """No operator is registered under the requested name."""

  def __init__(self, name: str, candidates: Sequence[str]):
    super().__init__("Operator registry", [name], candidates)


class ShapeMismatchError(SymbolError):
  """Shape inference met two contradicting shapes for the same entry."""

  def __init__(self, message: str, expected: Optional[tuple] = None, actual: Optional[tuple] = None):
    self.expected = expected
    self.actual = actual
    super().__init__(message)


def format_keyword_mismatch(source: str, unmatched: Sequence[str], candidates: Sequence[str]) -> str:
  """
  Builds the diagnostic text for unmatched keyword names.

  Args:
      source (str): Name of the rejecting operation (e.g. 'Symbol.compose').
      unmatched (Sequence[str]): The names that matched nothing.
      candidates (Sequence[str]): The accepted names, in their canonical order.

  Returns:
      str: Multi-line message.
  """
  lines = [f"{source}: Keyword argument name {name} not found." for name in unmatched]
  lines.append("Candidate arguments:")
  for i, cand in enumerate(candidates):
    lines.append(f"\t[{i}]{cand}")
  return "\n".join(lines)
