"""
Functional Graph API.

Convenience constructors on top of `Symbol`: `Variable`, `Group`, and one
function per registered operator, generated at import time.

An operator function takes operator parameters and input Symbols together;
values that are Symbols are bound as inputs (positionally or by keyword),
everything else is an operator parameter. Unbound inputs become free
variables named ``<name>_<argument>``.

.. code-block:: python

    from symgraph.api import Activation, FullyConnected, Variable

    x = Variable("x")
    fc1 = FullyConnected(data=x, num_hidden=128, name="fc1")
    act = Activation(data=fc1, act_type="relu", name="relu1")
    act.list_arguments()  # ['x', 'fc1_weight', 'fc1_bias']
"""

from typing import Any, Callable, Iterable, List, Optional

from symgraph.core.naming import get_name_manager
from symgraph.core.symbol import Symbol
from symgraph.ops.registry import get_op_class, list_operators


def Variable(name: str) -> Symbol:
  """Creates a named free variable."""
  return Symbol.create_variable(name)


def Group(symbols: Iterable[Symbol]) -> Symbol:
  """Bundles the outputs of several Symbols into one Symbol."""
  return Symbol.create_group(symbols)


def _make_atomic_symbol_function(op_name: str) -> Callable[..., Symbol]:
  """
  Builds the constructor function for one registered operator.

  Args:
      op_name (str): Registered operator name.

  Returns:
      Callable[..., Symbol]: ``f(*inputs, name=None, **params_and_inputs)``.
  """
  op_cls = get_op_class(op_name)

  def creator(*args: Symbol, name: Optional[str] = None, **kwargs: Any) -> Symbol:
    for i, arg in enumerate(args):
      if not isinstance(arg, Symbol):
        raise TypeError(f"{op_name}: positional argument {i} must be a Symbol, got {type(arg).__name__}")
    params = {k: v for k, v in kwargs.items() if not isinstance(v, Symbol)}
    inputs = {k: v for k, v in kwargs.items() if isinstance(v, Symbol)}

    op = op_cls(**params)
    sym = Symbol.create(op)
    resolved = get_name_manager().get(name, op.type_string())
    # Every head of an atomic Symbol points at the same node; binding through
    # the first head binds all of them.
    Symbol(sym.heads[:1]).compose(*args, name=resolved, **inputs)
    return sym

  creator.__name__ = op_name
  creator.__qualname__ = op_name
  creator.__doc__ = f"Creates a composed `{op_name}` Symbol. See `{op_cls.__module__}.{op_cls.__name__}`."
  return creator


__all__: List[str] = ["Variable", "Group"]

for _op_name in list_operators():
  globals()[_op_name] = _make_atomic_symbol_function(_op_name)
  __all__.append(_op_name)
