"""
Operator Registry.

Maps operator type names to their `OperatorProperty` classes. Operators
register themselves with the `register_op` decorator when their module is
imported; `symgraph.ops` imports all built-in modules.
"""

from typing import Any, Dict, List, Type

from symgraph.errors import UnknownOperatorError
from symgraph.ops.base import OperatorProperty

_OP_REGISTRY: Dict[str, Type[OperatorProperty]] = {}


def register_op(name: str):
  """
  Class decorator registering an operator under ``name``.

  The name also becomes the operator's ``type_name`` unless the class sets one.
  """

  def wrapper(cls: Type[OperatorProperty]) -> Type[OperatorProperty]:
    if "type_name" not in cls.__dict__:
      cls.type_name = name
    _OP_REGISTRY[name] = cls
    return cls

  return wrapper


def get_op_class(name: str) -> Type[OperatorProperty]:
  """
  Looks up a registered operator class.

  Raises:
      UnknownOperatorError: If nothing is registered under ``name``.
  """
  cls = _OP_REGISTRY.get(name)
  if cls is None:
    raise UnknownOperatorError(name, list_operators())
  return cls


def create_operator(name: str, **params: Any) -> OperatorProperty:
  """
  Instantiates a registered operator.

  Args:
      name (str): Registered type name (e.g. 'FullyConnected').
      **params: Operator parameters, validated by the operator's schema.

  Returns:
      OperatorProperty: A new operator instance.
  """
  return get_op_class(name)(**params)


def list_operators() -> List[str]:
  """Returns the registered operator names, sorted."""
  return sorted(_OP_REGISTRY.keys())
