"""
Slate runtime values
Tagged union of Number, String, Boolean and Array, compared by structure
"""

from dataclasses import dataclass
from typing import ClassVar, Tuple, Union

from utilities import dispatch_by_type


class SlateValue:
  """Common base so every value prints the way the language prints it"""
  type_name: ClassVar[str] = "Unknown"

  def __str__(self) -> str:
    return render_value(self)


@dataclass(frozen=True)
class Number(SlateValue):
  value: float
  type_name: ClassVar[str] = "Number"


@dataclass(frozen=True)
class String(SlateValue):
  value: str
  type_name: ClassVar[str] = "String"


@dataclass(frozen=True)
class Boolean(SlateValue):
  value: bool
  type_name: ClassVar[str] = "Boolean"


@dataclass(frozen=True)
class Array(SlateValue):
  elements: Tuple["Value", ...]
  type_name: ClassVar[str] = "Array"


Value = Union[Number, String, Boolean, Array]


# ============================================================================
# RENDERING
# ============================================================================

def render_number(number: Number) -> str:
  """Integral numbers print without a decimal point"""
  if number.value.is_integer():
    return str(int(number.value))
  return repr(number.value)


def render_array(array: Array) -> str:
  return "[" + ", ".join(render_value(elem) for elem in array.elements) + "]"


_RENDERERS = {
    "Number": render_number,
    "String": lambda v: v.value,
    "Boolean": lambda v: "true" if v.value else "false",
    "Array": render_array,
}


def render_value(value: Value) -> str:
  """Convert a value to the text `print` writes for it"""
  return dispatch_by_type(value, _RENDERERS)


# ============================================================================
# EQUALITY
# ============================================================================

def values_equal(left: Value, right: Value) -> bool:
  """Structural equality; values of different kinds are never equal"""
  if left.type_name != right.type_name:
    return False
  if isinstance(left, Array):
    if len(left.elements) != len(right.elements):
      return False
    return all(values_equal(a, b) for a, b in zip(left.elements, right.elements))
  return left.value == right.value
