"""
Slate Standard Library
Operator semantics and the built-in functions split, join and count
"""

from typing import Callable, Dict, List, Sequence
import operator

from error_handling import SlateNameError, SlateRuntimeError
from utilities import (
  binary_arithmetic_op,
  binary_comparison_op,
  operation_error,
  validate_function_args
)
from values import Array, Boolean, Number, String, Value, render_value, values_equal


# ============================================================================
# ARITHMETIC FUNCTIONS
# ============================================================================

def slate_add(x: Value, y: Value) -> Value:
  """Addition for numbers, concatenation for two strings"""
  if isinstance(x, Number) and isinstance(y, Number):
    return Number(x.value + y.value)
  elif isinstance(x, String) and isinstance(y, String):
    return String(x.value + y.value)
  else:
    raise operation_error("+", x.type_name, y.type_name)


# Use factory functions for arithmetic operations
_slate_sub_impl = binary_arithmetic_op(operator.sub, "-", Number)
_slate_mul_impl = binary_arithmetic_op(operator.mul, "*", Number)


def slate_sub(x: Value, y: Value) -> Value:
  """Subtraction"""
  return _slate_sub_impl(x, y)


def slate_mul(x: Value, y: Value) -> Value:
  """Multiplication"""
  return _slate_mul_impl(x, y)


def slate_div(x: Value, y: Value) -> Value:
  """Division"""
  if not isinstance(x, Number) or not isinstance(y, Number):
    raise operation_error("/", x.type_name, y.type_name)
  if y.value == 0:
    raise SlateRuntimeError("Division by zero")
  return Number(x.value / y.value)


# ============================================================================
# COMPARISON FUNCTIONS
# ============================================================================

def slate_eq(x: Value, y: Value) -> Value:
  """Equality comparison, false across kinds"""
  return Boolean(values_equal(x, y))


def slate_ne(x: Value, y: Value) -> Value:
  """Not equal comparison"""
  return Boolean(not values_equal(x, y))


# Use factory functions for comparison operations
_slate_lt_impl = binary_comparison_op(operator.lt, "<", Boolean)
_slate_gt_impl = binary_comparison_op(operator.gt, ">", Boolean)
_slate_le_impl = binary_comparison_op(operator.le, "<=", Boolean)
_slate_ge_impl = binary_comparison_op(operator.ge, ">=", Boolean)


def slate_lt(x: Value, y: Value) -> Value:
  """Less than comparison"""
  return _slate_lt_impl(x, y)


def slate_gt(x: Value, y: Value) -> Value:
  """Greater than comparison"""
  return _slate_gt_impl(x, y)


def slate_le(x: Value, y: Value) -> Value:
  """Less than or equal comparison"""
  return _slate_le_impl(x, y)


def slate_ge(x: Value, y: Value) -> Value:
  """Greater than or equal comparison"""
  return _slate_ge_impl(x, y)


# ============================================================================
# UNARY FUNCTIONS
# ============================================================================

def slate_not(x: Value) -> Value:
  """Logical negation"""
  if not isinstance(x, Boolean):
    raise operation_error("!", x.type_name)
  return Boolean(not x.value)


def slate_negate(x: Value) -> Value:
  """Arithmetic negation"""
  if not isinstance(x, Number):
    raise operation_error("-", x.type_name)
  return Number(-x.value)


# && and || short-circuit, so the interpreter evaluates them itself
BINARY_OPERATORS: Dict[str, Callable[[Value, Value], Value]] = {
    "+": slate_add,
    "-": slate_sub,
    "*": slate_mul,
    "/": slate_div,
    "==": slate_eq,
    "!=": slate_ne,
    "<": slate_lt,
    ">": slate_gt,
    "<=": slate_le,
    ">=": slate_ge,
}

UNARY_OPERATORS: Dict[str, Callable[[Value], Value]] = {
    "!": slate_not,
    "-": slate_negate,
}


# ============================================================================
# STRING AND ARRAY FUNCTIONS
# ============================================================================

def slate_split(text: String, delimiter: String) -> Array:
  """Split text on every occurrence of delimiter; "" splits into characters"""
  if delimiter.value == "":
    parts = list(text.value)
  else:
    parts = text.value.split(delimiter.value)
  return Array(tuple(String(part) for part in parts))


def slate_join(array: Array, delimiter: String) -> String:
  """Render each element and interleave the delimiter"""
  return String(delimiter.value.join(render_value(elem) for elem in array.elements))


def slate_count(value: Value) -> Number:
  """Number of elements of an array or characters of a string"""
  if isinstance(value, Array):
    return Number(float(len(value.elements)))
  return Number(float(len(value.value)))


# ============================================================================
# BUILT-IN FUNCTION REGISTRY
# ============================================================================

def make_builtin_function(name: str, func: Callable, param_types: List, type_signature: str = "") -> Dict:
  """Create a built-in function descriptor"""
  return {
      'name': name,
      'func': func,
      'param_types': param_types,
      'type_signature': type_signature
  }


BUILTIN_FUNCTIONS: Dict[str, Dict] = {
    "split": make_builtin_function(
        "split", slate_split, ["String", "String"], "String -> String -> Array"),
    "join": make_builtin_function(
        "join", slate_join, ["Array", "String"], "Array -> String -> String"),
    "count": make_builtin_function(
        "count", slate_count, [("Array", "String")], "Array | String -> Number"),
}


def get_builtin_function(name: str) -> Dict:
  """Get a built-in function by name"""
  if name in BUILTIN_FUNCTIONS:
    return BUILTIN_FUNCTIONS[name]
  else:
    raise SlateNameError(f"Unknown built-in function: {name}")


def list_builtin_functions() -> List[str]:
  """List all available built-in functions"""
  return list(BUILTIN_FUNCTIONS.keys())


def call_builtin(name: str, args: Sequence[Value]) -> Value:
  """Check arity and argument kinds, then apply the built-in"""
  builtin = get_builtin_function(name)
  validate_function_args(name, args, builtin['param_types'])
  return builtin['func'](*args)
