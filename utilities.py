"""
Utilities module for the Slate interpreter
Error builders, argument validation and operator factories shared by
stdlib.py and values.py
"""

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from error_handling import SlateTypeError


# ==================== ERROR MESSAGE BUILDERS ====================

def type_mismatch_error(
  func_name: str,
  param_name: str,
  expected: str,
  actual: Any
) -> SlateTypeError:
  """
  Generate type mismatch error

  Args:
    func_name: Function name
    param_name: Parameter name
    expected: Expected type
    actual: Actual value

  Returns:
    SlateTypeError with formatted message
  """
  actual_type = getattr(actual, 'type_name', 'Unknown')
  return SlateTypeError(
    f"{func_name} requires {expected} for {param_name}, got {actual_type}"
  )


def arity_error(func_name: str, expected: int, got: int) -> SlateTypeError:
  """
  Generate arity mismatch error

  Args:
    func_name: Function name
    expected: Expected number of arguments
    got: Actual number of arguments

  Returns:
    SlateTypeError with formatted message
  """
  plural = "argument" if expected == 1 else "arguments"
  return SlateTypeError(
    f"{func_name} requires {expected} {plural}, got {got}"
  )


def operation_error(
  op: str,
  left_type: str,
  right_type: Optional[str] = None
) -> SlateTypeError:
  """
  Generate operation error

  Args:
    op: Operator symbol
    left_type: Left (or only) operand type
    right_type: Right operand type, None for unary operators

  Returns:
    SlateTypeError with formatted message
  """
  if right_type is None:
    return SlateTypeError(f"Cannot apply '{op}' to {left_type}")
  return SlateTypeError(
    f"Cannot apply '{op}' to {left_type} and {right_type}"
  )


# ==================== VALIDATION UTILITIES ====================

def validate_function_args(
  func_name: str,
  args: Sequence[Any],
  expected_types: List[Union[str, Tuple[str, ...]]]
) -> None:
  """
  Validate function arguments match expected types

  Args:
    func_name: Function name for error messages
    args: List of argument values
    expected_types: Type name per parameter, or a tuple of accepted names

  Raises:
    SlateTypeError if validation fails
  """
  if len(args) != len(expected_types):
    raise arity_error(func_name, len(expected_types), len(args))

  for i, (arg, expected) in enumerate(zip(args, expected_types)):
    accepted = expected if isinstance(expected, tuple) else (expected,)
    if arg.type_name not in accepted:
      raise type_mismatch_error(
        func_name,
        f"argument {i+1}",
        " or ".join(accepted),
        arg
      )


def dispatch_by_type(value: Any, handlers: Dict[str, Callable]) -> Any:
  """
  Generic type-based dispatch

  Args:
    value: Value with a 'type_name' attribute
    handlers: Map of type names to handler functions

  Returns:
    Result of calling the appropriate handler

  Raises:
    ValueError if no handler found

  Examples:
    dispatch_by_type(
      Number(42.0),
      {"Number": lambda v: v.value * 2}
    ) -> 84.0
  """
  value_type = getattr(value, 'type_name', 'Unknown')
  handler = handlers.get(value_type)
  if handler is None:
    raise ValueError(f"No handler for type: {value_type}")
  return handler(value)


# ==================== BINARY OPERATION FACTORIES ====================

def binary_comparison_op(
  op: Callable[[Any, Any], bool],
  op_symbol: str,
  make_result: Callable[[bool], Any]
) -> Callable[[Any, Any], Any]:
  """
  Factory for binary comparison operations

  Args:
    op: Python operator function (e.g., operator.lt)
    op_symbol: Operator symbol for error messages
    make_result: Constructor for the boolean result value

  Returns:
    Function that performs the comparison

  Examples:
    slate_lt = binary_comparison_op(operator.lt, "<", Boolean)
    result = slate_lt(Number(1.0), Number(2.0))
  """
  def comparison(x: Any, y: Any) -> Any:
    if x.type_name != "Number" or y.type_name != "Number":
      raise operation_error(op_symbol, x.type_name, y.type_name)
    return make_result(op(x.value, y.value))

  return comparison


def binary_arithmetic_op(
  op: Callable[[Any, Any], Any],
  op_symbol: str,
  make_result: Callable[[Any], Any]
) -> Callable[[Any, Any], Any]:
  """
  Factory for binary arithmetic operations

  Args:
    op: Python operator function (e.g., operator.sub)
    op_symbol: Operator symbol for error messages
    make_result: Constructor for the result value

  Returns:
    Function that performs the arithmetic operation

  Examples:
    slate_sub = binary_arithmetic_op(operator.sub, "-", Number)
    result = slate_sub(Number(3.0), Number(1.0))
  """
  def arithmetic(x: Any, y: Any) -> Any:
    if x.type_name != "Number" or y.type_name != "Number":
      raise operation_error(op_symbol, x.type_name, y.type_name)
    return make_result(op(x.value, y.value))

  return arithmetic
