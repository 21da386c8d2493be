"""
Slate Interpreter
Tree-walking evaluation of a statement sequence against an explicit environment.
Printing is the only side effect and goes to the context's output stream.
"""

from typing import Dict, Iterator, Optional, Sequence, TextIO, Tuple
import sys

from error_handling import (
  SlateError,
  SlateIndexError,
  SlateNameError,
  SlateRuntimeError,
  SlateTypeError
)
from parsing import (
  ArrayLiteral,
  Assignment,
  BinaryOp,
  BoolLiteral,
  Call,
  Expression,
  IndexAccess,
  NumberLiteral,
  Print,
  Statement,
  StringLiteral,
  UnaryOp,
  Variable,
  create_parser
)
from stdlib import BINARY_OPERATORS, UNARY_OPERATORS, call_builtin
from values import Array, Boolean, Number, String, Value, render_value


LOGICAL_OPERATORS = ("&&", "||")


# ============================================================================
# ENVIRONMENT
# ============================================================================

class Environment:
  """Variable bindings for one program run; last assignment wins"""

  def __init__(self):
    self._bindings: Dict[str, Value] = {}

  def assign(self, name: str, value: Value) -> None:
    self._bindings[name] = value

  def lookup(self, name: str) -> Value:
    if name not in self._bindings:
      raise SlateNameError(f"Undefined variable: {name}")
    return self._bindings[name]

  def items(self) -> Iterator[Tuple[str, Value]]:
    return iter(self._bindings.items())

  def __contains__(self, name: str) -> bool:
    return name in self._bindings

  def __len__(self) -> int:
    return len(self._bindings)


def make_execution_context(output: Optional[TextIO] = None, debug: bool = False) -> Dict:
  """Create the per-run execution context"""
  return {
      'output': output if output is not None else sys.stdout,
      'debug': debug
  }


# ============================================================================
# STATEMENT EVALUATION
# ============================================================================

def eval_statement(node: Statement, env: Environment, context: Dict) -> None:
  """Execute one statement"""
  if context['debug']:
    print(f"Executing: {type(node).__name__}", file=sys.stderr)

  if isinstance(node, Assignment):
    env.assign(node.name, eval_expression(node.expr, env, context))
  elif isinstance(node, Print):
    value = eval_expression(node.expr, env, context)
    print(render_value(value), file=context['output'])
  else:
    raise ValueError(f"Unknown statement node: {type(node).__name__}")


def eval_program(statements: Sequence[Statement], env: Optional[Environment] = None,
                 context: Optional[Dict] = None) -> Environment:
  """Execute statements in order; the first error aborts the run"""
  if env is None:
    env = Environment()
  if context is None:
    context = make_execution_context()

  for statement in statements:
    try:
      eval_statement(statement, env, context)
    except RecursionError:
      raise SlateRuntimeError("Expression nested too deeply", statement.span) from None

  return env


# ============================================================================
# EXPRESSION EVALUATION
# ============================================================================

def eval_expression(node: Expression, env: Environment, context: Dict) -> Value:
  """
  Evaluate an expression node to a value.
  Errors raised without a location get the span of the innermost node.
  """
  if context['debug']:
    print(f"Evaluating: {type(node).__name__}", file=sys.stderr)

  try:
    if isinstance(node, NumberLiteral):
      return Number(node.value)
    elif isinstance(node, StringLiteral):
      return String(node.value)
    elif isinstance(node, BoolLiteral):
      return Boolean(node.value)
    elif isinstance(node, ArrayLiteral):
      return Array(tuple(eval_expression(elem, env, context) for elem in node.elements))
    elif isinstance(node, Variable):
      return env.lookup(node.name)
    elif isinstance(node, BinaryOp):
      return eval_binary_op(node, env, context)
    elif isinstance(node, UnaryOp):
      operand = eval_expression(node.operand, env, context)
      return UNARY_OPERATORS[node.op](operand)
    elif isinstance(node, IndexAccess):
      return eval_index_access(node, env, context)
    elif isinstance(node, Call):
      args = [eval_expression(arg, env, context) for arg in node.args]
      return call_builtin(node.name, args)
    else:
      raise ValueError(f"Unknown expression node: {type(node).__name__}")
  except SlateError as e:
    if e.span is None:
      e.span = node.span
    raise


def eval_binary_op(node: BinaryOp, env: Environment, context: Dict) -> Value:
  """Evaluate binary operation"""
  if node.op in LOGICAL_OPERATORS:
    return eval_logical_op(node, env, context)

  left_val = eval_expression(node.left, env, context)
  right_val = eval_expression(node.right, env, context)
  return BINARY_OPERATORS[node.op](left_val, right_val)


def _require_boolean(op: str, value: Value) -> Boolean:
  if not isinstance(value, Boolean):
    raise SlateTypeError(f"'{op}' requires Boolean operands, got {value.type_name}")
  return value


def eval_logical_op(node: BinaryOp, env: Environment, context: Dict) -> Value:
  """&& and || with short-circuit evaluation"""
  left_val = _require_boolean(node.op, eval_expression(node.left, env, context))

  if node.op == "&&" and not left_val.value:
    return left_val
  if node.op == "||" and left_val.value:
    return left_val

  return _require_boolean(node.op, eval_expression(node.right, env, context))


def eval_index_access(node: IndexAccess, env: Environment, context: Dict) -> Value:
  """0-based array indexing; negative and fractional indices are errors"""
  base = eval_expression(node.array, env, context)
  index = eval_expression(node.index, env, context)

  if not isinstance(base, Array):
    raise SlateTypeError(f"Cannot index into {base.type_name}")
  if not isinstance(index, Number):
    raise SlateTypeError(f"Array index must be a Number, got {index.type_name}")

  position = index.value
  if not position.is_integer():
    raise SlateIndexError(f"Array index must be a whole number, got {render_value(index)}")
  if position < 0 or position >= len(base.elements):
    raise SlateIndexError(
        f"Array index {render_value(index)} out of bounds for array of length {len(base.elements)}")

  return base.elements[int(position)]


# ============================================================================
# INTERPRETER
# ============================================================================

class SlateInterpreter:
  """Runs Slate source against an environment owned by this instance"""

  def __init__(self, debug: bool = False, output: Optional[TextIO] = None):
    self.debug = debug
    self.output = output
    self.parser = create_parser(debug)
    self.environment = Environment()

  def interpret_program(self, statements: Sequence[Statement]) -> Environment:
    context = make_execution_context(self.output, self.debug)
    return eval_program(statements, self.environment, context)

  def run_string(self, text: str, filename: str = "<input>") -> Environment:
    """Tokenize, parse and execute source text"""
    return self.interpret_program(self.parser.parse_string(text, filename))

  def run_file(self, filepath: str) -> Environment:
    return self.interpret_program(self.parser.parse_file(filepath))


# Factory functions for creating interpreters
def create_interpreter(debug: bool = False, output: Optional[TextIO] = None) -> SlateInterpreter:
  """Create an interpreter with a fresh, empty environment"""
  return SlateInterpreter(debug=debug, output=output)


def create_debug_interpreter(output: Optional[TextIO] = None) -> SlateInterpreter:
  """Create an interpreter with debug tracing enabled"""
  return SlateInterpreter(debug=True, output=output)
