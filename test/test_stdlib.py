"""
Standard library and value model tests for Slate
"""

import operator

import pytest
from stdlib import (
  BINARY_OPERATORS,
  call_builtin,
  get_builtin_function,
  list_builtin_functions,
  slate_add,
  slate_count,
  slate_div,
  slate_eq,
  slate_join,
  slate_lt,
  slate_split
)
from values import Array, Boolean, Number, String, render_value, values_equal
from utilities import binary_arithmetic_op, dispatch_by_type
from error_handling import SlateNameError, SlateRuntimeError, SlateTypeError


class TestRendering:
  """Rendering rules used by print"""

  @pytest.mark.parametrize("value, expected", [
      (Number(3.0), "3"),
      (Number(-4.0), "-4"),
      (Number(-0.0), "0"),
      (Number(2.5), "2.5"),
      (Number(0.1), "0.1"),
      (String("raw text"), "raw text"),
      (Boolean(True), "true"),
      (Boolean(False), "false"),
      (Array(()), "[]"),
      (Array((Number(1.0), String("a"), Array((Boolean(False),)))), "[1, a, [false]]"),
  ])
  def test_render(self, value, expected):
    assert render_value(value) == expected

  def test_str_uses_language_rendering(self):
    assert str(Array((Number(1.0), Number(2.0)))) == "[1, 2]"

  def test_rendering_is_idempotent_for_strings(self):
    rendered = render_value(Array((String("x"), Number(2.0))))
    assert render_value(String(rendered)) == rendered


class TestEquality:
  """Structural equality across the value model"""

  def test_like_typed_values(self):
    assert values_equal(Number(1.0), Number(1.0))
    assert values_equal(String("a"), String("a"))
    assert not values_equal(Boolean(True), Boolean(False))

  def test_cross_type_values_are_unequal(self):
    assert not values_equal(Number(1.0), Boolean(True))
    assert not values_equal(String("1"), Number(1.0))
    assert not values_equal(Array(()), String(""))

  def test_arrays_compare_elementwise(self):
    left = Array((Number(1.0), Array((String("x"),))))
    right = Array((Number(1.0), Array((String("x"),))))
    assert values_equal(left, right)
    assert not values_equal(left, Array((Number(1.0),)))
    assert not values_equal(Array((Number(1.0),)), Array((Boolean(True),)))

  def test_eq_operator_returns_boolean(self):
    assert slate_eq(Number(2.0), String("2")) == Boolean(False)


class TestOperators:
  """Operator functions called directly"""

  def test_registry_covers_non_logical_operators(self):
    assert set(BINARY_OPERATORS) == {"+", "-", "*", "/", "==", "!=", "<", ">", "<=", ">="}

  def test_add_numbers(self):
    assert slate_add(Number(1.0), Number(2.0)) == Number(3.0)

  def test_add_strings(self):
    assert slate_add(String("a"), String("b")) == String("ab")

  def test_add_mixed_is_type_error(self):
    with pytest.raises(SlateTypeError) as exc_info:
      slate_add(Number(1.0), String("b"))
    assert exc_info.value.message == "Cannot apply '+' to Number and String"

  def test_div_by_zero(self):
    with pytest.raises(SlateRuntimeError):
      slate_div(Number(1.0), Number(0.0))

  def test_lt_requires_numbers(self):
    assert slate_lt(Number(1.0), Number(2.0)) == Boolean(True)
    with pytest.raises(SlateTypeError):
      slate_lt(String("a"), String("b"))


class TestBuiltins:
  """split, join and count"""

  def test_split_every_occurrence(self):
    result = slate_split(String("a,b,,c"), String(","))
    assert result == Array((String("a"), String("b"), String(""), String("c")))

  def test_split_without_match(self):
    assert slate_split(String("abc"), String(",")) == Array((String("abc"),))

  def test_split_empty_delimiter_gives_characters(self):
    assert slate_split(String("ab"), String("")) == Array((String("a"), String("b")))

  def test_join_renders_elements(self):
    array = Array((Number(1.0), Number(2.5), Array((String("x"),))))
    assert slate_join(array, String(" | ")) == String("1 | 2.5 | [x]")

  def test_join_empty_array(self):
    assert slate_join(Array(()), String(",")) == String("")

  def test_count(self):
    assert slate_count(Array((Number(1.0), Number(2.0)))) == Number(2.0)
    assert slate_count(String("four")) == Number(4.0)

  def test_call_builtin_validates_arity(self):
    with pytest.raises(SlateTypeError) as exc_info:
      call_builtin("split", [String("a")])
    assert exc_info.value.message == "split requires 2 arguments, got 1"

  def test_call_builtin_validates_types(self):
    with pytest.raises(SlateTypeError) as exc_info:
      call_builtin("count", [Number(3.0)])
    assert exc_info.value.message == "count requires Array or String for argument 1, got Number"

  def test_call_builtin_join_type(self):
    with pytest.raises(SlateTypeError) as exc_info:
      call_builtin("join", [String("abc"), String(",")])
    assert "join" in exc_info.value.message

  def test_unknown_builtin(self):
    with pytest.raises(SlateNameError):
      get_builtin_function("upper")

  def test_list_builtin_functions(self):
    assert sorted(list_builtin_functions()) == ["count", "join", "split"]


class TestUtilities:
  """Helpers shared by the operators and renderers"""

  def test_dispatch_without_handler(self):
    with pytest.raises(ValueError):
      dispatch_by_type(Boolean(True), {"Number": lambda v: v.value})

  def test_arithmetic_factory_only_accepts_numbers(self):
    sub = binary_arithmetic_op(operator.sub, "-", Number)
    assert sub(Number(5.0), Number(2.0)) == Number(3.0)
    with pytest.raises(SlateTypeError) as exc_info:
      sub(String("a"), String("b"))
    assert exc_info.value.message == "Cannot apply '-' to String and String"
