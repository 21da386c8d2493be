"""
Error reporting tests for Slate
"""

import pytest
from parsing import create_parser
from interpreter import create_interpreter
from error_handling import (
  SlateError,
  SlateErrorHandler,
  SlateLexError,
  SlateNameError,
  SlateParseError,
  SourceSpan,
  format_error_report,
  get_context_lines,
  make_error_report
)


def capture_error(code: str) -> SlateError:
  with pytest.raises(SlateError) as exc_info:
    create_interpreter().run_string(code, "prog.slate")
  return exc_info.value


class TestContextLines:
  """Numbered excerpt with a caret under the column"""

  def test_caret_under_column(self):
    context = get_context_lines("x = 1;\nprint y;", 2, 7)
    assert context.splitlines() == [
        "   1: x = 1;",
        "   2: print y;",
        "            ^ Error here",
    ]

  def test_out_of_range_line(self):
    assert get_context_lines("x = 1;", 5, 1) == ""


class TestErrorStrings:
  """str() of an error names the kind and location"""

  def test_str_with_span(self):
    span = SourceSpan("a.slate", 3, 4, 3, 5, "@")
    error = SlateLexError("Unexpected character '@'", span)
    assert str(error) == "LexError at a.slate:3:4: Unexpected character '@'"

  def test_str_without_span(self):
    assert str(SlateNameError("Undefined variable: q")) == "NameError: Undefined variable: q"

  def test_kinds(self):
    assert capture_error("print 1 / 0;").kind == "RuntimeError"
    assert capture_error("print [1][3];").kind == "IndexError"
    assert capture_error("print -\"a\";").kind == "TypeError"
    assert capture_error("print q;").kind == "NameError"
    assert capture_error("print 1").kind == "ParseError"
    assert capture_error("print 1 $ 2;").kind == "LexError"


class TestReports:
  """SlateErrorHandler builds complete reports"""

  def test_runtime_error_report(self):
    source = "x = 1;\nprint x / 0;"
    error = capture_error(source)
    report = SlateErrorHandler(source, "prog.slate").report(error)
    assert report['kind'] == "RuntimeError"
    assert report['filename'] == "prog.slate"
    assert report['line'] == 2
    assert report['column'] == 9
    assert "^ Error here" in report['context']

  def test_parse_error_report_has_expected_and_got(self):
    source = "x = 1\n"
    error = capture_error(source)
    text = SlateErrorHandler(source, "prog.slate").format(error)
    assert text.startswith("ParseError in prog.slate at line 2, column 1:")
    assert "Expected: ';'" in text
    assert "Got: end of input" in text
    assert "Every statement must end with ';'" in text

  def test_lex_error_suggestion(self):
    source = "print true & false;"
    error = capture_error(source)
    text = SlateErrorHandler(source).format(error)
    assert "Logical and is written '&&'" in text

  def test_comparison_with_single_equals_suggestion(self):
    source = "print 1 = 1;"
    error = capture_error(source)
    assert isinstance(error, SlateParseError)
    SlateErrorHandler(source).enhance(error)
    assert "Use '==' to compare values, '=' only assigns" in error.suggestions

  def test_report_without_span(self):
    report = SlateErrorHandler("", "f.slate").report(SlateNameError("Undefined variable: q"))
    text = format_error_report(report)
    assert text == "NameError in f.slate:\n  Undefined variable: q\n  Suggestions:\n    - Variables must be assigned before they are used\n"

  def test_make_error_report_defaults(self):
    report = make_error_report("TypeError", "bad", "f", 1, 1)
    assert report['suggestions'] == []
    assert report['expected'] is None


class TestParserErrorsThroughHandler:

  def test_parser_span_filename(self):
    with pytest.raises(SlateParseError) as exc_info:
      create_parser().parse_string("1;", "file.slate")
    assert exc_info.value.span.filename == "file.slate"
