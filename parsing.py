"""
Slate Programming Language Parser
Tokenizer and recursive-descent parser producing an AST with source spans
"""

import math
import sys
from dataclasses import dataclass, field, fields, is_dataclass
from typing import List, Any, Optional, Tuple, Union

from pyparsing import MatchFirst, Regex, col, lineno, one_of

from error_handling import SourceSpan, SlateLexError, SlateParseError


@dataclass(frozen=True)
class Token:
    """Slate token with source information"""
    type: str
    value: Any
    span: SourceSpan

    def __str__(self) -> str:
        if self.value is None:
            return self.type
        return f"{self.type}({self.value!r})"


# ============================================================================
# AST NODES
# ============================================================================
# Spans are excluded from equality so trees compare by structure.

def _span_field():
    return field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class NumberLiteral:
    value: float
    span: Optional[SourceSpan] = _span_field()


@dataclass(frozen=True)
class StringLiteral:
    value: str
    span: Optional[SourceSpan] = _span_field()


@dataclass(frozen=True)
class BoolLiteral:
    value: bool
    span: Optional[SourceSpan] = _span_field()


@dataclass(frozen=True)
class ArrayLiteral:
    elements: Tuple[Any, ...]
    span: Optional[SourceSpan] = _span_field()


@dataclass(frozen=True)
class Variable:
    name: str
    span: Optional[SourceSpan] = _span_field()


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: Any
    right: Any
    span: Optional[SourceSpan] = _span_field()


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: Any
    span: Optional[SourceSpan] = _span_field()


@dataclass(frozen=True)
class IndexAccess:
    array: Any
    index: Any
    span: Optional[SourceSpan] = _span_field()


@dataclass(frozen=True)
class Call:
    name: str
    args: Tuple[Any, ...]
    span: Optional[SourceSpan] = _span_field()


@dataclass(frozen=True)
class Assignment:
    name: str
    expr: Any
    span: Optional[SourceSpan] = _span_field()


@dataclass(frozen=True)
class Print:
    expr: Any
    span: Optional[SourceSpan] = _span_field()


Expression = Union[NumberLiteral, StringLiteral, BoolLiteral, ArrayLiteral,
                   Variable, BinaryOp, UnaryOp, IndexAccess, Call]
Statement = Union[Assignment, Print]


# ============================================================================
# TOKENIZER
# ============================================================================

class SlateTokenizer:
    """Slate tokenizer: whitespace and // comments are dropped, EOF is appended"""

    KEYWORDS = {'true', 'false', 'print'}

    # one_of orders these so that two-character operators win over their prefixes
    OPERATORS = ['==', '!=', '<=', '>=', '&&', '||', '+', '-', '*', '/', '<', '>', '=', '!']

    PUNCTUATION = ['(', ')', '[', ']', ',', ';']

    # Only these separate tokens; any other character is a lex error
    WHITESPACE = " \t\r\n"

    def __init__(self, filename: str = "<input>", debug: bool = False):
        self.filename = filename
        self.debug = debug
        self._setup_token_patterns()

    def _setup_token_patterns(self):
        """Setup all token patterns for Slate, in priority order"""
        comment = Regex(r'//[^\n]*').set_parse_action(lambda t: ("COMMENT", t[0]))

        # No escape processing: everything between the quotes, newlines included
        string_literal = Regex(r'"[^"]*"').set_parse_action(lambda t: ("STRING", t[0][1:-1]))

        number = Regex(r'[0-9]+(?:\.[0-9]+)?').set_parse_action(lambda t: ("NUMBER", float(t[0])))

        word = Regex(r'[A-Za-z_][A-Za-z0-9_]*').set_parse_action(lambda t: self._classify_word(t[0]))

        operator = one_of(self.OPERATORS).set_parse_action(lambda t: ("OPERATOR", t[0]))
        punctuation = one_of(self.PUNCTUATION).set_parse_action(lambda t: ("PUNCTUATION", t[0]))

        self.token_pattern = MatchFirst(
            [comment, string_literal, number, word, operator, punctuation]
        ).parse_with_tabs()

    def _classify_word(self, word: str) -> Tuple[str, str]:
        if word in self.KEYWORDS:
            return ("KEYWORD", word)
        return ("IDENTIFIER", word)

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize Slate source code into a list terminated by an EOF token"""
        tokens = []
        last_end = 0

        for result, start, end in self.token_pattern.scan_string(text):
            # Anything scan_string skipped over that is not whitespace is an error
            self._check_skipped(text, last_end, start)
            last_end = end

            kind, value = result[0]
            if kind == "COMMENT":
                continue
            span = self._make_span(text, start, end)
            if kind == "NUMBER" and math.isinf(value):
                raise SlateLexError("Number literal out of range", span)
            tokens.append(Token(kind, value, span))

        self._check_skipped(text, last_end, len(text))
        tokens.append(Token("EOF", None, self._make_span(text, len(text), len(text))))

        if self.debug:
            print(f"Tokenized {len(tokens)} tokens", file=sys.stderr)
        return tokens

    def _check_skipped(self, text: str, start: int, end: int) -> None:
        for pos in range(start, end):
            char = text[pos]
            if char in self.WHITESPACE:
                continue
            span = self._make_span(text, pos, pos + 1)
            if char == '"':
                raise SlateLexError("Unterminated string literal", span)
            raise SlateLexError(f"Unexpected character {char!r}", span)

    def _make_span(self, text: str, start: int, end: int) -> SourceSpan:
        return SourceSpan(
            self.filename,
            lineno(start, text), col(start, text),
            lineno(end, text), col(end, text),
            text[start:end]
        )


# ============================================================================
# PARSER
# ============================================================================

# Binary operator levels, lowest binding first. Every level is left-associative.
BINARY_PRECEDENCE: Tuple[Tuple[str, ...], ...] = (
    ("||",),
    ("&&",),
    ("==", "!="),
    ("<", ">", "<=", ">="),
    ("+", "-"),
    ("*", "/"),
)

UNARY_OPERATORS = ("!", "-")


def describe_token(token: Token) -> str:
    """Human readable description of a token for error messages"""
    if token.type == "EOF":
        return "end of input"
    if token.type == "NUMBER":
        return f"number {token.span.text}"
    if token.type == "STRING":
        return f"string {token.span.text}"
    if token.type == "IDENTIFIER":
        return f"identifier '{token.value}'"
    if token.type == "KEYWORD":
        return f"keyword '{token.value}'"
    return f"'{token.value}'"


class RecursiveDescentParser:
    """Consumes a token list and builds statement nodes.

    One method per grammar rule; the binary levels are driven by
    BINARY_PRECEDENCE so that precedence and associativity are data.
    """

    def __init__(self, tokens: List[Token]):
        if not tokens or tokens[-1].type != "EOF":
            raise ValueError("token list must end with an EOF token")
        self.tokens = tokens
        self.pos = 0

    # ------------------------------------------------------------------
    # Token helpers
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.type != "EOF":
            self.pos += 1
        return token

    def _check(self, token_type: str, *values: str, offset: int = 0) -> bool:
        token = self._peek(offset)
        if token.type != token_type:
            return False
        return not values or token.value in values

    def _match(self, token_type: str, *values: str) -> Optional[Token]:
        if self._check(token_type, *values):
            return self._advance()
        return None

    def _expect(self, token_type: str, value: str, expected: str) -> Token:
        token = self._match(token_type, value)
        if token is None:
            raise self._error(expected)
        return token

    def _error(self, expected: str) -> SlateParseError:
        token = self._peek()
        got = describe_token(token)
        return SlateParseError(f"Expected {expected}, found {got}", token.span,
                               expected=expected, got=got)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def parse_program(self) -> Tuple[Statement, ...]:
        """program := statement* EOF"""
        statements = []
        while not self._check("EOF"):
            start = self._peek()
            try:
                statements.append(self.parse_statement())
            except RecursionError:
                raise SlateParseError("Expression nested too deeply", start.span) from None
        return tuple(statements)

    def expect_end(self) -> None:
        if not self._check("EOF"):
            raise self._error("end of input")

    def parse_statement(self) -> Statement:
        """statement := "print" expr ";" | IDENT "=" expr ";" """
        token = self._peek()

        if self._match("KEYWORD", "print"):
            expr = self.parse_expression()
            self._expect("PUNCTUATION", ";", "';'")
            return Print(expr, span=token.span)

        if self._match("IDENTIFIER"):
            self._expect("OPERATOR", "=", "'=' after variable name")
            expr = self.parse_expression()
            self._expect("PUNCTUATION", ";", "';'")
            return Assignment(token.value, expr, span=token.span)

        raise self._error("statement")

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expression(self) -> Expression:
        """expr := or_expr"""
        return self._parse_binary(0)

    def _parse_binary(self, level: int) -> Expression:
        if level == len(BINARY_PRECEDENCE):
            return self._parse_unary()

        left = self._parse_binary(level + 1)
        while True:
            op_token = self._match("OPERATOR", *BINARY_PRECEDENCE[level])
            if op_token is None:
                return left
            right = self._parse_binary(level + 1)
            left = BinaryOp(op_token.value, left, right, span=op_token.span)

    def _parse_unary(self) -> Expression:
        """unary := ("!"|"-") unary | postfix"""
        op_token = self._match("OPERATOR", *UNARY_OPERATORS)
        if op_token:
            return UnaryOp(op_token.value, self._parse_unary(), span=op_token.span)
        return self._parse_postfix()

    def _parse_postfix(self) -> Expression:
        """postfix := primary ("[" expr "]")*"""
        expr = self._parse_primary()
        while True:
            bracket = self._match("PUNCTUATION", "[")
            if bracket is None:
                return expr
            index = self.parse_expression()
            self._expect("PUNCTUATION", "]", "']' to close index")
            expr = IndexAccess(expr, index, span=bracket.span)

    def _parse_primary(self) -> Expression:
        token = self._peek()

        if self._match("NUMBER"):
            return NumberLiteral(token.value, span=token.span)

        if self._match("STRING"):
            return StringLiteral(token.value, span=token.span)

        if self._match("KEYWORD", "true", "false"):
            return BoolLiteral(token.value == "true", span=token.span)

        if self._match("IDENTIFIER"):
            if self._match("PUNCTUATION", "("):
                args = self._parse_list(")", "')' to close call")
                return Call(token.value, args, span=token.span)
            return Variable(token.value, span=token.span)

        if self._match("PUNCTUATION", "("):
            expr = self.parse_expression()
            self._expect("PUNCTUATION", ")", "')'")
            return expr

        if self._match("PUNCTUATION", "["):
            elements = self._parse_list("]", "']' to close array")
            return ArrayLiteral(elements, span=token.span)

        raise self._error("expression")

    def _parse_list(self, closing: str, expected: str) -> Tuple[Expression, ...]:
        """(expr ("," expr)*)? followed by the closing delimiter"""
        items = []
        if self._match("PUNCTUATION", closing):
            return tuple(items)

        items.append(self.parse_expression())
        while self._match("PUNCTUATION", ","):
            items.append(self.parse_expression())
        self._expect("PUNCTUATION", closing, expected)
        return tuple(items)


class SlateParser:
    """Main Slate parser combining tokenizer and recursive-descent parser"""

    def __init__(self, debug: bool = False):
        self.debug = debug

    def tokenize(self, text: str, filename: str = "<input>") -> List[Token]:
        """Tokenize Slate source code"""
        return SlateTokenizer(filename, self.debug).tokenize(text)

    def parse_string(self, text: str, filename: str = "<input>") -> Tuple[Statement, ...]:
        """Parse Slate source code from string"""
        statements = RecursiveDescentParser(self.tokenize(text, filename)).parse_program()
        if self.debug:
            print(f"Parsed {len(statements)} statements", file=sys.stderr)
        return statements

    def parse_expression(self, text: str, filename: str = "<input>") -> Expression:
        """Parse a single Slate expression that must span the whole text"""
        parser = RecursiveDescentParser(self.tokenize(text, filename))
        try:
            expr = parser.parse_expression()
        except RecursionError:
            raise SlateParseError("Expression nested too deeply", parser.tokens[0].span) from None
        parser.expect_end()
        return expr

    def parse_file(self, filepath: str) -> Tuple[Statement, ...]:
        """Parse a Slate source file"""
        with open(filepath, 'r', encoding='utf-8') as f:
            content = f.read()
        return self.parse_string(content, filepath)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> SlateParser:
    """Create a Slate parser"""
    return SlateParser(debug=debug)


def create_debug_parser() -> SlateParser:
    """Create a Slate parser with debug enabled"""
    return SlateParser(debug=True)


def pretty_print_ast(node: Any, indent: int = 0) -> str:
    """Pretty print an AST node for debugging"""
    lines = []
    # Explicit stack so that long operator chains print without recursing
    pending = [(node, indent)]
    while pending:
        current, depth = pending.pop()
        scalars = []
        children = []
        for f in fields(current):
            if f.name == 'span':
                continue
            value = getattr(current, f.name)
            if is_dataclass(value):
                children.append(value)
            elif isinstance(value, tuple):
                children.extend(value)
            else:
                scalars.append(repr(value))

        line = "  " * depth + type(current).__name__
        if scalars:
            line += f"({', '.join(scalars)})"
        lines.append(line + "\n")

        pending.extend((child, depth + 1) for child in reversed(children))

    return "".join(lines)
