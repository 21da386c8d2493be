"""
Error taxonomy and error reporting for Slate
Every failure raised by the tokenizer, parser or interpreter is a SlateError
"""

from dataclasses import dataclass
from typing import List, Optional, Dict


@dataclass(frozen=True)
class SourceSpan:
    """Source location information attached to tokens, nodes and errors"""
    filename: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    text: str = ""

    def __str__(self) -> str:
        return f"{self.filename}:{self.start_line}:{self.start_col}"


# ============================================================================
# EXCEPTION CLASSES
# ============================================================================

class SlateError(Exception):
    """Base class for every error a Slate program can raise"""
    kind = "Error"

    def __init__(self, message: str, span: Optional[SourceSpan] = None,
                 context: Optional[str] = None, suggestions: Optional[List[str]] = None):
        self.message = message
        self.span = span
        self.context = context
        self.suggestions = suggestions or []
        super().__init__(message)

    def __str__(self) -> str:
        if self.span:
            return f"{self.kind} at {self.span}: {self.message}"
        return f"{self.kind}: {self.message}"


class SlateLexError(SlateError):
    """Unrecognized character or unterminated string literal"""
    kind = "LexError"


class SlateParseError(SlateError):
    """Unexpected token, missing terminator, malformed array or call"""
    kind = "ParseError"

    def __init__(self, message: str, span: Optional[SourceSpan] = None,
                 expected: Optional[str] = None, got: Optional[str] = None, **kwargs):
        self.expected = expected
        self.got = got
        super().__init__(message, span, **kwargs)


class SlateTypeError(SlateError):
    """Operator or built-in applied to a value of the wrong kind"""
    kind = "TypeError"


class SlateNameError(SlateError):
    """Reference to a variable or built-in that does not exist"""
    kind = "NameError"


class SlateRuntimeError(SlateError):
    """Failure of a well-typed operation, e.g. division by zero"""
    kind = "RuntimeError"


class SlateIndexError(SlateRuntimeError):
    """Array index that is negative, fractional or out of bounds"""
    kind = "IndexError"


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_error_report(
    kind: str,
    message: str,
    filename: str,
    line: int,
    column: int,
    expected: Optional[str] = None,
    got: Optional[str] = None,
    context: Optional[str] = None,
    suggestions: Optional[List[str]] = None
) -> Dict:
    """Create an immutable error report structure"""
    return {
        'kind': kind,
        'message': message,
        'filename': filename,
        'line': line,
        'column': column,
        'expected': expected,
        'got': got,
        'context': context,
        'suggestions': suggestions or []
    }


def format_error_report(report: Dict) -> str:
    """Format an error report as human readable text"""
    if report['line']:
        error_msg = f"{report['kind']} in {report['filename']} at line {report['line']}, column {report['column']}:\n"
    else:
        error_msg = f"{report['kind']} in {report['filename']}:\n"
    error_msg += f"  {report['message']}\n"

    if report['expected']:
        error_msg += f"  Expected: {report['expected']}\n"

    if report['got']:
        error_msg += f"  Got: {report['got']}\n"

    if report['context']:
        error_msg += f"{report['context']}\n"

    if report['suggestions']:
        error_msg += "  Suggestions:\n"
        for suggestion in report['suggestions']:
            error_msg += f"    - {suggestion}\n"

    return error_msg


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 2) -> str:
    """Get numbered source lines around the error with a caret under the column"""
    lines = source_text.split('\n')
    if line_num < 1 or line_num > len(lines):
        return ""
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^ Error here")

    return '\n'.join(context_parts)


def generate_suggestions(error: SlateError) -> List[str]:
    """Generate hints for the most common slips"""
    suggestions = []
    message = error.message

    if isinstance(error, SlateParseError):
        if error.expected == "';'":
            suggestions.append("Every statement must end with ';'")
        if error.got == "'='":
            suggestions.append("Use '==' to compare values, '=' only assigns")
        if error.expected == "'=' after variable name":
            suggestions.append("Statements are either 'print <expr>;' or '<name> = <expr>;'")

    if isinstance(error, SlateLexError):
        if "'&'" in message:
            suggestions.append("Logical and is written '&&'")
        if "'|'" in message:
            suggestions.append("Logical or is written '||'")
        if "'.'" in message:
            suggestions.append("Numbers take a single decimal point followed by digits, e.g. 3.25")

    if isinstance(error, SlateNameError) and message.startswith("Undefined variable"):
        suggestions.append("Variables must be assigned before they are used")

    if isinstance(error, SlateNameError) and message.startswith("Unknown built-in"):
        suggestions.append("Available built-ins are split, join and count")

    return suggestions


class SlateErrorHandler:
    """Binds a source text so errors can be reported with their context"""
    def __init__(self, source_text: str, filename: str = "<input>"):
        self.source_text = source_text
        self.filename = filename

    def enhance(self, error: SlateError) -> SlateError:
        """Attach source context and suggestions to an error in place"""
        if error.span and not error.context:
            error.context = get_context_lines(
                self.source_text, error.span.start_line, error.span.start_col)
        if not error.suggestions:
            error.suggestions = generate_suggestions(error)
        return error

    def report(self, error: SlateError) -> Dict:
        """Build the report dictionary for an error"""
        self.enhance(error)
        line = error.span.start_line if error.span else 0
        column = error.span.start_col if error.span else 0
        return make_error_report(
            kind=error.kind,
            message=error.message,
            filename=error.span.filename if error.span else self.filename,
            line=line,
            column=column,
            expected=getattr(error, 'expected', None),
            got=getattr(error, 'got', None),
            context=error.context,
            suggestions=error.suggestions
        )

    def format(self, error: SlateError) -> str:
        """Full human readable text for an error"""
        return format_error_report(self.report(error))
