"""
Slate Programming Language - Main Entry Point
Runs a script file, dumps its tokens or AST, or starts an interactive session
"""

from typing import List, Optional
import argparse
import atexit
import os
import sys
import traceback

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from error_handling import SlateError, SlateErrorHandler
from interpreter import create_debug_interpreter, create_interpreter
from parsing import SlateTokenizer, create_debug_parser, create_parser, pretty_print_ast
from stdlib import list_builtin_functions


VERSION = "Slate v0.1.0"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='slate',
      description='Slate - a small dynamically-typed scripting language',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.slate            # Run a Slate script
  %(prog)s -i                      # Interactive mode
  %(prog)s --tokens script.slate   # Show the token stream
  %(prog)s --parse script.slate    # Parse and show the AST
  %(prog)s --debug script.slate    # Run with debug output
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Slate script file to execute'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--tokens',
      action='store_true',
      help='Tokenize file and show tokens (for debugging)'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show AST (for debugging)'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def load_source(script_path: str) -> str:
  """Read a script as UTF-8 text, exiting with status 1 if it cannot be read"""
  try:
    with open(script_path, 'r', encoding='utf-8') as f:
      return f.read()
  except FileNotFoundError:
    print(f"Error: Script file '{script_path}' not found", file=sys.stderr)
    print("  Hint: Check the file path and make sure the file exists", file=sys.stderr)
  except PermissionError:
    print(f"Error: Permission denied reading '{script_path}'", file=sys.stderr)
    print("  Hint: Make sure you have read permissions for this file", file=sys.stderr)
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{script_path}': {e}", file=sys.stderr)
    print("  Hint: Make sure the file is a text file with UTF-8 encoding", file=sys.stderr)
  except OSError as e:
    print(f"Error: Cannot read '{script_path}': {e}", file=sys.stderr)
  sys.exit(1)


def report_error(error: SlateError, source: str, filename: str) -> None:
  """Write a full error report to stderr"""
  sys.stdout.flush()
  handler = SlateErrorHandler(source, filename)
  print(handler.format(error), file=sys.stderr, end='')


def report_unexpected(error: Exception, script_path: str, debug: bool) -> None:
  print(f"Unexpected error while processing '{script_path}': {error}", file=sys.stderr)
  if debug:
    traceback.print_exc()


def tokens_file(script_path: str, debug: bool = False) -> None:
  """Tokenize a Slate script file and show the tokens"""
  source = load_source(script_path)
  try:
    tokens = SlateTokenizer(script_path, debug).tokenize(source)
  except SlateError as e:
    report_error(e, source, script_path)
    sys.exit(1)
  except Exception as e:
    report_unexpected(e, script_path, debug)
    sys.exit(1)

  for token in tokens:
    print(f"{token.span.start_line}:{token.span.start_col}\t{token.type}\t{token.span.text}")


def parse_file(script_path: str, debug: bool = False) -> None:
  """Parse a Slate script file and show the AST"""
  source = load_source(script_path)
  parser = create_debug_parser() if debug else create_parser()
  try:
    statements = parser.parse_string(source, script_path)
  except SlateError as e:
    report_error(e, source, script_path)
    sys.exit(1)
  except Exception as e:
    report_unexpected(e, script_path, debug)
    sys.exit(1)

  print(f"Parsed {len(statements)} statements:")
  print("=" * 50)
  for node in statements:
    print(pretty_print_ast(node), end='')


def run_script_file(script_path: str, debug: bool = False) -> None:
  """Run a Slate script file with full interpretation"""
  source = load_source(script_path)
  interpreter = create_debug_interpreter() if debug else create_interpreter()

  try:
    env = interpreter.run_string(source, script_path)
  except SlateError as e:
    report_error(e, source, script_path)
    sys.exit(1)
  except Exception as e:
    report_unexpected(e, script_path, debug)
    sys.exit(1)

  if debug:
    print(f"Final environment ({len(env)} bindings):", file=sys.stderr)
    for name, value in env.items():
      print(f"  {name} = {value}", file=sys.stderr)


def setup_readline():
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  # Setup history file
  history_file = os.path.expanduser("~/.slate_history")
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First time, no history yet, or permission denied

  readline.set_history_length(1000)

  completions = [
      # Keywords
      "print", "true", "false",
      # REPL commands
      ":tokens", ":parse", ":env", ":help", "exit",
  ] + list_builtin_functions()

  def completer(text, state):
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  def save_history():
    try:
      readline.write_history_file(history_file)
    except OSError:
      pass

  atexit.register(save_history)


def show_repl_help() -> None:
  print("REPL Commands:")
  print("  :tokens <src>     - Show tokens")
  print("  :parse <src>      - Show parsed AST")
  print("  :env              - Show current environment")
  print("  :help             - Show this help")
  print("  exit              - Exit REPL")
  print()
  print("Language features:")
  print("  x = 5;                          - Assignment")
  print("  print x * 2 + 1;                - Print a value")
  print("  words = split(\"a b c\", \" \");    - Built-ins: split, join, count")
  print("  print words[0];                 - 0-based indexing")


def run_interactive_mode(debug: bool = False) -> None:
  """Run Slate in interactive mode with one environment shared across lines"""
  print(f"{VERSION} - Interactive Mode")
  print("Type 'exit' to quit, ':help' for commands")
  if debug:
    print("Debug mode enabled")
  print()

  setup_readline()

  parser = create_debug_parser() if debug else create_parser()
  interpreter = create_debug_interpreter() if debug else create_interpreter()

  while True:
    try:
      code = input("slate> ")
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    stripped = code.strip()
    if stripped == "exit":
      break
    if not stripped:
      continue

    try:
      if stripped.startswith(":tokens "):
        for token in parser.tokenize(stripped[len(":tokens "):], "<stdin>"):
          print(f"  {token}")
      elif stripped.startswith(":parse "):
        for node in parser.parse_string(stripped[len(":parse "):], "<stdin>"):
          print(pretty_print_ast(node), end='')
      elif stripped == ":env":
        if len(interpreter.environment):
          for name, value in interpreter.environment.items():
            print(f"  {name} = {value}")
        else:
          print("  (no bindings)")
      elif stripped == ":help":
        show_repl_help()
      else:
        interpreter.run_string(code, "<stdin>")
    except SlateError as e:
      source = code
      if stripped.startswith((":tokens ", ":parse ")):
        source = stripped.split(" ", 1)[1]
      report_error(e, source, "<stdin>")
    except Exception as e:
      report_unexpected(e, "<stdin>", debug)


def main(argv: Optional[List[str]] = None) -> None:
  """Main entry point for Slate"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.interactive:
    run_interactive_mode(debug=args.debug)
    return

  if not args.script:
    arg_parser.error("a script path is required unless --interactive is given")

  if args.tokens:
    tokens_file(args.script, debug=args.debug)
  elif args.parse:
    parse_file(args.script, debug=args.debug)
  else:
    run_script_file(args.script, debug=args.debug)


if __name__ == "__main__":
  main()
