"""
Test configuration for Slate tests
"""

import io
import sys
from pathlib import Path

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from interpreter import create_interpreter


@pytest.fixture
def run():
  """Run a program with a fresh interpreter and return everything it printed"""
  def run_program(code: str) -> str:
    output = io.StringIO()
    create_interpreter(output=output).run_string(code)
    return output.getvalue()
  return run_program
