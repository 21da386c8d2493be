"""
Integration tests for Slate using the sample programs
"""

import io

import pytest
from pathlib import Path
from interpreter import create_interpreter
from error_handling import SlateError, SlateErrorHandler


SAMPLES = {
    "basics.slate": [
        "30",
        "7",
        "9",
        "3.5",
        "true",
        "false",
        "true",
    ],
    "words.slate": [
        "[the, quick, brown, fox]",
        "quick",
        "4",
        "19",
        "the-quick-brown-fox",
        "true",
        "30",
        "[1, two, [true]]",
    ],
}


class TestSampleFiles:
  """Run each sample end to end and compare its output"""

  @pytest.fixture
  def samples_dir(self):
    """Get the samples directory path"""
    return Path(__file__).parent.parent / "samples"

  @pytest.mark.parametrize("name", sorted(SAMPLES))
  def test_sample_output(self, samples_dir, name):
    sample = samples_dir / name
    if not sample.exists():
      pytest.skip(f"Sample file {sample} not found")

    output = io.StringIO()
    interpreter = create_interpreter(output=output)
    try:
      interpreter.run_file(str(sample))
    except SlateError as e:
      source = sample.read_text(encoding="utf-8")
      pytest.fail(f"Failed to run {sample}:\n{SlateErrorHandler(source, str(sample)).format(e)}")

    assert output.getvalue().splitlines() == SAMPLES[name]
