"""
Tests for the symgraph CLI.

Verifies:
1. Each command returns 0 and prints its report.
2. Graph errors are logged and mapped to exit code 1.
3. Malformed options are rejected.
"""

import pytest

from symgraph.cli.__main__ import main


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
  """Keeps a surrounding pyproject.toml from configuring the CLI."""
  monkeypatch.chdir(tmp_path)


def test_ops_lists_registry(captured_console):
  assert main(["ops"]) == 0
  output = captured_console.getvalue()
  assert "FullyConnected" in output
  assert "num_hidden (required)" in output
  assert "lhs, rhs" in output


def test_describe(captured_console):
  assert main(["describe", "FullyConnected", "--param", "num_hidden=4", "--name", "fc1"]) == 0
  output = captured_console.getvalue()
  assert "AtomicFunction Type:FullyConnected" in output
  assert "Variable:fc1_weight" in output
  assert "['fc1_data', 'fc1_weight', 'fc1_bias']" in output


def test_describe_unknown_operator(captured_console):
  assert main(["describe", "Nope"]) == 1
  output = captured_console.getvalue()
  assert "Keyword argument name Nope not found." in output
  assert "FullyConnected" in output


def test_describe_invalid_param(captured_console):
  assert main(["describe", "FullyConnected", "--param", "num_hidden=0"]) == 1
  assert "Invalid parameters" in captured_console.getvalue()


def test_malformed_param(captured_console):
  assert main(["describe", "FullyConnected", "--param", "num_hidden"]) == 1
  assert "Expected 'key=value'" in captured_console.getvalue()


def test_infer_shape(captured_console):
  args = ["infer-shape", "FullyConnected", "--param", "num_hidden=10", "--shape", "data=64,100"]
  assert main(args) == 0
  output = captured_console.getvalue()
  assert "(10, 100)" in output
  assert "(64, 10)" in output


def test_infer_shape_incomplete_warns(captured_console):
  assert main(["infer-shape", "FullyConnected", "--param", "num_hidden=10"]) == 0
  assert "incomplete" in captured_console.getvalue()


def test_infer_shape_mismatch(captured_console):
  args = ["infer-shape", "Add", "--shape", "lhs=2,3", "rhs=3,2"]
  assert main(args) == 1
  assert "incompatible input shapes" in captured_console.getvalue()


def test_infer_shape_unknown_name_strict(captured_console):
  args = ["--strict", "infer-shape", "Add", "--shape", "lhs=2,3", "nope=1"]
  assert main(args) == 1
  assert "Keyword argument name nope not found." in captured_console.getvalue()


def test_infer_shape_unknown_name_lenient(captured_console):
  assert main(["infer-shape", "Add", "--shape", "lhs=2,3", "nope=1"]) == 0
  assert "Keyword argument name nope not found." in captured_console.getvalue()


def test_malformed_shape(captured_console):
  assert main(["infer-shape", "Add", "--shape", "lhs"]) == 1
  assert "Invalid shape" in captured_console.getvalue()


def test_grad(captured_console):
  assert main(["grad", "Mul", "--wrt", "z_lhs", "--name", "z"]) == 0
  output = captured_console.getvalue()
  assert "Type:Mul" in output
  assert "['z_backward_lhs']" in output
  assert "z_output_grad" in output


def test_grad_all_arguments(captured_console):
  assert main(["grad", "Add"]) == 0
  assert "['backward_lhs', 'backward_rhs']" in captured_console.getvalue()


def test_grad_unknown_argument(captured_console):
  assert main(["grad", "Mul", "--wrt", "w"]) == 1
  assert "Symbol.grad: Keyword argument name w not found." in captured_console.getvalue()


def test_version(capsys):
  with pytest.raises(SystemExit) as excinfo:
    main(["--version"])
  assert excinfo.value.code == 0
  assert "0.0.1" in capsys.readouterr().out
