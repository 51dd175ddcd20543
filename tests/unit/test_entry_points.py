"""
Unit tests for the per-function Lambda entry points.
"""

import importlib.util
from pathlib import Path
from unittest.mock import patch

import pytest

SRC_DIR = Path(__file__).resolve().parents[2] / "src"


def load_entry_point(function_dir: str):
    path = SRC_DIR / function_dir / "lambda_function.py"
    spec = importlib.util.spec_from_file_location(f"{function_dir}_lambda_function", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.mark.parametrize(
    "function_dir, delegate",
    [
        ("customer_upsert", "upsert_handler"),
        ("customer_lookup", "lookup_handler"),
    ],
)
def test_entry_point_delegates(function_dir, delegate, lambda_context):
    module = load_entry_point(function_dir)
    event = {"httpMethod": "OPTIONS"}

    with patch.object(module, delegate, return_value={"statusCode": 204}) as handler:
        response = module.lambda_handler(event, lambda_context)

    handler.assert_called_once_with(event, lambda_context)
    assert response == {"statusCode": 204}
