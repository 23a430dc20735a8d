"""
Shared test fixtures.

Lambda function handlers all live in files named handler.py, so they are
loaded by path under distinct module names.
"""

import importlib.util
import os
from dataclasses import dataclass
from pathlib import Path

import pytest

os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "notification-extractor")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "NotificationExtractorTests")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

from models import Currency  # noqa: E402

FUNCTIONS_DIR = Path(__file__).resolve().parent.parent / "functions"


def _load_handler(function_name: str):
    path = FUNCTIONS_DIR / function_name / "handler.py"
    spec = importlib.util.spec_from_file_location(f"{function_name}_handler", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@dataclass
class FakeLambdaContext:
    function_name: str = "test"
    memory_limit_in_mb: int = 128
    invoked_function_arn: str = "arn:aws:lambda:eu-west-1:123456789012:function:test"
    aws_request_id: str = "da658bd3-2d6f-4e7b-8ec2-937234644fdc"


@pytest.fixture(scope="session")
def process_handler():
    return _load_handler("process_notification")


@pytest.fixture(scope="session")
def review_handler():
    return _load_handler("review_notification")


@pytest.fixture
def lambda_context():
    return FakeLambdaContext()


@pytest.fixture
def eur():
    return Currency(id="1", code="EUR", symbol="€", name="Euro", decimal_places=2)


@pytest.fixture
def usd():
    return Currency(id="2", code="USD", symbol="$", name="US Dollar", decimal_places=2)


@pytest.fixture
def jpy():
    return Currency(id="3", code="JPY", symbol="¥", name="Japanese yen", decimal_places=0)
