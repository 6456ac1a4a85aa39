"""Test configuration helpers."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

# Explicitly opt-in to the async plugin we rely on. Some execution environments
# disable plugin auto-discovery via ``PYTEST_DISABLE_PLUGIN_AUTOLOAD`` which
# prevents AnyIO's plugin from being loaded even if the package is installed.
pytest_plugins = ("anyio",)

# Ensure the repository root is importable so ``import core`` and the other
# absolute imports succeed when tests run from arbitrary working directories.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tests.helpers import get_missing_prerequisites, is_localstack_available  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    """Default AnyIO backend used when tests do not override the fixture."""

    return "asyncio"


@pytest.fixture(autouse=True)
def reset_aws_clients() -> Iterator[None]:
    """Keep the module-level boto3 client cache isolated between tests."""

    from infrastructure.aws.clients import clear_clients

    clear_clients()
    yield
    clear_clients()


@pytest.fixture(scope="session", autouse=True)
def suppress_asyncio_debug_logging() -> None:
    """Prevent asyncio debug logs from writing to closed pytest capture streams."""

    logger = logging.getLogger("asyncio")
    if logger.getEffectiveLevel() < logging.INFO:
        logger.setLevel(logging.INFO)


@pytest.fixture
def require_localstack():
    """Skip test if LocalStack is not reachable.

    Usage:
        def test_s3_round_trip(require_localstack):
            # This test only runs when LocalStack is available
            ...
    """

    if not is_localstack_available():
        missing = get_missing_prerequisites("localstack")
        pytest.skip(f"LocalStack not available. Missing: {', '.join(missing)}")
