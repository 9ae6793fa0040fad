import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'stromme'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


from stromme.core.stdlib_logging import reset_stdlib_logging_for_tests
from stromme.core.transformers import TransformContext


@pytest.fixture(autouse=True)
def _reset_stromme_logging():
    """Drop any handler a CLI test installed on the ``stromme`` logger."""
    yield
    reset_stdlib_logging_for_tests()


@pytest.fixture
def make_context():
    """Factory for a TransformContext over the given data."""

    def _make(data=None, **kwargs) -> TransformContext:
        return TransformContext(data=data or {}, **kwargs)

    return _make
