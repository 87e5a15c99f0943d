import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    # CLI tests point the logger at CliRunner's stderr, which is closed afterwards.
    yield
    structlog.reset_defaults()
