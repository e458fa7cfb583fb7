import pytest

import structflags


@pytest.fixture(autouse=True)
def restore_options():
    """Restore global options after each test."""
    original = dict(structflags.options)
    yield
    structflags.options.update(original)  # type: ignore
