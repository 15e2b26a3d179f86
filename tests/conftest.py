import pytest

from cipher_suite import ChainEncoder, build_default_registry


@pytest.fixture(scope="session")
def registry():
    return build_default_registry()


@pytest.fixture
def chain(registry):
    return ChainEncoder(registry)
