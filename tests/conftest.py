import pytest

from tests.fake_backend import InMemoryBackend


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def client(backend):
    """user-a 로 로그인한 DataClient"""
    return backend.client_for("user-a")
