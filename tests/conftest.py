import pytest

from fakes import FakeDatabase


@pytest.fixture
def fake_db():
    return FakeDatabase()
