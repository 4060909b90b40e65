import pytest


@pytest.fixture(autouse=True)
def fast_kdf(settings):
    """Keep backup key derivation cheap in tests."""
    settings.BACKUP_KDF_ITERATIONS = 1_000


@pytest.fixture
def neighbour_purchase(make_purchase, neighbour):
    """A B202 purchase of one milk (5.50)."""
    return make_purchase(neighbour, quantity='1')
