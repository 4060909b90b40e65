import pytest


@pytest.fixture
def trashed_purchase(purchase, resident):
    purchase.soft_delete(resident)
    return purchase


@pytest.fixture
def trashed_neighbour_purchase(make_purchase, neighbour):
    purchase = make_purchase(neighbour)
    purchase.soft_delete(neighbour)
    return purchase
