"""Shared test fixtures for Shopping Planner."""

import pytest

from shopping_planner.catalog import CatalogManager
from shopping_planner.data_store import BackendType, DataStore, create_data_store
from shopping_planner.dish_manager import DishManager
from shopping_planner.shopping_list import ShoppingListManager

PROFILE = "household-1"


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create a temporary data directory."""
    data_dir = tmp_path / "test_data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def data_store(temp_data_dir):
    """Create a DataStore with temporary directory."""
    return DataStore(data_dir=temp_data_dir)


@pytest.fixture(params=[BackendType.JSON, BackendType.SQLITE], ids=["json", "sqlite"])
def any_store(request, temp_data_dir):
    """A document store of each backend type."""
    return create_data_store(backend=request.param, data_dir=temp_data_dir)


@pytest.fixture
def profile_id():
    """Profile used by most tests."""
    return PROFILE


@pytest.fixture
def catalog(data_store):
    """Create a CatalogManager with temporary storage."""
    return CatalogManager(data_store=data_store)


@pytest.fixture
def dish_manager(data_store):
    """Create a DishManager with temporary storage."""
    return DishManager(data_store=data_store)


@pytest.fixture
def shopping(data_store):
    """Create a ShoppingListManager with temporary storage."""
    return ShoppingListManager(data_store=data_store)


@pytest.fixture
def kitchen(catalog, dish_manager, profile_id):
    """Two stores, two ingredients and a breakfast dish.

    Milk is bought at store A (order 0), Bread at store B (order 1), and
    Breakfast needs 2 Milk.
    """
    store_a = catalog.create_store(profile_id, "A")
    store_b = catalog.create_store(profile_id, "B")
    milk = catalog.create_ingredient(profile_id, "Milk", store_a)
    bread = catalog.create_ingredient(profile_id, "Bread", store_b)
    breakfast = dish_manager.create_dish(profile_id, "Breakfast", [(milk, 2)])
    return {
        "store_a": store_a,
        "store_b": store_b,
        "milk": milk,
        "bread": bread,
        "breakfast": breakfast,
    }
