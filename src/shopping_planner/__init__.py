"""Shopping Planner - Turn the dishes you cook into one store-by-store shopping list."""

from .aggregator import aggregate
from .blob_storage import BlobStorage
from .catalog import CatalogManager
from .config import ConfigManager
from .data_store import BackendType, create_data_store, DataStore
from .dish_manager import DishManager
from .errors import DuplicateNameError, NotFoundError, ShoppingPlannerError, ValidationError
from .models import (
    AggregatedItem,
    AggregatedList,
    Collection,
    Dish,
    DishItem,
    DishItemWithIngredient,
    DishWithIngredients,
    EnrichedMiscItem,
    Ingredient,
    ManualIngredient,
    MiscItem,
    SelectedDish,
    SelectedDishView,
    ShoppingList,
    Store,
    StoreGroup,
    StoreWithImage,
)
from .output_formatter import OutputFormatter
from .shopping_list import ShoppingListManager
from .sqlite_store import SQLiteStore

__version__ = "0.1.0"

__all__ = [
    "aggregate",
    "AggregatedItem",
    "AggregatedList",
    "BackendType",
    "BlobStorage",
    "CatalogManager",
    "Collection",
    "ConfigManager",
    "create_data_store",
    "DataStore",
    "Dish",
    "DishItem",
    "DishItemWithIngredient",
    "DishManager",
    "DishWithIngredients",
    "DuplicateNameError",
    "EnrichedMiscItem",
    "Ingredient",
    "ManualIngredient",
    "MiscItem",
    "NotFoundError",
    "OutputFormatter",
    "SelectedDish",
    "SelectedDishView",
    "ShoppingList",
    "ShoppingListManager",
    "ShoppingPlannerError",
    "SQLiteStore",
    "Store",
    "StoreGroup",
    "StoreWithImage",
    "ValidationError",
]
