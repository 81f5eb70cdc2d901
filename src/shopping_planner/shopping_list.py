"""Shopping list operations.

Each profile owns exactly one shopping list document. Reads never create it;
the first mutation does.
"""

import logging
from uuid import UUID

from .aggregator import aggregate
from .data_store import DataStore, DataStoreProtocol
from .errors import NotFoundError, ValidationError
from .models import (
    AggregatedList,
    Collection,
    Dish,
    Ingredient,
    ManualIngredient,
    MiscItem,
    SelectedDish,
    ShoppingList,
    Store,
    to_uuid,
    validate_model,
)

logger = logging.getLogger(__name__)


def find_shopping_list(data_store: DataStoreProtocol, profile_id: str) -> ShoppingList | None:
    """Get the stored shopping list of a profile, or None if it was never created.

    If a race left more than one document, the first one inserted wins.
    """
    docs = data_store.query(Collection.SHOPPING_LISTS, profile_id)
    if not docs:
        return None
    return ShoppingList(**docs[0])


class ShoppingListManager:
    """Manages the shopping list of a profile."""

    def __init__(
        self,
        data_store: DataStoreProtocol | None = None,
        clear_misc_items: bool = True,
    ):
        """Initialize shopping list manager.

        Args:
            data_store: Document store. Creates a JSON DataStore if not provided.
            clear_misc_items: Whether clear() also removes misc items.
        """
        self.data_store = data_store or DataStore()
        self.clear_misc_items = clear_misc_items

    # --- Reading ---

    def get_list(self, profile_id: str) -> ShoppingList:
        """Get the shopping list, or an unsaved empty one if none exists yet."""
        return find_shopping_list(self.data_store, profile_id) or ShoppingList(
            profile_id=profile_id
        )

    def get_aggregated(self, profile_id: str) -> AggregatedList:
        """Get the merged, store-grouped view of the shopping list."""
        shopping_list = self.get_list(profile_id)
        dishes = [Dish(**doc) for doc in self.data_store.query(Collection.DISHES, profile_id)]
        ingredients = [
            Ingredient(**doc) for doc in self.data_store.query(Collection.INGREDIENTS, profile_id)
        ]
        stores = [Store(**doc) for doc in self.data_store.query(Collection.STORES, profile_id)]

        logger.debug(
            "Aggregating %d selected dishes and %d manual ingredients for profile %s",
            len(shopping_list.selected_dishes),
            len(shopping_list.manual_ingredients),
            profile_id,
        )
        return aggregate(shopping_list, dishes, ingredients, stores)

    # --- Helpers ---

    def _get_or_create(self, profile_id: str) -> ShoppingList:
        existing = find_shopping_list(self.data_store, profile_id)
        if existing:
            return existing

        created = ShoppingList(profile_id=profile_id)
        self.data_store.insert(Collection.SHOPPING_LISTS, created.model_dump())
        logger.info("Created shopping list for profile %s", profile_id)
        # Re-read so a list inserted concurrently is preferred over ours
        return find_shopping_list(self.data_store, profile_id) or created

    def _save(self, shopping_list: ShoppingList, *fields: str) -> ShoppingList:
        self.data_store.patch(
            Collection.SHOPPING_LISTS,
            shopping_list.id,
            shopping_list.model_dump(include=set(fields)),
        )
        return shopping_list

    def _require(self, collection: Collection, profile_id: str, entity_id: UUID) -> None:
        doc = self.data_store.get(collection, entity_id)
        if doc is None or doc.get("profile_id") != profile_id:
            raise NotFoundError(collection.label, entity_id)

    # --- Dishes ---

    def add_dish(self, profile_id: str, dish_id: UUID | str) -> ShoppingList:
        """Select a dish, or cook it one more time if already selected.

        Raises:
            NotFoundError: If the dish doesn't exist
        """
        dish_id = to_uuid(dish_id, "dish")
        self._require(Collection.DISHES, profile_id, dish_id)
        shopping_list = self._get_or_create(profile_id)

        for selected in shopping_list.selected_dishes:
            if selected.dish_id == dish_id:
                selected.count += 1
                break
        else:
            shopping_list.selected_dishes.append(SelectedDish(dish_id=dish_id, count=1))

        logger.info("Added dish %s to list of profile %s", dish_id, profile_id)
        return self._save(shopping_list, "selected_dishes")

    def remove_dish(self, profile_id: str, dish_id: UUID | str) -> ShoppingList:
        """Deselect a dish entirely."""
        dish_id = to_uuid(dish_id, "dish")
        shopping_list = self._get_or_create(profile_id)
        shopping_list.selected_dishes = [
            s for s in shopping_list.selected_dishes if s.dish_id != dish_id
        ]
        return self._save(shopping_list, "selected_dishes")

    def set_dish_count(self, profile_id: str, dish_id: UUID | str, count: int) -> ShoppingList:
        """Set how many times a dish is cooked; zero or less deselects it.

        Raises:
            NotFoundError: If count is positive and the dish doesn't exist
        """
        dish_id = to_uuid(dish_id, "dish")
        if count <= 0:
            return self.remove_dish(profile_id, dish_id)

        self._require(Collection.DISHES, profile_id, dish_id)
        shopping_list = self._get_or_create(profile_id)

        for selected in shopping_list.selected_dishes:
            if selected.dish_id == dish_id:
                selected.count = count
                break
        else:
            shopping_list.selected_dishes.append(SelectedDish(dish_id=dish_id, count=count))

        return self._save(shopping_list, "selected_dishes")

    # --- Exclusions and checks ---

    def exclude_ingredient(self, profile_id: str, ingredient_id: UUID | str) -> ShoppingList:
        """Mark an ingredient as already at home. Idempotent."""
        ingredient_id = to_uuid(ingredient_id, "ingredient")
        self._require(Collection.INGREDIENTS, profile_id, ingredient_id)
        shopping_list = self._get_or_create(profile_id)
        if ingredient_id in shopping_list.excluded_ingredient_ids:
            return shopping_list

        shopping_list.excluded_ingredient_ids.add(ingredient_id)
        return self._save(shopping_list, "excluded_ingredient_ids")

    def include_ingredient(self, profile_id: str, ingredient_id: UUID | str) -> ShoppingList:
        """Undo exclude_ingredient. Idempotent."""
        ingredient_id = to_uuid(ingredient_id, "ingredient")
        shopping_list = self._get_or_create(profile_id)
        if ingredient_id not in shopping_list.excluded_ingredient_ids:
            return shopping_list

        shopping_list.excluded_ingredient_ids.discard(ingredient_id)
        return self._save(shopping_list, "excluded_ingredient_ids")

    def check_item(self, profile_id: str, ingredient_id: UUID | str) -> ShoppingList:
        """Mark an ingredient as bought. Idempotent."""
        ingredient_id = to_uuid(ingredient_id, "ingredient")
        self._require(Collection.INGREDIENTS, profile_id, ingredient_id)
        shopping_list = self._get_or_create(profile_id)
        if ingredient_id in shopping_list.checked_ingredient_ids:
            return shopping_list

        shopping_list.checked_ingredient_ids.add(ingredient_id)
        return self._save(shopping_list, "checked_ingredient_ids")

    def uncheck_item(self, profile_id: str, ingredient_id: UUID | str) -> ShoppingList:
        """Undo check_item. Idempotent."""
        ingredient_id = to_uuid(ingredient_id, "ingredient")
        shopping_list = self._get_or_create(profile_id)
        if ingredient_id not in shopping_list.checked_ingredient_ids:
            return shopping_list

        shopping_list.checked_ingredient_ids.discard(ingredient_id)
        return self._save(shopping_list, "checked_ingredient_ids")

    def toggle_item(self, profile_id: str, ingredient_id: UUID | str) -> ShoppingList:
        """Flip the checked state of an ingredient."""
        ingredient_id = to_uuid(ingredient_id, "ingredient")
        if ingredient_id in self.get_list(profile_id).checked_ingredient_ids:
            return self.uncheck_item(profile_id, ingredient_id)
        return self.check_item(profile_id, ingredient_id)

    # --- Manual ingredients ---

    def add_manual_ingredient(
        self, profile_id: str, ingredient_id: UUID | str, quantity: int = 1
    ) -> ShoppingList:
        """Add extra units of an ingredient on top of what the dishes need.

        Raises:
            ValidationError: If quantity is not positive
            NotFoundError: If the ingredient doesn't exist
        """
        ingredient_id = to_uuid(ingredient_id, "ingredient")
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than zero")
        self._require(Collection.INGREDIENTS, profile_id, ingredient_id)
        shopping_list = self._get_or_create(profile_id)

        for manual in shopping_list.manual_ingredients:
            if manual.ingredient_id == ingredient_id:
                manual.quantity += quantity
                break
        else:
            shopping_list.manual_ingredients.append(
                validate_model(ManualIngredient, ingredient_id=ingredient_id, quantity=quantity)
            )

        return self._save(shopping_list, "manual_ingredients")

    def set_manual_ingredient_quantity(
        self, profile_id: str, ingredient_id: UUID | str, quantity: int
    ) -> ShoppingList:
        """Set the extra units of an ingredient; zero or less removes the entry."""
        ingredient_id = to_uuid(ingredient_id, "ingredient")
        if quantity <= 0:
            return self.remove_manual_ingredient(profile_id, ingredient_id)

        self._require(Collection.INGREDIENTS, profile_id, ingredient_id)
        shopping_list = self._get_or_create(profile_id)

        for manual in shopping_list.manual_ingredients:
            if manual.ingredient_id == ingredient_id:
                manual.quantity = quantity
                break
        else:
            shopping_list.manual_ingredients.append(
                ManualIngredient(ingredient_id=ingredient_id, quantity=quantity)
            )

        return self._save(shopping_list, "manual_ingredients")

    def remove_manual_ingredient(
        self, profile_id: str, ingredient_id: UUID | str
    ) -> ShoppingList:
        """Drop all extra units of an ingredient."""
        ingredient_id = to_uuid(ingredient_id, "ingredient")
        shopping_list = self._get_or_create(profile_id)
        shopping_list.manual_ingredients = [
            m for m in shopping_list.manual_ingredients if m.ingredient_id != ingredient_id
        ]
        return self._save(shopping_list, "manual_ingredients")

    # --- Misc items ---

    def add_misc_item(
        self, profile_id: str, name: str, store_id: UUID | str | None = None
    ) -> str:
        """Add a free-text item to the list.

        Returns:
            ID of the new misc item
        """
        store_uuid = to_uuid(store_id, "store") if store_id is not None else None
        item = validate_model(MiscItem, name=name, store_id=store_uuid)
        if store_uuid is not None:
            self._require(Collection.STORES, profile_id, store_uuid)

        shopping_list = self._get_or_create(profile_id)
        shopping_list.misc_items.append(item)
        self._save(shopping_list, "misc_items")

        logger.info("Added misc item %r (%s)", item.name, item.id)
        return item.id

    def toggle_misc_item(self, profile_id: str, item_id: str) -> ShoppingList:
        """Flip the checked state of a misc item.

        Raises:
            NotFoundError: If no misc item has this ID
        """
        shopping_list = self._get_or_create(profile_id)
        for item in shopping_list.misc_items:
            if item.id == item_id:
                item.checked = not item.checked
                return self._save(shopping_list, "misc_items")

        raise NotFoundError("misc item", item_id)

    def remove_misc_item(self, profile_id: str, item_id: str) -> ShoppingList:
        """Remove a misc item. Unknown IDs are ignored."""
        shopping_list = self._get_or_create(profile_id)
        shopping_list.misc_items = [m for m in shopping_list.misc_items if m.id != item_id]
        return self._save(shopping_list, "misc_items")

    # --- Whole list ---

    def clear(self, profile_id: str) -> ShoppingList:
        """Empty the list: dishes, manual additions, exclusions and checks.

        Misc items are removed too unless the manager was configured otherwise.
        """
        shopping_list = self._get_or_create(profile_id)
        shopping_list.selected_dishes = []
        shopping_list.manual_ingredients = []
        shopping_list.excluded_ingredient_ids = set()
        shopping_list.checked_ingredient_ids = set()
        fields = [
            "selected_dishes",
            "manual_ingredients",
            "excluded_ingredient_ids",
            "checked_ingredient_ids",
        ]
        if self.clear_misc_items:
            shopping_list.misc_items = []
            fields.append("misc_items")

        logger.info("Cleared shopping list of profile %s", profile_id)
        return self._save(shopping_list, *fields)
