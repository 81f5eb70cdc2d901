"""Dish management operations."""

import logging
from collections.abc import Iterable
from typing import Any
from uuid import UUID

from .data_store import DataStore, DataStoreProtocol
from .errors import NotFoundError, ValidationError
from .models import (
    Collection,
    Dish,
    DishItem,
    DishItemWithIngredient,
    DishWithIngredients,
    Ingredient,
    to_uuid,
    validate_model,
)
from .shopping_list import find_shopping_list

logger = logging.getLogger(__name__)

DishItemInput = DishItem | dict[str, Any] | tuple[UUID | str, float]


def merge_items(items: Iterable[DishItemInput]) -> list[DishItem]:
    """Validate dish items and fold repeated ingredients into one item.

    Quantities of repeated ingredients are summed; the first occurrence keeps
    its position.

    Raises:
        ValidationError: If an item is malformed or has a non-positive quantity
    """
    merged: dict[UUID, DishItem] = {}
    for raw in items:
        if isinstance(raw, DishItem):
            item = validate_model(DishItem, **raw.model_dump())
        elif isinstance(raw, dict):
            item = validate_model(DishItem, **raw)
        else:
            try:
                ingredient_id, quantity = raw
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid dish item: {raw!r}") from None
            item = validate_model(DishItem, ingredient_id=ingredient_id, quantity=quantity)

        if item.ingredient_id in merged:
            merged[item.ingredient_id].quantity += item.quantity
        else:
            merged[item.ingredient_id] = item
    return list(merged.values())


class DishManager:
    """Manages the dishes of a profile."""

    def __init__(self, data_store: DataStoreProtocol | None = None):
        """Initialize dish manager.

        Args:
            data_store: Document store. Creates a JSON DataStore if not provided.
        """
        self.data_store = data_store or DataStore()

    def _check_ingredients(self, profile_id: str, items: list[DishItem]) -> None:
        known = {
            UUID(doc["id"]) for doc in self.data_store.query(Collection.INGREDIENTS, profile_id)
        }
        for item in items:
            if item.ingredient_id not in known:
                raise NotFoundError("ingredient", item.ingredient_id)

    def list_dishes(self, profile_id: str) -> list[Dish]:
        """Get all dishes of a profile."""
        return [Dish(**doc) for doc in self.data_store.query(Collection.DISHES, profile_id)]

    def get_dish(self, dish_id: UUID | str) -> Dish:
        """Get a dish by ID.

        Raises:
            NotFoundError: If the dish doesn't exist
        """
        dish_id = to_uuid(dish_id, "dish")
        doc = self.data_store.get(Collection.DISHES, dish_id)
        if doc is None:
            raise NotFoundError("dish", dish_id)
        return Dish(**doc)

    def list_dishes_with_ingredients(self, profile_id: str) -> list[DishWithIngredients]:
        """Get all dishes with each item's ingredient record attached.

        Items whose ingredient no longer exists keep ``ingredient=None``.
        """
        ingredients = {
            ingredient.id: ingredient
            for ingredient in (
                Ingredient(**doc)
                for doc in self.data_store.query(Collection.INGREDIENTS, profile_id)
            )
        }

        return [
            DishWithIngredients(
                id=dish.id,
                profile_id=dish.profile_id,
                name=dish.name,
                items=[
                    DishItemWithIngredient(
                        **item.model_dump(), ingredient=ingredients.get(item.ingredient_id)
                    )
                    for item in dish.items
                ],
            )
            for dish in self.list_dishes(profile_id)
        ]

    def create_dish(
        self, profile_id: str, name: str, items: Iterable[DishItemInput] = ()
    ) -> UUID:
        """Create a dish.

        Dish names need not be unique.

        Args:
            profile_id: Owning profile
            name: Dish name
            items: Ingredient requirements

        Returns:
            ID of the new dish

        Raises:
            ValidationError: If the name or an item is invalid
            NotFoundError: If an item references an unknown ingredient
        """
        dish_items = merge_items(items)
        dish = validate_model(Dish, profile_id=profile_id, name=name, items=dish_items)
        self._check_ingredients(profile_id, dish.items)

        dish_id = self.data_store.insert(Collection.DISHES, dish.model_dump())
        logger.info("Created dish %r (%s) with %d items", dish.name, dish_id, len(dish.items))
        return dish_id

    def update_dish(
        self, dish_id: UUID | str, name: str, items: Iterable[DishItemInput]
    ) -> Dish:
        """Replace the name and items of a dish.

        Raises:
            NotFoundError: If the dish or a referenced ingredient doesn't exist
            ValidationError: If the name or an item is invalid
        """
        current = self.get_dish(dish_id)
        updated = validate_model(
            Dish,
            id=current.id,
            profile_id=current.profile_id,
            name=name,
            items=merge_items(items),
        )
        self._check_ingredients(current.profile_id, updated.items)

        self.data_store.patch(
            Collection.DISHES,
            current.id,
            {"name": updated.name, "items": [item.model_dump() for item in updated.items]},
        )
        logger.info("Updated dish %s", current.id)
        return updated

    def remove_dish(self, dish_id: UUID | str) -> Dish:
        """Delete a dish and deselect it from the shopping list.

        Returns:
            The deleted dish

        Raises:
            NotFoundError: If the dish doesn't exist
        """
        dish = self.get_dish(dish_id)

        shopping_list = find_shopping_list(self.data_store, dish.profile_id)
        if shopping_list and shopping_list.dish_count(dish.id):
            selected = [s for s in shopping_list.selected_dishes if s.dish_id != dish.id]
            self.data_store.patch(
                Collection.SHOPPING_LISTS,
                shopping_list.id,
                {"selected_dishes": [s.model_dump() for s in selected]},
            )

        self.data_store.delete(Collection.DISHES, dish.id)
        logger.info("Removed dish %r (%s)", dish.name, dish.id)
        return dish
