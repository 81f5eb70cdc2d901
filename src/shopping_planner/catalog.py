"""Store and ingredient catalog management."""

import logging
from uuid import UUID

from .blob_storage import BlobStorage
from .data_store import DataStore, DataStoreProtocol
from .errors import DuplicateNameError, NotFoundError
from .models import (
    Collection,
    Dish,
    Ingredient,
    Store,
    StoreWithImage,
    to_uuid,
    validate_model,
)
from .name_normalizer import normalize_name
from .shopping_list import find_shopping_list

logger = logging.getLogger(__name__)


class CatalogManager:
    """Manages the stores and ingredients of a profile."""

    def __init__(
        self,
        data_store: DataStoreProtocol | None = None,
        blob_storage: BlobStorage | None = None,
    ):
        """Initialize catalog manager.

        Args:
            data_store: Document store. Creates a JSON DataStore if not provided.
            blob_storage: Image storage. Defaults to the store's images directory.
        """
        self.data_store = data_store or DataStore()
        self.blob_storage = blob_storage or BlobStorage(self.data_store.data_dir / "images")

    # --- Stores ---

    def _stores(self, profile_id: str) -> list[Store]:
        return [Store(**doc) for doc in self.data_store.query(Collection.STORES, profile_id)]

    def list_stores(self, profile_id: str) -> list[StoreWithImage]:
        """Get all stores of a profile, ordered for display.

        Stores sharing a sort order keep their creation order.
        """
        stores = sorted(self._stores(profile_id), key=lambda s: s.sort_order)
        return [
            StoreWithImage(
                **store.model_dump(),
                image_url=self.blob_storage.get_url(store.image_id) if store.image_id else None,
            )
            for store in stores
        ]

    def get_store(self, store_id: UUID | str) -> Store:
        """Get a store by ID.

        Raises:
            NotFoundError: If the store doesn't exist
        """
        store_id = to_uuid(store_id, "store")
        doc = self.data_store.get(Collection.STORES, store_id)
        if doc is None:
            raise NotFoundError("store", store_id)
        return Store(**doc)

    def create_store(
        self,
        profile_id: str,
        name: str,
        color: str | None = None,
        image_id: str | None = None,
    ) -> UUID:
        """Create a store at the end of the display order.

        Args:
            profile_id: Owning profile
            name: Store name
            color: Optional hex color
            image_id: Optional blob ID of an uploaded image

        Returns:
            ID of the new store
        """
        max_order = max((s.sort_order for s in self._stores(profile_id)), default=-1)
        store = validate_model(
            Store,
            profile_id=profile_id,
            name=name,
            sort_order=max_order + 1,
            color=color,
            image_id=image_id,
        )
        store_id = self.data_store.insert(Collection.STORES, store.model_dump())
        logger.info("Created store %r (%s) at position %d", store.name, store_id, store.sort_order)
        return store_id

    def update_store(
        self,
        store_id: UUID | str,
        name: str | None = None,
        color: str | None = None,
    ) -> Store:
        """Update the name and/or color of a store.

        Fields left as None are not changed.

        Raises:
            NotFoundError: If the store doesn't exist
        """
        store = self.get_store(store_id)
        updated = validate_model(
            Store,
            **{
                **store.model_dump(),
                "name": name if name is not None else store.name,
                "color": color if color is not None else store.color,
            },
        )
        self.data_store.patch(
            Collection.STORES, store.id, {"name": updated.name, "color": updated.color}
        )
        logger.info("Updated store %s", store.id)
        return updated

    def update_store_color(self, store_id: UUID | str, color: str | None) -> Store:
        """Set or clear (None) the color of a store."""
        store = self.get_store(store_id)
        updated = validate_model(Store, **{**store.model_dump(), "color": color})
        self.data_store.patch(Collection.STORES, store.id, {"color": color})
        return updated

    def update_store_image(self, store_id: UUID | str, image_id: str | None) -> Store:
        """Attach a new image to a store, releasing the previous one."""
        store = self.get_store(store_id)
        if store.image_id and store.image_id != image_id:
            self.blob_storage.delete(store.image_id)
        self.data_store.patch(Collection.STORES, store.id, {"image_id": image_id})
        store.image_id = image_id
        return store

    def remove_store_image(self, store_id: UUID | str) -> Store:
        """Release and unset the image of a store."""
        return self.update_store_image(store_id, None)

    def generate_upload_url(self) -> str:
        """Get a URL a new store image can be written to."""
        return self.blob_storage.generate_upload_url()

    def remove_store(self, store_id: UUID | str) -> Store:
        """Delete a store.

        Ingredients and misc list items that referenced it lose their store;
        they are not deleted.

        Returns:
            The deleted store

        Raises:
            NotFoundError: If the store doesn't exist
        """
        store = self.get_store(store_id)

        if store.image_id:
            self.blob_storage.delete(store.image_id)

        for ingredient in self._ingredients(store.profile_id):
            if ingredient.store_id == store.id:
                self.data_store.patch(Collection.INGREDIENTS, ingredient.id, {"store_id": None})
                logger.debug("Cleared store from ingredient %s", ingredient.id)

        shopping_list = find_shopping_list(self.data_store, store.profile_id)
        if shopping_list and any(m.store_id == store.id for m in shopping_list.misc_items):
            misc_items = [
                m.model_copy(update={"store_id": None}) if m.store_id == store.id else m
                for m in shopping_list.misc_items
            ]
            self.data_store.patch(
                Collection.SHOPPING_LISTS,
                shopping_list.id,
                {"misc_items": [m.model_dump() for m in misc_items]},
            )

        self.data_store.delete(Collection.STORES, store.id)
        logger.info("Removed store %r (%s)", store.name, store.id)
        return store

    def reorder_stores(self, profile_id: str, ordered_ids: list[UUID | str]) -> list[Store]:
        """Rewrite sort orders so each store's order is its index in ordered_ids.

        Stores left out of ordered_ids keep their old sort order, which may then
        collide with a reordered one.

        Raises:
            NotFoundError: If an ID is not a store of the profile (nothing is written)
        """
        ids = [to_uuid(store_id, "store") for store_id in ordered_ids]
        known = {store.id for store in self._stores(profile_id)}
        for store_id in ids:
            if store_id not in known:
                raise NotFoundError("store", store_id)

        for index, store_id in enumerate(ids):
            self.data_store.patch(Collection.STORES, store_id, {"sort_order": index})

        logger.info("Reordered %d stores for profile %s", len(ids), profile_id)
        return self.list_stores(profile_id)

    # --- Ingredients ---

    def _ingredients(self, profile_id: str) -> list[Ingredient]:
        return [
            Ingredient(**doc) for doc in self.data_store.query(Collection.INGREDIENTS, profile_id)
        ]

    def _check_duplicate(
        self, profile_id: str, name: str, exclude_id: UUID | None = None
    ) -> None:
        key = normalize_name(name)
        for existing in self._ingredients(profile_id):
            if existing.id != exclude_id and normalize_name(existing.name) == key:
                logger.warning("Rejected duplicate ingredient name %r", name)
                raise DuplicateNameError(existing)

    def _check_store(self, profile_id: str, store_id: UUID | None) -> None:
        if store_id is None:
            return
        store = self.get_store(store_id)
        if store.profile_id != profile_id:
            raise NotFoundError("store", store_id)

    def list_ingredients(self, profile_id: str) -> list[Ingredient]:
        """Get all ingredients of a profile."""
        return self._ingredients(profile_id)

    def search_ingredients(self, profile_id: str, query: str) -> list[Ingredient]:
        """Find ingredients whose name contains query, ignoring case.

        An empty query returns every ingredient. Results are not sorted.
        """
        ingredients = self._ingredients(profile_id)
        if not query:
            return ingredients
        lower = query.lower()
        return [i for i in ingredients if lower in i.name.lower()]

    def get_ingredient(self, ingredient_id: UUID | str) -> Ingredient:
        """Get an ingredient by ID.

        Raises:
            NotFoundError: If the ingredient doesn't exist
        """
        ingredient_id = to_uuid(ingredient_id, "ingredient")
        doc = self.data_store.get(Collection.INGREDIENTS, ingredient_id)
        if doc is None:
            raise NotFoundError("ingredient", ingredient_id)
        return Ingredient(**doc)

    def find_ingredient_by_name(self, profile_id: str, name: str) -> Ingredient:
        """Get an ingredient by name, ignoring case and surrounding whitespace.

        Raises:
            NotFoundError: If no ingredient has that name
        """
        key = normalize_name(name)
        for ingredient in self._ingredients(profile_id):
            if normalize_name(ingredient.name) == key:
                return ingredient
        raise NotFoundError("ingredient", name)

    def _owned_ingredient(self, profile_id: str, ingredient_id: UUID | str) -> Ingredient:
        ingredient = self.get_ingredient(ingredient_id)
        if ingredient.profile_id != profile_id:
            raise NotFoundError("ingredient", ingredient.id)
        return ingredient

    def create_ingredient(
        self, profile_id: str, name: str, store_id: UUID | str | None = None
    ) -> UUID:
        """Add an ingredient to the catalog.

        Args:
            profile_id: Owning profile
            name: Ingredient name, stored trimmed
            store_id: Default store to buy it at

        Returns:
            ID of the new ingredient

        Raises:
            DuplicateNameError: If the profile already has an ingredient with this name
        """
        store_uuid = to_uuid(store_id, "store") if store_id is not None else None
        ingredient = validate_model(
            Ingredient, profile_id=profile_id, name=name, store_id=store_uuid
        )
        self._check_duplicate(profile_id, ingredient.name)
        self._check_store(profile_id, store_uuid)

        ingredient_id = self.data_store.insert(Collection.INGREDIENTS, ingredient.model_dump())
        logger.info("Created ingredient %r (%s)", ingredient.name, ingredient_id)
        return ingredient_id

    def update_ingredient(
        self,
        profile_id: str,
        ingredient_id: UUID | str,
        name: str,
        store_id: UUID | str | None = None,
    ) -> Ingredient:
        """Rename an ingredient and set its store (None clears it).

        Raises:
            NotFoundError: If the profile has no such ingredient
            DuplicateNameError: If another ingredient already has this name
        """
        current = self._owned_ingredient(profile_id, ingredient_id)
        store_uuid = to_uuid(store_id, "store") if store_id is not None else None
        updated = validate_model(
            Ingredient,
            id=current.id,
            profile_id=current.profile_id,
            name=name,
            store_id=store_uuid,
        )
        self._check_duplicate(profile_id, updated.name, exclude_id=current.id)
        self._check_store(profile_id, store_uuid)

        self.data_store.patch(
            Collection.INGREDIENTS,
            current.id,
            {"name": updated.name, "store_id": updated.store_id},
        )
        logger.info("Updated ingredient %s", current.id)
        return updated

    def remove_ingredient(self, profile_id: str, ingredient_id: UUID | str) -> Ingredient:
        """Delete an ingredient and every reference to it.

        The ingredient is stripped from all dishes of the profile and from the
        shopping list (manual additions, exclusions and checks) before the
        record itself is deleted.

        Returns:
            The deleted ingredient

        Raises:
            NotFoundError: If the profile has no such ingredient
        """
        ingredient = self._owned_ingredient(profile_id, ingredient_id)

        for doc in self.data_store.query(Collection.DISHES, profile_id):
            dish = Dish(**doc)
            filtered = [item for item in dish.items if item.ingredient_id != ingredient.id]
            if len(filtered) != len(dish.items):
                self.data_store.patch(
                    Collection.DISHES,
                    dish.id,
                    {"items": [item.model_dump() for item in filtered]},
                )
                logger.debug("Stripped ingredient %s from dish %s", ingredient.id, dish.id)

        shopping_list = find_shopping_list(self.data_store, profile_id)
        if shopping_list:
            manual = [
                m for m in shopping_list.manual_ingredients if m.ingredient_id != ingredient.id
            ]
            if (
                len(manual) != len(shopping_list.manual_ingredients)
                or ingredient.id in shopping_list.excluded_ingredient_ids
                or ingredient.id in shopping_list.checked_ingredient_ids
            ):
                self.data_store.patch(
                    Collection.SHOPPING_LISTS,
                    shopping_list.id,
                    {
                        "manual_ingredients": [m.model_dump() for m in manual],
                        "excluded_ingredient_ids": shopping_list.excluded_ingredient_ids
                        - {ingredient.id},
                        "checked_ingredient_ids": shopping_list.checked_ingredient_ids
                        - {ingredient.id},
                    },
                )

        self.data_store.delete(Collection.INGREDIENTS, ingredient.id)
        logger.info("Removed ingredient %r (%s)", ingredient.name, ingredient.id)
        return ingredient
