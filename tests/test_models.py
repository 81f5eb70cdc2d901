"""Tests for data models."""

from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError as PydanticValidationError

from shopping_planner.errors import ValidationError
from shopping_planner.models import (
    AggregatedItem,
    AggregatedList,
    Collection,
    DishItem,
    DishItemWithIngredient,
    EnrichedMiscItem,
    Ingredient,
    ManualIngredient,
    MiscItem,
    SelectedDish,
    ShoppingList,
    Store,
    new_profile_id,
    to_uuid,
    validate_model,
)


class TestStore:
    """Tests for Store model."""

    def test_defaults(self):
        """Store gets an ID and no color or image."""
        store = Store(profile_id="p", name="Market")
        assert isinstance(store.id, UUID)
        assert store.sort_order == 0
        assert store.color is None
        assert store.image_id is None

    def test_name_is_trimmed(self):
        """Store names are stored trimmed."""
        assert Store(profile_id="p", name="  Market ").name == "Market"

    def test_blank_name_rejected(self):
        """Blank names are invalid."""
        with pytest.raises(PydanticValidationError):
            Store(profile_id="p", name="   ")

    def test_short_hex_color_expanded(self):
        """Three digit colors are expanded and lowercased."""
        assert Store(profile_id="p", name="M", color="#F80").color == "#ff8800"

    def test_invalid_color_rejected(self):
        """Colors must be hex codes."""
        with pytest.raises(PydanticValidationError):
            Store(profile_id="p", name="M", color="orange")


class TestDishItem:
    """Tests for DishItem model."""

    def test_default_quantity(self):
        """Quantity defaults to one."""
        assert DishItem(ingredient_id=uuid4()).quantity == 1

    @pytest.mark.parametrize("quantity", [0, -1, -0.5])
    def test_non_positive_quantity_rejected(self, quantity):
        """Quantities must be positive."""
        with pytest.raises(PydanticValidationError):
            DishItem(ingredient_id=uuid4(), quantity=quantity)

    def test_display_name_unknown(self):
        """Dangling ingredient shows as unknown."""
        item = DishItemWithIngredient(ingredient_id=uuid4(), quantity=1)
        assert item.display_name == "Unknown ingredient"


class TestShoppingList:
    """Tests for ShoppingList model."""

    def test_empty_list(self):
        """New list has no entries."""
        shopping_list = ShoppingList(profile_id="p")
        assert shopping_list.selected_dishes == []
        assert shopping_list.manual_ingredients == []
        assert shopping_list.excluded_ingredient_ids == set()
        assert shopping_list.checked_ingredient_ids == set()
        assert shopping_list.misc_items == []

    def test_ids_deduplicated(self):
        """Excluded and checked IDs behave as sets."""
        ingredient_id = uuid4()
        shopping_list = ShoppingList(
            profile_id="p",
            excluded_ingredient_ids=[str(ingredient_id), str(ingredient_id)],
        )
        assert shopping_list.excluded_ingredient_ids == {ingredient_id}

    def test_selected_count_must_be_positive(self):
        """Selected dishes can't have a zero count."""
        with pytest.raises(PydanticValidationError):
            SelectedDish(dish_id=uuid4(), count=0)

    def test_manual_quantity_must_be_positive(self):
        """Manual ingredients can't have a zero quantity."""
        with pytest.raises(PydanticValidationError):
            ManualIngredient(ingredient_id=uuid4(), quantity=0)

    def test_dish_count_and_manual_quantity(self):
        """Lookup helpers return 0 when absent."""
        dish_id, ingredient_id = uuid4(), uuid4()
        shopping_list = ShoppingList(
            profile_id="p",
            selected_dishes=[SelectedDish(dish_id=dish_id, count=3)],
            manual_ingredients=[ManualIngredient(ingredient_id=ingredient_id, quantity=2)],
        )
        assert shopping_list.dish_count(dish_id) == 3
        assert shopping_list.dish_count(uuid4()) == 0
        assert shopping_list.manual_quantity(ingredient_id) == 2
        assert shopping_list.manual_quantity(uuid4()) == 0

    def test_misc_item_ids_unique(self):
        """Misc items get distinct string IDs."""
        first, second = MiscItem(name="Foil"), MiscItem(name="Foil")
        assert isinstance(first.id, str)
        assert first.id != second.id
        assert first.checked is False


class TestAggregatedList:
    """Tests for derived list properties."""

    def _item(self, excluded=False, checked=False):
        ingredient = Ingredient(profile_id="p", name="Milk")
        return AggregatedItem(
            ingredient_id=ingredient.id,
            ingredient=ingredient,
            total_count=3,
            manual_quantity=1,
            is_excluded=excluded,
            is_checked=checked,
        )

    def test_progress_ignores_excluded_items(self):
        """Excluded items don't count towards progress."""
        aggregated = AggregatedList(
            items=[self._item(), self._item(checked=True), self._item(excluded=True, checked=True)],
            misc_items=[EnrichedMiscItem(name="Foil", checked=True), EnrichedMiscItem(name="Soap")],
        )
        assert aggregated.total_items == 4
        assert aggregated.checked_items == 2

    def test_item_helpers(self):
        """Dish portion and dimmed state are derived."""
        item = self._item(checked=True)
        assert item.from_dish_total == 2
        assert item.is_dimmed is True
        assert self._item().is_dimmed is False

    def test_is_empty(self):
        """A list without dishes, items and misc items is empty."""
        assert AggregatedList().is_empty is True
        assert AggregatedList(items=[self._item()]).is_empty is False


class TestHelpers:
    """Tests for model helper functions."""

    def test_to_uuid_accepts_string(self):
        """String IDs are parsed."""
        value = uuid4()
        assert to_uuid(str(value)) == value
        assert to_uuid(value) is value

    def test_to_uuid_rejects_garbage(self):
        """Malformed IDs raise ValidationError."""
        with pytest.raises(ValidationError, match="Invalid dish ID"):
            to_uuid("not-an-id", "dish")

    def test_validate_model_wraps_errors(self):
        """Pydantic errors become ValidationError."""
        with pytest.raises(ValidationError, match="name"):
            validate_model(Store, profile_id="p", name="")

    def test_new_profile_id_unique(self):
        """Profile IDs are fresh opaque strings."""
        assert new_profile_id() != new_profile_id()

    def test_collection_labels(self):
        """Collections have singular labels for messages."""
        assert Collection.DISHES.label == "dish"
        assert Collection("shopping_lists").label == "shopping list"
