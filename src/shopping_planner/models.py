"""Core data models for Shopping Planner."""

import re
from enum import Enum
from typing import Any, TypeVar
from uuid import UUID, uuid4

import pydantic
from pydantic import BaseModel, Field, field_validator

from .errors import ValidationError

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

ModelT = TypeVar("ModelT", bound=BaseModel)


class Collection(str, Enum):
    """Document collections held by the entity store."""

    STORES = "stores"
    INGREDIENTS = "ingredients"
    DISHES = "dishes"
    SHOPPING_LISTS = "shopping_lists"

    @property
    def label(self) -> str:
        """Singular, human readable name of a document in this collection."""
        return {
            "stores": "store",
            "ingredients": "ingredient",
            "dishes": "dish",
            "shopping_lists": "shopping list",
        }[self.value]


def _require_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Name must not be empty")
    return value


def to_uuid(value: UUID | str, kind: str = "entity") -> UUID:
    """Parse an entity ID given as a UUID or its string form."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {kind} ID: {value!r}") from None


def validate_model(model_cls: type[ModelT], **data: Any) -> ModelT:
    """Build a model, reporting bad input as a ValidationError."""
    try:
        return model_cls(**data)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"Invalid {field}: {first['msg']}") from e


def new_profile_id() -> str:
    """Generate a fresh profile partition key."""
    return uuid4().hex


class Store(BaseModel):
    """A shop where ingredients are bought."""

    id: UUID = Field(default_factory=uuid4)
    profile_id: str
    name: str
    sort_order: int = 0
    color: str | None = None  # Hex color code
    image_id: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_name(v)

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        if v is not None and not _HEX_COLOR.match(v):
            raise ValueError("Color must be a hex code like #ff8800")
        if v is not None and len(v) == 4:
            v = "#" + "".join(ch * 2 for ch in v[1:])
        return v.lower() if v else v


class Ingredient(BaseModel):
    """A catalog ingredient with its default store."""

    id: UUID = Field(default_factory=uuid4)
    profile_id: str
    name: str
    store_id: UUID | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_name(v)


class DishItem(BaseModel):
    """One ingredient requirement of a dish."""

    ingredient_id: UUID
    quantity: float = 1

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Quantity must be greater than zero")
        return v


class Dish(BaseModel):
    """A named, reusable list of ingredients."""

    id: UUID = Field(default_factory=uuid4)
    profile_id: str
    name: str
    items: list[DishItem] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_name(v)


class SelectedDish(BaseModel):
    """A dish chosen for cooking and how many times."""

    dish_id: UUID
    count: int = Field(default=1, gt=0)


class ManualIngredient(BaseModel):
    """An ingredient added to the list directly, not through a dish."""

    ingredient_id: UUID
    quantity: int = Field(default=1, gt=0)


class MiscItem(BaseModel):
    """Free-text list entry without a catalog ingredient."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    store_id: UUID | None = None
    checked: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_name(v)


class ShoppingList(BaseModel):
    """The single active shopping list of a profile."""

    id: UUID = Field(default_factory=uuid4)
    profile_id: str
    selected_dishes: list[SelectedDish] = Field(default_factory=list)
    manual_ingredients: list[ManualIngredient] = Field(default_factory=list)
    excluded_ingredient_ids: set[UUID] = Field(default_factory=set)
    checked_ingredient_ids: set[UUID] = Field(default_factory=set)
    misc_items: list[MiscItem] = Field(default_factory=list)

    def dish_count(self, dish_id: UUID) -> int:
        """Get how many times a dish is selected (0 if not selected)."""
        for selected in self.selected_dishes:
            if selected.dish_id == dish_id:
                return selected.count
        return 0

    def manual_quantity(self, ingredient_id: UUID) -> int:
        """Get the manually added quantity of an ingredient (0 if none)."""
        for manual in self.manual_ingredients:
            if manual.ingredient_id == ingredient_id:
                return manual.quantity
        return 0


# --- Read models ---


class StoreWithImage(Store):
    """Store joined with the resolved URL of its image."""

    image_url: str | None = None


class DishItemWithIngredient(DishItem):
    """Dish item joined with its ingredient; None when the reference dangles."""

    ingredient: Ingredient | None = None

    @property
    def display_name(self) -> str:
        return self.ingredient.name if self.ingredient else "Unknown ingredient"


class DishWithIngredients(BaseModel):
    """Dish whose items carry the joined ingredient records."""

    id: UUID
    profile_id: str
    name: str
    items: list[DishItemWithIngredient] = Field(default_factory=list)


class SelectedDishView(BaseModel):
    """A selected dish resolved to its record (None if it was deleted)."""

    dish: Dish | None = None
    count: int


class AggregatedItem(BaseModel):
    """Merged requirement of one ingredient across dishes and manual additions."""

    ingredient_id: UUID
    ingredient: Ingredient
    total_count: float = 0
    manual_quantity: int = 0
    quantities: list[float] = Field(default_factory=list)
    from_dishes: list[str] = Field(default_factory=list)
    store: Store | None = None
    is_excluded: bool = False
    is_checked: bool = False

    @property
    def from_dish_total(self) -> float:
        """Portion of the total that comes from dishes."""
        return self.total_count - self.manual_quantity

    @property
    def is_dimmed(self) -> bool:
        return self.is_excluded or self.is_checked


class StoreGroup(BaseModel):
    """Aggregated items bought at one store (store is None for unassigned)."""

    store: Store | None = None
    items: list[AggregatedItem] = Field(default_factory=list)


class EnrichedMiscItem(MiscItem):
    """Misc item with its store record resolved."""

    store: Store | None = None


class AggregatedList(BaseModel):
    """Derived, read-only view of a profile's shopping list."""

    selected_dishes: list[SelectedDishView] = Field(default_factory=list)
    items: list[AggregatedItem] = Field(default_factory=list)
    by_store: list[StoreGroup] = Field(default_factory=list)
    misc_items: list[EnrichedMiscItem] = Field(default_factory=list)
    stores: list[Store] = Field(default_factory=list)

    @property
    def total_items(self) -> int:
        """Items still to consider: non-excluded ingredients plus misc items."""
        active = [item for item in self.items if not item.is_excluded]
        return len(active) + len(self.misc_items)

    @property
    def checked_items(self) -> int:
        active = [item for item in self.items if not item.is_excluded]
        return sum(1 for item in active if item.is_checked) + sum(
            1 for item in self.misc_items if item.checked
        )

    @property
    def is_empty(self) -> bool:
        return not self.selected_dishes and not self.misc_items and not self.items
