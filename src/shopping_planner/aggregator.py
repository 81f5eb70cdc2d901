"""Shopping list aggregation.

Turns a profile's shopping list document plus its catalog into the merged,
store-grouped view that is shown while shopping.
"""

from uuid import UUID

from .models import (
    AggregatedItem,
    AggregatedList,
    Dish,
    EnrichedMiscItem,
    Ingredient,
    SelectedDishView,
    ShoppingList,
    Store,
    StoreGroup,
)
from .name_normalizer import name_sort_key

# Items without a store sort after every real store
UNASSIGNED_SORT_ORDER = float("inf")


def _sort_key(item: AggregatedItem) -> tuple[float, tuple[str, str]]:
    order = item.store.sort_order if item.store else UNASSIGNED_SORT_ORDER
    return (order, name_sort_key(item.ingredient.name))


def aggregate(
    shopping_list: ShoppingList,
    dishes: list[Dish],
    ingredients: list[Ingredient],
    stores: list[Store],
) -> AggregatedList:
    """Merge selected dishes and manual additions into one shopping list.

    Dangling references (deleted dishes, ingredients or stores) are skipped
    rather than reported.

    Args:
        shopping_list: The profile's shopping list document
        dishes: All dishes of the profile
        ingredients: All ingredients of the profile
        stores: All stores of the profile

    Returns:
        AggregatedList with items sorted by store order then name
    """
    dish_map = {dish.id: dish for dish in dishes}
    ingredient_map = {ingredient.id: ingredient for ingredient in ingredients}
    store_map = {store.id: store for store in stores}

    buckets: dict[UUID, AggregatedItem] = {}

    def bucket_for(ingredient: Ingredient) -> AggregatedItem:
        if ingredient.id not in buckets:
            buckets[ingredient.id] = AggregatedItem(
                ingredient_id=ingredient.id, ingredient=ingredient
            )
        return buckets[ingredient.id]

    for selected in shopping_list.selected_dishes:
        dish = dish_map.get(selected.dish_id)
        if dish is None:
            continue

        for dish_item in dish.items:
            ingredient = ingredient_map.get(dish_item.ingredient_id)
            if ingredient is None:
                continue

            bucket = bucket_for(ingredient)
            bucket.total_count += dish_item.quantity * selected.count
            bucket.quantities.extend([dish_item.quantity] * selected.count)
            if dish.name not in bucket.from_dishes:
                bucket.from_dishes.append(dish.name)

    for manual in shopping_list.manual_ingredients:
        ingredient = ingredient_map.get(manual.ingredient_id)
        if ingredient is None:
            continue

        bucket = bucket_for(ingredient)
        bucket.total_count += manual.quantity
        bucket.manual_quantity += manual.quantity

    items = list(buckets.values())
    for item in items:
        store_id = item.ingredient.store_id
        item.store = store_map.get(store_id) if store_id else None
        item.is_excluded = item.ingredient_id in shopping_list.excluded_ingredient_ids
        item.is_checked = item.ingredient_id in shopping_list.checked_ingredient_ids

    items.sort(key=_sort_key)

    groups: dict[UUID | None, StoreGroup] = {}
    for item in items:
        key = item.store.id if item.store else None
        if key not in groups:
            groups[key] = StoreGroup(store=item.store)
        groups[key].items.append(item)

    misc_items = [
        EnrichedMiscItem(
            **misc.model_dump(),
            store=store_map.get(misc.store_id) if misc.store_id else None,
        )
        for misc in shopping_list.misc_items
    ]

    return AggregatedList(
        selected_dishes=[
            SelectedDishView(dish=dish_map.get(selected.dish_id), count=selected.count)
            for selected in shopping_list.selected_dishes
        ],
        items=items,
        by_store=list(groups.values()),
        misc_items=misc_items,
        stores=sorted(stores, key=lambda s: s.sort_order),
    )
