"""CLI entry point for Shopping Planner."""

from pathlib import Path
from typing import Annotated, Any
from uuid import UUID

import typer

from .catalog import CatalogManager
from .config import ConfigManager
from .data_store import BackendType, DataStoreProtocol, create_data_store
from .dish_manager import DishManager
from .errors import NotFoundError, ShoppingPlannerError, ValidationError
from .logging_utils import configure_logging
from .models import AggregatedList, Dish, DishWithIngredients, Ingredient, Store, new_profile_id
from .name_normalizer import normalize_name
from .output_formatter import OutputFormatter, format_quantity
from .shopping_list import ShoppingListManager

app = typer.Typer(
    name="shop",
    help="Plan dishes and build a store-by-store shopping list",
    no_args_is_help=True,
)

# Global state for formatter and config (set by callback)
formatter: OutputFormatter = OutputFormatter()
config: ConfigManager | None = None
data_store: DataStoreProtocol | None = None
profile_id: str = "default"
catalog_manager: CatalogManager | None = None
dish_manager: DishManager | None = None
shopping_list_manager: ShoppingListManager | None = None


def get_config() -> ConfigManager:
    """Get or create ConfigManager instance."""
    global config
    if config is None:
        config = ConfigManager()
    return config


def get_data_store() -> DataStoreProtocol:
    """Get or create the document store using config values."""
    global data_store
    if data_store is None:
        cfg = get_config()
        backend = BackendType(cfg.data.backend)
        data_store = create_data_store(backend=backend, data_dir=cfg.data.storage_dir)
    return data_store


def get_catalog_manager() -> CatalogManager:
    """Get or create CatalogManager instance."""
    global catalog_manager
    if catalog_manager is None:
        catalog_manager = CatalogManager(get_data_store())
    return catalog_manager


def get_dish_manager() -> DishManager:
    """Get or create DishManager instance."""
    global dish_manager
    if dish_manager is None:
        dish_manager = DishManager(get_data_store())
    return dish_manager


def get_shopping_list_manager() -> ShoppingListManager:
    """Get or create ShoppingListManager instance."""
    global shopping_list_manager
    if shopping_list_manager is None:
        shopping_list_manager = ShoppingListManager(
            get_data_store(), clear_misc_items=get_config().defaults.clear_misc_items
        )
    return shopping_list_manager


@app.callback()
def main(
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON for programmatic use")
    ] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path")] = None,
    profile: Annotated[
        str | None, typer.Option("--profile", "-P", help="Profile whose data to use")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output")] = False,
) -> None:
    """Shopping Planner CLI - Turn the dishes you cook into one shopping list."""
    global formatter, config, data_store, profile_id
    global catalog_manager, dish_manager, shopping_list_manager

    formatter = OutputFormatter(json_mode=json_output)

    # Load config early
    config = ConfigManager()
    configure_logging("DEBUG" if verbose else config.logging.level, config.logging.format)

    # CLI options override config, which overrides defaults
    effective_data_dir = data_dir if data_dir else config.data.storage_dir
    backend = BackendType(config.data.backend)
    profile_id = profile or config.defaults.profile

    data_store = create_data_store(backend=backend, data_dir=effective_data_dir)
    catalog_manager = CatalogManager(data_store)
    dish_manager = DishManager(data_store)
    shopping_list_manager = ShoppingListManager(
        data_store, clear_misc_items=config.defaults.clear_misc_items
    )


def _fail(error: Exception) -> typer.Exit:
    """Report an error and build the exit to raise."""
    if isinstance(error, ShoppingPlannerError):
        formatter.error(str(error), error_code=error.error_code)
    else:
        formatter.error(str(error))
    return typer.Exit(code=1)


# --- Reference resolution ---


def _as_uuid(ref: str) -> UUID | None:
    try:
        return UUID(ref)
    except ValueError:
        return None


def resolve_store(ref: str) -> Store:
    """Find a store of the current profile by ID or name."""
    stores = get_catalog_manager().list_stores(profile_id)
    ref_id = _as_uuid(ref)
    for store in stores:
        if store.id == ref_id or normalize_name(store.name) == normalize_name(ref):
            return store
    raise NotFoundError("store", ref)


def resolve_ingredient(ref: str) -> Ingredient:
    """Find an ingredient of the current profile by ID or name."""
    ref_id = _as_uuid(ref)
    catalog = get_catalog_manager()
    if ref_id is not None:
        return catalog.get_ingredient(ref_id)
    return catalog.find_ingredient_by_name(profile_id, ref)


def resolve_dish(ref: str) -> Dish:
    """Find a dish of the current profile by ID or name."""
    ref_id = _as_uuid(ref)
    manager = get_dish_manager()
    if ref_id is not None:
        return manager.get_dish(ref_id)
    for dish in manager.list_dishes(profile_id):
        if normalize_name(dish.name) == normalize_name(ref):
            return dish
    raise NotFoundError("dish", ref)


def parse_dish_item(raw: str) -> tuple[UUID, float]:
    """Parse an ``INGREDIENT[:QTY]`` argument into an ingredient ID and quantity."""
    name, sep, qty = raw.rpartition(":")
    if not sep:
        name, qty = raw, "1"
    try:
        quantity = float(qty)
    except ValueError:
        raise ValidationError(f"Invalid quantity in {raw!r}") from None
    return resolve_ingredient(name).id, quantity


def _aggregated_payload(aggregated: AggregatedList) -> dict[str, Any]:
    payload = aggregated.model_dump(mode="json")
    from_dishes = {str(item.ingredient_id): item.from_dish_total for item in aggregated.items}
    for group in payload["by_store"]:
        for item_payload in group["items"]:
            item_payload["from_dish_total"] = from_dishes[item_payload["ingredient_id"]]
    for item_payload in payload["items"]:
        item_payload["from_dish_total"] = from_dishes[item_payload["ingredient_id"]]
    payload["total_items"] = aggregated.total_items
    payload["checked_items"] = aggregated.checked_items
    payload["is_empty"] = aggregated.is_empty
    return payload


def _output_list(message: str = "") -> None:
    """Output the aggregated shopping list of the current profile."""
    aggregated = get_shopping_list_manager().get_aggregated(profile_id)
    result = {"success": True, "data": {"shopping_list": _aggregated_payload(aggregated)}}
    if message:
        result["message"] = message
    formatter.output(result, message)


# --- Stores ---

store_app = typer.Typer(help="Store management commands")
app.add_typer(store_app, name="store")


@store_app.command("list")
def store_list() -> None:
    """List stores in shopping order."""
    try:
        stores = get_catalog_manager().list_stores(profile_id)
        output_data = {
            "success": True,
            "data": {"stores": [s.model_dump(mode="json") for s in stores]},
        }
        formatter.output(output_data)
    except Exception as e:
        raise _fail(e)


@store_app.command("add")
def store_add(
    name: Annotated[str, typer.Argument(help="Store name")],
    color: Annotated[str | None, typer.Option("--color", "-c", help="Hex color")] = None,
    image: Annotated[Path | None, typer.Option("--image", "-i", help="Image file")] = None,
) -> None:
    """Add a store at the end of the shopping order."""
    try:
        catalog = get_catalog_manager()
        image_id = catalog.blob_storage.put(image) if image else None
        store_id = catalog.create_store(profile_id, name, color=color, image_id=image_id)
        store = catalog.get_store(store_id)
        output_data = {
            "success": True,
            "message": f"Added store {store.name}",
            "data": {"store": store.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        raise _fail(e)


@store_app.command("update")
def store_update(
    store: Annotated[str, typer.Argument(help="Store name or ID")],
    name: Annotated[str | None, typer.Option("--name", help="New name")] = None,
    color: Annotated[str | None, typer.Option("--color", "-c", help="New hex color")] = None,
) -> None:
    """Rename a store or change its color."""
    try:
        updated = get_catalog_manager().update_store(resolve_store(store).id, name, color)
        output_data = {
            "success": True,
            "message": f"Updated store {updated.name}",
            "data": {"store": updated.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        raise _fail(e)


@store_app.command("color")
def store_color(
    store: Annotated[str, typer.Argument(help="Store name or ID")],
    color: Annotated[str | None, typer.Argument(help="Hex color; omit to clear")] = None,
) -> None:
    """Set or clear the color of a store."""
    try:
        updated = get_catalog_manager().update_store_color(resolve_store(store).id, color)
        output_data = {
            "success": True,
            "message": f"Set color of {updated.name} to {color or 'none'}",
            "data": {"store": updated.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        raise _fail(e)


@store_app.command("image")
def store_image(
    store: Annotated[str, typer.Argument(help="Store name or ID")],
    image: Annotated[Path, typer.Argument(help="Image file", exists=True, dir_okay=False)],
) -> None:
    """Replace the image of a store."""
    try:
        catalog = get_catalog_manager()
        target = resolve_store(store)
        image_id = catalog.blob_storage.put(image)
        updated = catalog.update_store_image(target.id, image_id)
        output_data = {
            "success": True,
            "message": f"Updated image of {updated.name}",
            "data": {"store": updated.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        raise _fail(e)


@store_app.command("remove-image")
def store_remove_image(
    store: Annotated[str, typer.Argument(help="Store name or ID")],
) -> None:
    """Delete the image of a store."""
    try:
        updated = get_catalog_manager().remove_store_image(resolve_store(store).id)
        output_data = {
            "success": True,
            "message": f"Removed image of {updated.name}",
            "data": {"store": updated.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        raise _fail(e)


@store_app.command("upload-url")
def store_upload_url() -> None:
    """Print a URL a new store image can be written to."""
    try:
        url = get_catalog_manager().generate_upload_url()
        formatter.output({"success": True, "data": {"upload_url": url}})
    except Exception as e:
        raise _fail(e)


@store_app.command("remove")
def store_remove(
    store: Annotated[str, typer.Argument(help="Store name or ID")],
) -> None:
    """Delete a store; its ingredients become unassigned."""
    try:
        removed = get_catalog_manager().remove_store(resolve_store(store).id)
        formatter.success(f"Removed store {removed.name}", {"store": removed.model_dump(mode="json")})
    except Exception as e:
        raise _fail(e)


@store_app.command("reorder")
def store_reorder(
    stores: Annotated[list[str], typer.Argument(help="Store names or IDs in the new order")],
) -> None:
    """Set the shopping order of stores."""
    try:
        ordered = [resolve_store(ref).id for ref in stores]
        result = get_catalog_manager().reorder_stores(profile_id, ordered)
        output_data = {
            "success": True,
            "message": "Reordered stores",
            "data": {"stores": [s.model_dump(mode="json") for s in result]},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        raise _fail(e)


# --- Ingredients ---

ingredient_app = typer.Typer(help="Ingredient catalog commands")
app.add_typer(ingredient_app, name="ingredient")


def _ingredients_output(ingredients: list[Ingredient], message: str = "") -> None:
    stores = get_catalog_manager().list_stores(profile_id)
    output_data = {
        "success": True,
        "data": {
            "ingredients": [i.model_dump(mode="json") for i in ingredients],
            "store_names": {str(s.id): s.name for s in stores},
            "count": len(ingredients),
        },
    }
    formatter.output(output_data, message)


@ingredient_app.command("list")
def ingredient_list(
    store: Annotated[str | None, typer.Option("--store", "-s", help="Only this store")] = None,
) -> None:
    """List ingredients alphabetically."""
    try:
        ingredients = get_catalog_manager().list_ingredients(profile_id)
        if store:
            store_id = resolve_store(store).id
            ingredients = [i for i in ingredients if i.store_id == store_id]
        ingredients.sort(key=lambda i: normalize_name(i.name))
        _ingredients_output(ingredients)
    except Exception as e:
        raise _fail(e)


@ingredient_app.command("search")
def ingredient_search(
    query: Annotated[str, typer.Argument(help="Text contained in the name")] = "",
) -> None:
    """Search ingredients by name."""
    try:
        ingredients = get_catalog_manager().search_ingredients(profile_id, query)
        _ingredients_output(ingredients, f"{len(ingredients)} matching ingredients")
    except Exception as e:
        raise _fail(e)


@ingredient_app.command("add")
def ingredient_add(
    name: Annotated[str, typer.Argument(help="Ingredient name")],
    store: Annotated[str | None, typer.Option("--store", "-s", help="Default store")] = None,
) -> None:
    """Add an ingredient to the catalog."""
    try:
        catalog = get_catalog_manager()
        store_id = resolve_store(store).id if store else None
        ingredient_id = catalog.create_ingredient(profile_id, name, store_id)
        ingredient = catalog.get_ingredient(ingredient_id)
        output_data = {
            "success": True,
            "message": f"Added ingredient {ingredient.name}",
            "data": {"ingredient": ingredient.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        raise _fail(e)


@ingredient_app.command("update")
def ingredient_update(
    ingredient: Annotated[str, typer.Argument(help="Ingredient name or ID")],
    name: Annotated[str | None, typer.Option("--name", help="New name")] = None,
    store: Annotated[str | None, typer.Option("--store", "-s", help="New store")] = None,
    no_store: Annotated[bool, typer.Option("--no-store", help="Unassign the store")] = False,
) -> None:
    """Rename an ingredient or change its store."""
    try:
        current = resolve_ingredient(ingredient)
        if no_store:
            store_id = None
        elif store:
            store_id = resolve_store(store).id
        else:
            store_id = current.store_id

        updated = get_catalog_manager().update_ingredient(
            profile_id, current.id, name if name is not None else current.name, store_id
        )
        output_data = {
            "success": True,
            "message": f"Updated ingredient {updated.name}",
            "data": {"ingredient": updated.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        raise _fail(e)


@ingredient_app.command("remove")
def ingredient_remove(
    ingredient: Annotated[str, typer.Argument(help="Ingredient name or ID")],
) -> None:
    """Delete an ingredient and remove it from every dish."""
    try:
        target = resolve_ingredient(ingredient)
        removed = get_catalog_manager().remove_ingredient(profile_id, target.id)
        formatter.success(
            f"Removed ingredient {removed.name}",
            {"ingredient": removed.model_dump(mode="json")},
        )
    except Exception as e:
        raise _fail(e)


# --- Dishes ---

dish_app = typer.Typer(help="Dish commands")
app.add_typer(dish_app, name="dish")


def _dish_dump(dish: DishWithIngredients) -> dict[str, Any]:
    payload = dish.model_dump(mode="json")
    for item_payload, item in zip(payload["items"], dish.items):
        item_payload["display_name"] = item.display_name
    return payload


def _dish_payload(dish_id: UUID) -> dict[str, Any]:
    for dish in get_dish_manager().list_dishes_with_ingredients(profile_id):
        if dish.id == dish_id:
            return _dish_dump(dish)
    raise NotFoundError("dish", dish_id)


@dish_app.command("list")
def dish_list(
    search: Annotated[str | None, typer.Option("--search", help="Filter by name")] = None,
) -> None:
    """List dishes and how often each is on the shopping list."""
    try:
        dishes = get_dish_manager().list_dishes_with_ingredients(profile_id)
        if search:
            dishes = [d for d in dishes if search.lower() in d.name.lower()]

        shopping_list = get_shopping_list_manager().get_list(profile_id)
        output_data = {
            "success": True,
            "data": {
                "dishes": [_dish_dump(d) for d in dishes],
                "selected_counts": {
                    str(s.dish_id): s.count for s in shopping_list.selected_dishes
                },
            },
        }
        formatter.output(output_data)
    except Exception as e:
        raise _fail(e)


@dish_app.command("show")
def dish_show(
    dish: Annotated[str, typer.Argument(help="Dish name or ID")],
) -> None:
    """Show a dish and its ingredients."""
    try:
        formatter.output({"success": True, "data": {"dish": _dish_payload(resolve_dish(dish).id)}})
    except Exception as e:
        raise _fail(e)


@dish_app.command("add")
def dish_add(
    name: Annotated[str, typer.Argument(help="Dish name")],
    items: Annotated[
        list[str] | None, typer.Argument(help="Ingredients as NAME or NAME:QTY")
    ] = None,
) -> None:
    """Create a dish."""
    try:
        parsed = [parse_dish_item(item) for item in items or []]
        dish_id = get_dish_manager().create_dish(profile_id, name, parsed)
        output_data = {
            "success": True,
            "message": f"Added dish {name.strip()}",
            "data": {"dish": _dish_payload(dish_id)},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        raise _fail(e)


@dish_app.command("update")
def dish_update(
    dish: Annotated[str, typer.Argument(help="Dish name or ID")],
    name: Annotated[str | None, typer.Option("--name", help="New name")] = None,
    items: Annotated[
        list[str] | None,
        typer.Option("--item", "-i", help="Replacement ingredient NAME or NAME:QTY"),
    ] = None,
) -> None:
    """Rename a dish or replace its ingredients."""
    try:
        current = resolve_dish(dish)
        new_items = [parse_dish_item(item) for item in items] if items else current.items
        updated = get_dish_manager().update_dish(
            current.id, name if name is not None else current.name, new_items
        )
        output_data = {
            "success": True,
            "message": f"Updated dish {updated.name}",
            "data": {"dish": _dish_payload(updated.id)},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        raise _fail(e)


@dish_app.command("remove")
def dish_remove(
    dish: Annotated[str, typer.Argument(help="Dish name or ID")],
) -> None:
    """Delete a dish."""
    try:
        removed = get_dish_manager().remove_dish(resolve_dish(dish).id)
        formatter.success(f"Removed dish {removed.name}", {"dish": removed.model_dump(mode="json")})
    except Exception as e:
        raise _fail(e)


# --- Shopping list ---

list_app = typer.Typer(help="Shopping list commands")
app.add_typer(list_app, name="list")


@list_app.callback(invoke_without_command=True)
def list_default(ctx: typer.Context) -> None:
    """Show the shopping list grouped by store."""
    if ctx.invoked_subcommand is not None:
        return
    try:
        _output_list()
    except Exception as e:
        raise _fail(e)


@list_app.command("show")
def list_show() -> None:
    """Show the shopping list grouped by store."""
    try:
        _output_list()
    except Exception as e:
        raise _fail(e)


@list_app.command("add-dish")
def list_add_dish(
    dish: Annotated[str, typer.Argument(help="Dish name or ID")],
) -> None:
    """Put a dish on the list, or cook it once more."""
    try:
        target = resolve_dish(dish)
        shopping_list = get_shopping_list_manager().add_dish(profile_id, target.id)
        _output_list(f"Added {target.name} (×{shopping_list.dish_count(target.id)})")
    except Exception as e:
        raise _fail(e)


@list_app.command("remove-dish")
def list_remove_dish(
    dish: Annotated[str, typer.Argument(help="Dish name or ID")],
) -> None:
    """Take a dish off the list."""
    try:
        target = resolve_dish(dish)
        get_shopping_list_manager().remove_dish(profile_id, target.id)
        _output_list(f"Removed {target.name}")
    except Exception as e:
        raise _fail(e)


@list_app.command("set-count")
def list_set_count(
    dish: Annotated[str, typer.Argument(help="Dish name or ID")],
    count: Annotated[int, typer.Argument(help="Times to cook it; 0 removes it")],
) -> None:
    """Set how many times a dish is cooked."""
    try:
        target = resolve_dish(dish)
        get_shopping_list_manager().set_dish_count(profile_id, target.id, count)
        _output_list(f"{target.name} ×{max(count, 0)}")
    except Exception as e:
        raise _fail(e)


@list_app.command("exclude")
def list_exclude(
    ingredient: Annotated[str, typer.Argument(help="Ingredient name or ID")],
) -> None:
    """Mark an ingredient as already at home."""
    try:
        target = resolve_ingredient(ingredient)
        get_shopping_list_manager().exclude_ingredient(profile_id, target.id)
        _output_list(f"Have {target.name} at home")
    except Exception as e:
        raise _fail(e)


@list_app.command("include")
def list_include(
    ingredient: Annotated[str, typer.Argument(help="Ingredient name or ID")],
) -> None:
    """Undo exclude for an ingredient."""
    try:
        target = resolve_ingredient(ingredient)
        get_shopping_list_manager().include_ingredient(profile_id, target.id)
        _output_list(f"Need {target.name} again")
    except Exception as e:
        raise _fail(e)


@list_app.command("check")
def list_check(
    ingredient: Annotated[str, typer.Argument(help="Ingredient name or ID")],
) -> None:
    """Check an ingredient off as bought."""
    try:
        target = resolve_ingredient(ingredient)
        get_shopping_list_manager().check_item(profile_id, target.id)
        _output_list(f"Checked {target.name}")
    except Exception as e:
        raise _fail(e)


@list_app.command("uncheck")
def list_uncheck(
    ingredient: Annotated[str, typer.Argument(help="Ingredient name or ID")],
) -> None:
    """Uncheck an ingredient."""
    try:
        target = resolve_ingredient(ingredient)
        get_shopping_list_manager().uncheck_item(profile_id, target.id)
        _output_list(f"Unchecked {target.name}")
    except Exception as e:
        raise _fail(e)


@list_app.command("toggle")
def list_toggle(
    ingredient: Annotated[str, typer.Argument(help="Ingredient name or ID")],
) -> None:
    """Flip the checked state of an ingredient."""
    try:
        target = resolve_ingredient(ingredient)
        shopping_list = get_shopping_list_manager().toggle_item(profile_id, target.id)
        state = "Checked" if target.id in shopping_list.checked_ingredient_ids else "Unchecked"
        _output_list(f"{state} {target.name}")
    except Exception as e:
        raise _fail(e)


@list_app.command("extra")
def list_extra(
    ingredient: Annotated[str, typer.Argument(help="Ingredient name or ID")],
    quantity: Annotated[int, typer.Option("--quantity", "-q", help="Units to add")] = 1,
) -> None:
    """Add extra units of an ingredient, independent of dishes."""
    try:
        target = resolve_ingredient(ingredient)
        shopping_list = get_shopping_list_manager().add_manual_ingredient(
            profile_id, target.id, quantity
        )
        total = shopping_list.manual_quantity(target.id)
        _output_list(f"{target.name}: {format_quantity(total)} extra")
    except Exception as e:
        raise _fail(e)


@list_app.command("set-extra")
def list_set_extra(
    ingredient: Annotated[str, typer.Argument(help="Ingredient name or ID")],
    quantity: Annotated[int, typer.Argument(help="Extra units; 0 removes them")],
) -> None:
    """Set the extra units of an ingredient."""
    try:
        target = resolve_ingredient(ingredient)
        get_shopping_list_manager().set_manual_ingredient_quantity(
            profile_id, target.id, quantity
        )
        _output_list(f"{target.name}: {max(quantity, 0)} extra")
    except Exception as e:
        raise _fail(e)


@list_app.command("remove-extra")
def list_remove_extra(
    ingredient: Annotated[str, typer.Argument(help="Ingredient name or ID")],
) -> None:
    """Drop the extra units of an ingredient."""
    try:
        target = resolve_ingredient(ingredient)
        get_shopping_list_manager().remove_manual_ingredient(profile_id, target.id)
        _output_list(f"Removed extra {target.name}")
    except Exception as e:
        raise _fail(e)


@list_app.command("misc-add")
def list_misc_add(
    name: Annotated[str, typer.Argument(help="What to buy")],
    store: Annotated[str | None, typer.Option("--store", "-s", help="Store to buy at")] = None,
) -> None:
    """Add a free-text item to the list."""
    try:
        store_id = resolve_store(store).id if store else None
        item_id = get_shopping_list_manager().add_misc_item(profile_id, name, store_id)
        _output_list(f"Added {name.strip()} ({item_id})")
    except Exception as e:
        raise _fail(e)


@list_app.command("misc-toggle")
def list_misc_toggle(
    item_id: Annotated[str, typer.Argument(help="Misc item ID")],
) -> None:
    """Flip the checked state of a misc item."""
    try:
        get_shopping_list_manager().toggle_misc_item(profile_id, item_id)
        _output_list("Toggled misc item")
    except Exception as e:
        raise _fail(e)


@list_app.command("misc-remove")
def list_misc_remove(
    item_id: Annotated[str, typer.Argument(help="Misc item ID")],
) -> None:
    """Remove a misc item."""
    try:
        get_shopping_list_manager().remove_misc_item(profile_id, item_id)
        _output_list("Removed misc item")
    except Exception as e:
        raise _fail(e)


@list_app.command("clear")
def list_clear(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Don't ask for confirmation")] = False,
) -> None:
    """Remove all dishes and items from the shopping list."""
    try:
        if not yes and not formatter.json_mode:
            typer.confirm("This will remove all dishes and items. Continue?", abort=True)
        get_shopping_list_manager().clear(profile_id)
        formatter.success("Cleared shopping list")
    except typer.Abort:
        raise
    except Exception as e:
        raise _fail(e)


# --- Profiles ---

profile_app = typer.Typer(help="Profile commands")
app.add_typer(profile_app, name="profile")


@profile_app.command("new")
def profile_new() -> None:
    """Generate a new profile ID to keep a separate household's data."""
    new_id = new_profile_id()
    formatter.output(
        {"success": True, "data": {"profile_id": new_id}},
        "Created profile; pass it with --profile",
    )


if __name__ == "__main__":
    app()
