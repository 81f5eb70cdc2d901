"""Tests for CLI commands."""

import json
import logging
import re

import pytest
from typer.testing import CliRunner

from shopping_planner.main import app

runner = CliRunner()

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]")


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.captureWarnings(False)


def invoke_json(data_dir, *args, **kwargs):
    """Run a command in JSON mode and return the result."""
    return runner.invoke(app, ["--json", "--data-dir", str(data_dir), *args], **kwargs)


def run_json(data_dir, *args):
    """Run a command in JSON mode and return its parsed output."""
    result = invoke_json(data_dir, *args)
    assert result.exit_code == 0, result.stdout
    return json.loads(result.stdout)


@pytest.fixture
def cli_kitchen(temp_data_dir):
    """Two stores, Milk and Bread, and a Breakfast dish created through the CLI."""
    run_json(temp_data_dir, "store", "add", "A")
    run_json(temp_data_dir, "store", "add", "B", "--color", "#00f")
    run_json(temp_data_dir, "ingredient", "add", "Milk", "--store", "A")
    run_json(temp_data_dir, "ingredient", "add", "Bread", "--store", "B")
    run_json(temp_data_dir, "dish", "add", "Breakfast", "Milk:2")
    return temp_data_dir


class TestStoreCommands:
    """Tests for store commands."""

    def test_add_store(self, temp_data_dir):
        """Stores are appended to the order."""
        run_json(temp_data_dir, "store", "add", "A")
        data = run_json(temp_data_dir, "store", "add", "B", "--color", "#F80")

        assert data["success"] is True
        assert data["data"]["store"]["name"] == "B"
        assert data["data"]["store"]["sort_order"] == 1
        assert data["data"]["store"]["color"] == "#ff8800"

    def test_add_store_invalid_color(self, temp_data_dir):
        """Bad colors fail with a validation error."""
        result = invoke_json(temp_data_dir, "store", "add", "A", "--color", "blue")
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["success"] is False
        assert data["error_code"] == "VALIDATION_ERROR"

    def test_add_store_with_image(self, temp_data_dir, tmp_path):
        """An image file is stored and linked."""
        image = tmp_path / "logo.png"
        image.write_bytes(b"png")
        run_json(temp_data_dir, "store", "add", "A", "--image", str(image))

        (store,) = run_json(temp_data_dir, "store", "list")["data"]["stores"]
        assert store["image_id"].endswith(".png")
        assert store["image_url"].startswith("file://")

    def test_list_and_reorder(self, cli_kitchen):
        """Reorder accepts store names."""
        data = run_json(cli_kitchen, "store", "reorder", "B", "A")
        assert [s["name"] for s in data["data"]["stores"]] == ["B", "A"]

        listed = run_json(cli_kitchen, "store", "list")["data"]["stores"]
        assert [(s["name"], s["sort_order"]) for s in listed] == [("B", 0), ("A", 1)]

    def test_reorder_unknown(self, cli_kitchen):
        """Unknown stores are reported as not found."""
        result = invoke_json(cli_kitchen, "store", "reorder", "B", "Nowhere")
        assert result.exit_code == 1
        assert json.loads(result.stdout)["error_code"] == "NOT_FOUND"

    def test_update_and_color(self, cli_kitchen):
        """Stores can be renamed and recolored."""
        run_json(cli_kitchen, "store", "update", "A", "--name", "Aldi")
        data = run_json(cli_kitchen, "store", "color", "aldi", "#123456")
        assert data["data"]["store"]["name"] == "Aldi"
        assert data["data"]["store"]["color"] == "#123456"

        cleared = run_json(cli_kitchen, "store", "color", "Aldi")
        assert cleared["data"]["store"]["color"] is None

    def test_upload_url(self, temp_data_dir):
        """An upload URL is printed."""
        data = run_json(temp_data_dir, "store", "upload-url")
        assert data["data"]["upload_url"].startswith("file://")

    def test_remove_store(self, cli_kitchen):
        """Removing a store unassigns its ingredients."""
        data = run_json(cli_kitchen, "store", "remove", "A")
        assert data["message"] == "Removed store A"

        ingredients = run_json(cli_kitchen, "ingredient", "list")["data"]["ingredients"]
        milk = next(i for i in ingredients if i["name"] == "Milk")
        assert milk["store_id"] is None


class TestIngredientCommands:
    """Tests for ingredient commands."""

    def test_add_ingredient(self, cli_kitchen):
        """Ingredients can be added with a store."""
        data = run_json(cli_kitchen, "ingredient", "add", "  Eggs ", "--store", "b")
        assert data["data"]["ingredient"]["name"] == "Eggs"
        assert data["data"]["ingredient"]["store_id"] is not None

    def test_duplicate_name(self, cli_kitchen):
        """Duplicate names fail with DUPLICATE_NAME."""
        result = invoke_json(cli_kitchen, "ingredient", "add", "MILK")
        assert result.exit_code == 1
        assert "DUPLICATE_NAME" in result.stdout

    def test_list_sorted_and_filtered(self, cli_kitchen):
        """Ingredients are listed alphabetically and can be filtered by store."""
        data = run_json(cli_kitchen, "ingredient", "list")
        assert [i["name"] for i in data["data"]["ingredients"]] == ["Bread", "Milk"]
        assert data["data"]["count"] == 2

        filtered = run_json(cli_kitchen, "ingredient", "list", "--store", "A")
        assert [i["name"] for i in filtered["data"]["ingredients"]] == ["Milk"]

    def test_search(self, cli_kitchen):
        """Search matches part of the name."""
        data = run_json(cli_kitchen, "ingredient", "search", "ilk")
        assert [i["name"] for i in data["data"]["ingredients"]] == ["Milk"]

    def test_update(self, cli_kitchen):
        """Ingredients can be renamed and unassigned."""
        data = run_json(cli_kitchen, "ingredient", "update", "Milk", "--name", "Oat Milk")
        assert data["data"]["ingredient"]["name"] == "Oat Milk"
        assert data["data"]["ingredient"]["store_id"] is not None

        data = run_json(cli_kitchen, "ingredient", "update", "Oat Milk", "--no-store")
        assert data["data"]["ingredient"]["store_id"] is None

    def test_remove(self, cli_kitchen):
        """Removing an ingredient strips it from dishes."""
        run_json(cli_kitchen, "ingredient", "remove", "Milk")
        dish = run_json(cli_kitchen, "dish", "show", "Breakfast")["data"]["dish"]
        assert dish["items"] == []


class TestDishCommands:
    """Tests for dish commands."""

    def test_add_dish(self, cli_kitchen):
        """Dish items are given as NAME:QTY."""
        data = run_json(cli_kitchen, "dish", "add", "Toast", "Bread", "milk:0.5")
        items = data["data"]["dish"]["items"]
        assert [(i["ingredient"]["name"], i["quantity"]) for i in items] == [
            ("Bread", 1),
            ("Milk", 0.5),
        ]
        assert [i["display_name"] for i in items] == ["Bread", "Milk"]

    def test_add_dish_unknown_ingredient(self, cli_kitchen):
        """Unknown ingredients fail the whole dish."""
        result = invoke_json(cli_kitchen, "dish", "add", "Soup", "Leek:1")
        assert result.exit_code == 1
        assert json.loads(result.stdout)["error_code"] == "NOT_FOUND"
        assert len(run_json(cli_kitchen, "dish", "list")["data"]["dishes"]) == 1

    def test_add_dish_bad_quantity(self, cli_kitchen):
        """Quantities must be numbers."""
        result = invoke_json(cli_kitchen, "dish", "add", "Soup", "Milk:lots")
        assert result.exit_code == 1
        assert json.loads(result.stdout)["error_code"] == "VALIDATION_ERROR"

    def test_list_with_counts(self, cli_kitchen):
        """Dish list reports how often each dish is selected."""
        run_json(cli_kitchen, "list", "add-dish", "Breakfast")
        data = run_json(cli_kitchen, "dish", "list")
        (dish,) = data["data"]["dishes"]
        assert data["data"]["selected_counts"] == {dish["id"]: 1}

    def test_list_search(self, cli_kitchen):
        """Dishes can be filtered by name."""
        run_json(cli_kitchen, "dish", "add", "Toast", "Bread")
        data = run_json(cli_kitchen, "dish", "list", "--search", "toa")
        assert [d["name"] for d in data["data"]["dishes"]] == ["Toast"]

    def test_update_dish(self, cli_kitchen):
        """Items given to update replace the old ones."""
        data = run_json(
            cli_kitchen, "dish", "update", "Breakfast", "--item", "Bread:2", "--name", "Brunch"
        )
        dish = data["data"]["dish"]
        assert dish["name"] == "Brunch"
        assert [i["ingredient"]["name"] for i in dish["items"]] == ["Bread"]

    def test_remove_dish(self, cli_kitchen):
        """Removing a selected dish deselects it."""
        run_json(cli_kitchen, "list", "add-dish", "Breakfast")
        run_json(cli_kitchen, "dish", "remove", "Breakfast")

        shopping_list = run_json(cli_kitchen, "list", "show")["data"]["shopping_list"]
        assert shopping_list["is_empty"] is True


class TestListCommands:
    """Tests for shopping list commands."""

    def test_show_without_subcommand(self, cli_kitchen):
        """Bare `list` shows the list."""
        data = run_json(cli_kitchen, "list")
        assert data["data"]["shopping_list"]["is_empty"] is True

    def test_add_dish_twice(self, cli_kitchen):
        """Adding a dish again doubles its ingredients."""
        run_json(cli_kitchen, "list", "add-dish", "Breakfast")
        data = run_json(cli_kitchen, "list", "add-dish", "Breakfast")

        shopping_list = data["data"]["shopping_list"]
        assert shopping_list["selected_dishes"][0]["count"] == 2
        (item,) = shopping_list["items"]
        assert item["ingredient"]["name"] == "Milk"
        assert item["total_count"] == 4

    def test_set_count_zero(self, cli_kitchen):
        """A count of zero deselects the dish."""
        run_json(cli_kitchen, "list", "set-count", "Breakfast", "3")
        data = run_json(cli_kitchen, "list", "set-count", "Breakfast", "0")
        assert data["data"]["shopping_list"]["selected_dishes"] == []

    def test_add_unknown_dish(self, cli_kitchen):
        """Unknown dishes are reported as not found."""
        result = invoke_json(cli_kitchen, "list", "add-dish", "Pizza")
        assert result.exit_code == 1
        assert json.loads(result.stdout)["error_code"] == "NOT_FOUND"

    def test_exclude_and_check(self, cli_kitchen):
        """Exclusions and checks are flagged on items."""
        run_json(cli_kitchen, "list", "add-dish", "Breakfast")
        run_json(cli_kitchen, "list", "extra", "Bread")
        run_json(cli_kitchen, "list", "exclude", "Milk")
        data = run_json(cli_kitchen, "list", "check", "Bread")

        items = {i["ingredient"]["name"]: i for i in data["data"]["shopping_list"]["items"]}
        assert items["Milk"]["is_excluded"] is True
        assert items["Bread"]["is_checked"] is True
        assert data["data"]["shopping_list"]["total_items"] == 1
        assert data["data"]["shopping_list"]["checked_items"] == 1

        data = run_json(cli_kitchen, "list", "include", "Milk")
        items = {i["ingredient"]["name"]: i for i in data["data"]["shopping_list"]["items"]}
        assert items["Milk"]["is_excluded"] is False

    def test_toggle(self, cli_kitchen):
        """Toggle flips the checked state."""
        run_json(cli_kitchen, "list", "add-dish", "Breakfast")
        data = run_json(cli_kitchen, "list", "toggle", "Milk")
        assert data["message"] == "Checked Milk"

        data = run_json(cli_kitchen, "list", "toggle", "Milk")
        assert data["message"] == "Unchecked Milk"

    def test_extra_quantities(self, cli_kitchen):
        """Extra units accumulate and can be set or removed."""
        run_json(cli_kitchen, "list", "extra", "Bread", "-q", "2")
        data = run_json(cli_kitchen, "list", "extra", "Bread")
        (item,) = data["data"]["shopping_list"]["items"]
        assert item["manual_quantity"] == 3

        data = run_json(cli_kitchen, "list", "set-extra", "Bread", "5")
        assert data["data"]["shopping_list"]["items"][0]["total_count"] == 5

        data = run_json(cli_kitchen, "list", "remove-extra", "Bread")
        assert data["data"]["shopping_list"]["items"] == []

    def test_extra_zero(self, cli_kitchen):
        """Zero extra units are rejected."""
        result = invoke_json(cli_kitchen, "list", "extra", "Bread", "-q", "0")
        assert result.exit_code == 1
        assert json.loads(result.stdout)["error_code"] == "VALIDATION_ERROR"

    def test_misc_items(self, cli_kitchen):
        """Misc items can be added, toggled and removed."""
        data = run_json(cli_kitchen, "list", "misc-add", "Foil", "--store", "B")
        (misc,) = data["data"]["shopping_list"]["misc_items"]
        assert misc["store"]["name"] == "B"

        data = run_json(cli_kitchen, "list", "misc-toggle", misc["id"])
        assert data["data"]["shopping_list"]["misc_items"][0]["checked"] is True

        data = run_json(cli_kitchen, "list", "misc-remove", misc["id"])
        assert data["data"]["shopping_list"]["misc_items"] == []

    def test_misc_toggle_unknown(self, cli_kitchen):
        """Toggling an unknown misc item fails."""
        result = invoke_json(cli_kitchen, "list", "misc-toggle", "nope")
        assert result.exit_code == 1
        assert json.loads(result.stdout)["error_code"] == "NOT_FOUND"

    def test_clear_json(self, cli_kitchen):
        """JSON mode clears without asking."""
        run_json(cli_kitchen, "list", "add-dish", "Breakfast")
        data = run_json(cli_kitchen, "list", "clear")
        assert data["message"] == "Cleared shopping list"
        assert run_json(cli_kitchen, "list")["data"]["shopping_list"]["is_empty"] is True

    def test_clear_asks_for_confirmation(self, cli_kitchen):
        """Rich mode asks before clearing."""
        run_json(cli_kitchen, "list", "add-dish", "Breakfast")

        result = runner.invoke(
            app, ["--data-dir", str(cli_kitchen), "list", "clear"], input="n\n"
        )
        assert result.exit_code == 1
        assert run_json(cli_kitchen, "list")["data"]["shopping_list"]["is_empty"] is False

        result = runner.invoke(app, ["--data-dir", str(cli_kitchen), "list", "clear", "--yes"])
        assert result.exit_code == 0
        assert "Cleared shopping list" in result.stdout

    def test_rich_list(self, cli_kitchen):
        """Rich mode renders the grouped list."""
        run_json(cli_kitchen, "list", "add-dish", "Breakfast")
        result = runner.invoke(app, ["--data-dir", str(cli_kitchen), "list"])
        assert result.exit_code == 0
        output = ANSI_ESCAPE_RE.sub("", result.stdout)
        assert "Milk (2)" in output
        assert "Breakfast ×1" in output


class TestProfiles:
    """Tests for profile handling."""

    def test_new_profile(self, temp_data_dir):
        """A fresh profile ID is generated."""
        data = run_json(temp_data_dir, "profile", "new")
        assert re.fullmatch(r"[0-9a-f]{32}", data["data"]["profile_id"])

    def test_profiles_are_isolated(self, cli_kitchen):
        """Another profile sees none of the data."""
        data = run_json(cli_kitchen, "--profile", "other", "ingredient", "list")
        assert data["data"]["ingredients"] == []

        run_json(cli_kitchen, "-P", "other", "ingredient", "add", "Milk")
        assert len(run_json(cli_kitchen, "ingredient", "list")["data"]["ingredients"]) == 2
