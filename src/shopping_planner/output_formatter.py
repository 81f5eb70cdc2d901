"""Output formatting for CLI and programmatic use."""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .data_store import JSONEncoder


def format_quantity(value: float | int | None) -> str:
    """Render a quantity without a trailing .0 for whole numbers."""
    if value is None:
        return "-"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


class OutputFormatter:
    """Formats output for both Rich terminal and JSON modes."""

    def __init__(self, json_mode: bool = False):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode
        self.console = Console()

    def output(self, data: dict[str, Any], message: str = "") -> None:
        """Output data in appropriate format.

        Args:
            data: Data to output
            message: Optional message for Rich mode
        """
        if self.json_mode:
            self._output_json(data)
        else:
            self._output_rich(data, message)

    def _output_json(self, data: dict[str, Any]) -> None:
        """Output as JSON to stdout."""
        print(json.dumps(data, cls=JSONEncoder, indent=2))

    def _output_rich(self, data: dict[str, Any], message: str) -> None:
        """Output with Rich formatting."""
        if message:
            self.console.print(f"[green]✓[/green] {message}")

        payload = data.get("data", {})
        if "shopping_list" in payload:
            self._render_shopping_list(data)
        elif "stores" in payload:
            self._render_stores(data)
        elif "ingredients" in payload:
            self._render_ingredients(data)
        elif "dishes" in payload:
            self._render_dishes(data)
        elif "dish" in payload:
            self._render_dish(data)
        elif "store" in payload:
            self._render_store(data)
        elif "upload_url" in payload:
            self.console.print(payload["upload_url"])
        elif "profile_id" in payload:
            self.console.print(f"Profile: [bold]{payload['profile_id']}[/bold]")

    def _render_stores(self, data: dict) -> None:
        """Render stores in display order."""
        stores = data["data"]["stores"]

        if not stores:
            self.console.print("[dim]No stores yet[/dim]")
            return

        table = Table(title="Stores", show_header=True, header_style="bold cyan")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Store", style="cyan")
        table.add_column("Color")
        table.add_column("Image", style="dim")
        table.add_column("ID", style="dim")

        for store in stores:
            color = store.get("color")
            table.add_row(
                str(store["sort_order"]),
                store["name"],
                f"[{color}]■[/] {color}" if color else "-",
                "yes" if store.get("image_url") else "-",
                store["id"],
            )

        self.console.print(table)

    def _render_store(self, data: dict) -> None:
        """Render a single store."""
        store = data["data"]["store"]
        content = f"""[bold]{store["name"]}[/bold]

Position: {store.get("sort_order", 0)}
Color: {store.get("color") or "None"}
Image: {store.get("image_id") or "None"}"""
        self.console.print(Panel(content, title="Store", border_style="green"))

    def _render_ingredients(self, data: dict) -> None:
        """Render ingredients with their stores."""
        ingredients = data["data"]["ingredients"]
        store_names = data["data"].get("store_names", {})

        if not ingredients:
            self.console.print("[dim]No ingredients found[/dim]")
            return

        table = Table(title="Ingredients", show_header=True, header_style="bold cyan")
        table.add_column("Ingredient", style="cyan")
        table.add_column("Store", style="green")
        table.add_column("ID", style="dim")

        for ingredient in ingredients:
            store_id = ingredient.get("store_id")
            table.add_row(
                ingredient["name"],
                store_names.get(store_id, "-") if store_id else "-",
                ingredient["id"],
            )

        self.console.print(table)
        self.console.print(f"\nTotal ingredients: {len(ingredients)}")

    def _render_dishes(self, data: dict) -> None:
        """Render dishes with their ingredients."""
        dishes = data["data"]["dishes"]
        counts = data["data"].get("selected_counts", {})

        if not dishes:
            self.console.print("[dim]No dishes yet[/dim]")
            return

        table = Table(title="Dishes", show_header=True, header_style="bold cyan")
        table.add_column("Dish", style="cyan")
        table.add_column("Ingredients")
        table.add_column("On list", justify="right", style="magenta")
        table.add_column("ID", style="dim")

        for dish in dishes:
            names = [item["display_name"] for item in dish["items"]]
            count = counts.get(dish["id"], 0)
            table.add_row(
                dish["name"],
                ", ".join(names) or "[dim]none[/dim]",
                f"×{count}" if count else "-",
                dish["id"],
            )

        self.console.print(table)

    def _render_dish(self, data: dict) -> None:
        """Render a single dish."""
        dish = data["data"]["dish"]
        lines = [f"[bold]{dish['name']}[/bold]", ""]
        for item in dish["items"]:
            name = item["display_name"]
            lines.append(f"  {format_quantity(item['quantity'])} × {name}")
        if not dish["items"]:
            lines.append("[dim]No ingredients[/dim]")

        self.console.print(Panel("\n".join(lines), title="Dish", border_style="green"))

    def _render_shopping_list(self, data: dict) -> None:
        """Render the aggregated shopping list grouped by store."""
        shopping = data["data"]["shopping_list"]

        if shopping.get("is_empty"):
            self.console.print("[dim]Your shopping list is empty[/dim]")
            return

        self.console.print(
            f"[bold]Shopping List[/bold]  "
            f"{shopping['checked_items']} of {shopping['total_items']} items"
        )

        if shopping["selected_dishes"]:
            self.console.print("\n[bold]Dishes[/bold]")
            for selected in shopping["selected_dishes"]:
                name = (selected.get("dish") or {}).get("name", "Unknown dish")
                self.console.print(f"  - {name} ×{selected['count']}")

        groups: list[tuple[dict | None, list[dict], list[dict]]] = []
        seen: set[str | None] = set()
        for group in shopping["by_store"]:
            store = group.get("store")
            key = store["id"] if store else None
            misc = [m for m in shopping["misc_items"] if m.get("store_id") == key]
            groups.append((store, group["items"], misc))
            seen.add(key)
        for store in shopping["stores"] + [None]:
            key = store["id"] if store else None
            if key in seen:
                continue
            misc = [m for m in shopping["misc_items"] if m.get("store_id") == key]
            if misc:
                groups.append((store, [], misc))
                seen.add(key)

        for store, items, misc in groups:
            color = store.get("color") if store else None
            title = store["name"] if store else "Other"
            self.console.print(f"\n[bold {color or 'cyan'}]{title}[/]")

            for item in items:
                mark = "[green]✓[/green]" if item["is_checked"] else "○"
                name = item["ingredient"]["name"]
                if item["is_excluded"] or item["is_checked"]:
                    name = f"[dim]{name}[/dim]"
                line = f"  {mark} {name} ({format_quantity(item['total_count'])})"
                if item["manual_quantity"] and item["from_dishes"]:
                    line += (
                        f" [magenta]{format_quantity(item['from_dish_total'])} for dishes"
                        f" +{item['manual_quantity']} extra[/magenta]"
                    )
                elif item["manual_quantity"]:
                    line += f" [magenta]+{item['manual_quantity']} extra[/magenta]"
                if item["is_excluded"]:
                    line += " [yellow]have it[/yellow]"
                if item["from_dishes"]:
                    line += f" [dim]{', '.join(item['from_dishes'])}[/dim]"
                self.console.print(line)

            for entry in misc:
                mark = "[green]✓[/green]" if entry["checked"] else "○"
                name = f"[dim]{entry['name']}[/dim]" if entry["checked"] else entry["name"]
                self.console.print(f"  {mark} {name} [dim](misc)[/dim]")

    def error(self, message: str, error_code: str | None = None) -> None:
        """Output error message.

        Args:
            message: Error message
            error_code: Optional error code
        """
        if self.json_mode:
            output = {"success": False, "error": message}
            if error_code:
                output["error_code"] = error_code
            print(json.dumps(output))
        else:
            self.console.print(f"[red]✗ Error:[/red] {message}")

    def success(self, message: str, data: dict | None = None) -> None:
        """Output success message.

        Args:
            message: Success message
            data: Optional data to include
        """
        if self.json_mode:
            output: dict[str, Any] = {"success": True, "message": message}
            if data:
                output["data"] = data
            print(json.dumps(output, cls=JSONEncoder))
        else:
            self.console.print(f"[green]✓[/green] {message}")

    def warning(self, message: str) -> None:
        """Output warning message.

        Args:
            message: Warning message
        """
        if self.json_mode:
            print(json.dumps({"warning": message}))
        else:
            self.console.print(f"[yellow]⚠[/yellow] {message}")
