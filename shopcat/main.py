"""Interactive CLI for browsing the catalog and exporting products."""

import logging
import sys
from pathlib import Path

import typer
from pydantic import ValidationError

from .config import AppSettings, get_settings
from .driver.config import ClientSettings
from .driver.showcase import Catalog
from .errors import InvalidSelection, UnsupportedFormat, WriteFailed
from .exporter import Exporter
from .model import Category, ExportFormat, FetchFailure
from .navigator import Navigator

app = typer.Typer(help="Browse an online shop's catalog and export products")

COMMANDS = {
    "categories": "list top-level categories",
    "parse": "pick a category and export its products",
    "exit": "quit",
}


def setup_logging(settings: AppSettings) -> None:
    """Configure logging for the CLI."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format=settings.log_format,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )

    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured at {settings.log_level} level")


class CommandLoop:
    """Reads commands from the user and drives the navigator and exporter."""

    def __init__(self, navigator: Navigator, exporter: Exporter, output_dir: Path):
        self.navigator = navigator
        self.exporter = exporter
        self.output_dir = output_dir
        self.handlers = {
            "categories": self.list_categories,
            "parse": self.parse,
        }

    def run(self) -> None:
        """Run until the user types ``exit`` or closes the input."""
        while True:
            try:
                command = typer.prompt("shopcat", prompt_suffix="> ").strip().lower()
                if command == "exit":
                    return

                handler = self.handlers.get(command)
                if handler is None:
                    self._unknown_command(command)
                    continue

                handler()
            except typer.Abort:
                typer.echo()
                return

    def list_categories(self) -> None:
        result = self.navigator.list_top_level()
        if result.failure:
            self._report_failure("categories", result.failure)
            return
        if not result.items:
            typer.echo("No categories available")
            return

        self._show(result.items)

    def parse(self) -> None:
        result = self.navigator.list_top_level()
        if result.failure:
            self._report_failure("categories", result.failure)
            return
        if not result.items:
            typer.echo("No categories available")
            return

        self._show(result.items)
        category = self._prompt_choice(result.items)

        step = self.navigator.resolve(category, self._choose_subcategory)
        if step.failure:
            self._report_failure(f"subcategories of '{step.category.name}'", step.failure)
            return

        products = step.products
        if products.failure:
            self._report_failure(f"products of '{step.category.name}'", products.failure)
            return
        if not products.items:
            typer.echo(f"Category '{step.category.name}' has no products")
            return

        typer.echo(f"Found {len(products.items)} products in '{step.category.name}'")
        fmt = self._prompt_format()
        destination = self.output_dir / fmt.default_filename

        try:
            path = self.exporter.export(products.items, fmt, destination)
        except WriteFailed as e:
            typer.echo(f"Error: {e}", err=True)
            return

        typer.echo(f"Saved {len(products.items)} products to {path}")

    def _choose_subcategory(self, categories: list[Category]) -> Category:
        typer.echo("Subcategories:")
        self._show(categories)
        return self._prompt_choice(categories)

    def _show(self, categories: list[Category]) -> None:
        for line in self.navigator.display_lines(categories):
            typer.echo(line)

    def _prompt_choice(self, categories: list[Category]) -> Category:
        while True:
            selection = typer.prompt("Category number")
            try:
                return self.navigator.choose(categories, selection)
            except InvalidSelection as e:
                typer.echo(f"Error: {e}", err=True)

    def _prompt_format(self) -> ExportFormat:
        choices = ", ".join(x.value for x in ExportFormat)
        while True:
            token = typer.prompt(f"Export format ({choices})")
            try:
                return ExportFormat.parse(token)
            except UnsupportedFormat as e:
                typer.echo(f"Error: {e}", err=True)

    def _report_failure(self, what: str, failure: FetchFailure) -> None:
        typer.echo(
            f"Error: could not fetch {what} ({failure.kind.value} error): {failure.message}",
            err=True,
        )

    def _unknown_command(self, command: str) -> None:
        typer.echo(f"Unknown command '{command}'. Available commands:", err=True)
        for name, description in COMMANDS.items():
            typer.echo(f"  {name:<12}{description}", err=True)


@app.command()
def main():
    """Start the interactive catalog browser."""
    try:
        settings = get_settings()
    except ValidationError as e:
        typer.echo(f"Error: invalid configuration: {e}", err=True)
        raise typer.Exit(1)
    setup_logging(settings)

    with Catalog(ClientSettings()) as catalog:
        loop = CommandLoop(
            Navigator(catalog),
            Exporter(settings.export_locale),
            Path(settings.output_dir),
        )
        typer.echo(f"Commands: {', '.join(COMMANDS)}")
        loop.run()


if __name__ == "__main__":
    app()
