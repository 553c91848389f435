"""Tests for product export."""

import csv
import json

import pytest
from unittest.mock import patch

from shopcat.errors import UnsupportedFormat, WriteFailed
from shopcat.exporter import Exporter
from shopcat.model import Category, ExportFormat, FetchResult, Product
from shopcat.navigator import Navigator


@pytest.fixture
def exporter():
    return Exporter()


@pytest.fixture
def sample_products():
    return [
        Product(name="Milk", price="99", url="http://x/milk"),
        Product(name="Cheese, aged", price="1,299.00", url="http://x/cheese?a=1,2"),
        Product(name='Yogurt "Greek"', price="45", url="http://x/yogurt"),
        Product(name="Сыр «Российский»", price="650 ₽", url="http://x/syr"),
    ]


class TestJsonExport:
    """Test cases for JSON export."""

    def test_round_trip(self, exporter, sample_products, tmp_path):
        destination = tmp_path / "products.json"

        path = exporter.export(sample_products, ExportFormat.json, destination)

        assert path == destination
        data = json.loads(destination.read_text(encoding="utf-8"))
        assert len(data) == len(sample_products)
        assert [Product(**record) for record in data] == sample_products

    def test_field_names_and_order(self, exporter, sample_products, tmp_path):
        destination = tmp_path / "products.json"

        exporter.export(sample_products, "json", destination)

        data = json.loads(destination.read_text(encoding="utf-8"))
        assert all(list(record) == ["name", "price", "url"] for record in data)

    def test_non_ascii_is_written_as_utf8(self, exporter, sample_products, tmp_path):
        destination = tmp_path / "products.json"

        exporter.export(sample_products, "json", destination)

        assert "Сыр «Российский»" in destination.read_text(encoding="utf-8")

    def test_empty_list(self, exporter, tmp_path):
        destination = tmp_path / "products.json"

        exporter.export([], "json", destination)

        assert json.loads(destination.read_text(encoding="utf-8")) == []

    def test_format_token_is_case_insensitive(self, exporter, sample_products, tmp_path):
        destination = tmp_path / "products.json"

        exporter.export(sample_products, " JSON ", destination)

        assert destination.exists()

    def test_creates_missing_directory(self, exporter, sample_products, tmp_path):
        destination = tmp_path / "out" / "nested" / "products.json"

        exporter.export(sample_products, "json", destination)

        assert destination.exists()

    def test_dairy_scenario(self, exporter, tmp_path):
        """Dairy has no subcategories and one product, exported as JSON."""

        class Catalog:
            def fetch_categories(self, parent_id=None):
                if parent_id is None:
                    return FetchResult[Category](
                        items=[Category(id="1", name="Fruits"), Category(id="2", name="Dairy")]
                    )
                return FetchResult[Category](items=[])

            def fetch_products(self, category_id):
                assert category_id == "2"
                return FetchResult[Product](
                    items=[Product(name="Milk", price="99", url="http://x/milk")]
                )

        navigator = Navigator(Catalog())
        listing = navigator.list_top_level().items
        step = navigator.step(navigator.choose(listing, "2"))
        destination = tmp_path / "products.json"

        exporter.export(step.products.items, "json", destination)

        data = json.loads(destination.read_text(encoding="utf-8"))
        assert data == [{"name": "Milk", "price": "99", "url": "http://x/milk"}]


class TestCsvExport:
    """Test cases for delimited-text export."""

    def read_rows(self, path, encoding="utf-8"):
        with open(path, newline="", encoding=encoding) as f:
            return list(csv.reader(f))

    def test_header_row(self, exporter, sample_products, tmp_path):
        destination = tmp_path / "products.csv"

        exporter.export(sample_products, ExportFormat.csv, destination)

        rows = self.read_rows(destination)
        assert rows[0] == ["Name", "Price", "URL"]

    def test_round_trip_with_delimiters(self, exporter, sample_products, tmp_path):
        destination = tmp_path / "products.csv"

        exporter.export(sample_products, "csv", destination)

        rows = self.read_rows(destination)[1:]
        assert len(rows) == len(sample_products)
        assert [Product(name=n, price=p, url=u) for n, p, u in rows] == sample_products

    def test_round_trip_with_embedded_newline(self, exporter, tmp_path):
        products = [Product(name="Milk\n1 l", price="99", url="http://x/milk")]
        destination = tmp_path / "products.csv"

        exporter.export(products, "csv", destination)

        rows = self.read_rows(destination)
        assert rows[1] == ["Milk\n1 l", "99", "http://x/milk"]

    def test_localized_header(self, sample_products, tmp_path):
        destination = tmp_path / "products.csv"

        Exporter(locale="ru").export(sample_products, "csv", destination)

        assert destination.read_bytes().startswith(b"\xef\xbb\xbf")
        rows = self.read_rows(destination, encoding="utf-8-sig")
        assert rows[0] == ["Название", "Цена", "Ссылка"]
        assert rows[4][0] == "Сыр «Российский»"

    def test_unknown_locale(self):
        with pytest.raises(ValueError):
            Exporter(locale="xx")


class TestExportErrors:
    """Test cases for export failure handling."""

    def test_unsupported_format(self, exporter, sample_products, tmp_path):
        destination = tmp_path / "products.xml"

        with pytest.raises(UnsupportedFormat) as exc_info:
            exporter.export(sample_products, "xml", destination)

        assert exc_info.value.token == "xml"
        assert not destination.exists()
        assert list(tmp_path.iterdir()) == []

    def test_unsupported_format_leaves_existing_file(self, exporter, sample_products, tmp_path):
        destination = tmp_path / "products.json"
        destination.write_text("previous", encoding="utf-8")

        with pytest.raises(UnsupportedFormat):
            exporter.export(sample_products, "xml", destination)

        assert destination.read_text(encoding="utf-8") == "previous"

    def test_failed_rename_leaves_destination(self, exporter, sample_products, tmp_path):
        destination = tmp_path / "products.json"
        destination.write_text("previous", encoding="utf-8")

        with patch("shopcat.exporter.os.replace", side_effect=OSError(28, "No space left on device")):
            with pytest.raises(WriteFailed) as exc_info:
                exporter.export(sample_products, "json", destination)

        assert isinstance(exc_info.value.cause, OSError)
        assert exc_info.value.__cause__ is exc_info.value.cause
        assert destination.read_text(encoding="utf-8") == "previous"
        assert [p.name for p in tmp_path.iterdir()] == ["products.json"]

    def test_failure_mid_write_leaves_no_file(self, exporter, sample_products, tmp_path):
        destination = tmp_path / "products.csv"

        with patch("shopcat.exporter.csv.writer", side_effect=OSError(28, "No space left on device")):
            with pytest.raises(WriteFailed) as exc_info:
                exporter.export(sample_products, "csv", destination)

        assert "No space left on device" in str(exc_info.value)
        assert list(tmp_path.iterdir()) == []

    def test_destination_is_directory(self, exporter, sample_products, tmp_path):
        destination = tmp_path / "products.json"
        destination.mkdir()

        with pytest.raises(WriteFailed):
            exporter.export(sample_products, "json", destination)

        assert destination.is_dir()
        assert [p.name for p in tmp_path.iterdir()] == ["products.json"]

    @pytest.mark.parametrize("fmt", ["json", "csv"])
    def test_unencodable_text(self, exporter, tmp_path, fmt):
        products = [Product(name="Milk\ud800", price="1", url="http://x/m")]
        destination = tmp_path / f"products.{fmt}"
        destination.write_text("previous", encoding="utf-8")

        with pytest.raises(WriteFailed) as exc_info:
            exporter.export(products, fmt, destination)

        assert isinstance(exc_info.value.cause, UnicodeEncodeError)
        assert exc_info.value.__cause__ is exc_info.value.cause
        assert destination.read_text(encoding="utf-8") == "previous"
        assert [p.name for p in tmp_path.iterdir()] == [f"products.{fmt}"]
