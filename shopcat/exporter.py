"""Export product listings to JSON or CSV files."""

import contextlib
import csv
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Iterable, TextIO

from .errors import WriteFailed
from .model import ExportFormat, Product

logger = logging.getLogger(__name__)

FIELDS = ("name", "price", "url")

HEADERS = {
    "en": ("Name", "Price", "URL"),
    "ru": ("Название", "Цена", "Ссылка"),
}


class Exporter:
    """Writes products to disk, replacing the destination atomically."""

    def __init__(self, locale: str = "en"):
        if locale not in HEADERS:
            raise ValueError(
                f"Unknown export locale '{locale}'. Available locales: {', '.join(HEADERS)}"
            )
        self.locale = locale

    def export(
        self,
        products: Iterable[Product],
        fmt: ExportFormat | str,
        destination: str | os.PathLike,
    ) -> Path:
        """Write ``products`` to ``destination`` in the given format.

        Raises UnsupportedFormat before touching the filesystem, and
        WriteFailed if the file could not be written. In both cases an
        existing destination is left as it was.
        """
        fmt = ExportFormat.parse(fmt)
        destination = Path(destination)
        products = list(products)

        if fmt is ExportFormat.json:
            writer, encoding = self._write_json, "utf-8"
        else:
            writer = self._write_csv
            # Excel only detects UTF-8 with a BOM
            encoding = "utf-8" if self.locale == "en" else "utf-8-sig"

        try:
            self._write_atomic(destination, lambda f: writer(f, products), encoding)
        except (OSError, UnicodeError) as e:
            logger.error(f"Export to {destination} failed: {e}")
            raise WriteFailed(destination, e) from e

        logger.info(f"Exported {len(products)} products to {destination} as {fmt.value}")
        return destination

    def _write_json(self, f: TextIO, products: list[Product]) -> None:
        json.dump(
            [product.model_dump(include=set(FIELDS)) for product in products],
            f,
            ensure_ascii=False,
            indent=2,
        )
        f.write("\n")

    def _write_csv(self, f: TextIO, products: list[Product]) -> None:
        writer = csv.writer(f)
        writer.writerow(HEADERS[self.locale])
        for product in products:
            writer.writerow([getattr(product, field) for field in FIELDS])

    def _write_atomic(
        self, destination: Path, write: Callable[[TextIO], None], encoding: str
    ) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            "w",
            dir=destination.parent,
            prefix=f".{destination.name}.",
            suffix=".tmp",
            delete=False,
            encoding=encoding,
            newline="",
        ) as tmp:
            tmp_path = tmp.name
            try:
                write(tmp)
                tmp.flush()
                os.fsync(tmp.fileno())
            except BaseException:
                tmp.close()
                os.unlink(tmp_path)
                raise

        try:
            os.replace(tmp_path, destination)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_path)
            raise
