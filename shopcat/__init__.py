from .driver.showcase import Catalog
from .exporter import Exporter
from .navigator import Navigator

__all__ = ["Catalog", "Exporter", "Navigator"]
