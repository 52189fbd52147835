r"""Repository.

`ProductService` talks to a `ProductRepository` and never knows whether
products live in a dict or in a file. Two implementations share one
contract:

  - `InMemoryProductRepository`: a keyed mapping, gone when the process ends
  - `FileProductRepository`: the same mapping, loaded lazily from and written
    through to ``products.txt`` (one ``id,name,price,stock`` line per product,
    no header)

Listing operations return products ordered by id.
"""

from __future__ import annotations

import csv
import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, MutableMapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, Fatal, Narrator
from ..mixin import MappingMutatorMixin

__all__ = [
    "Product",
    "ProductRepository",
    "InMemoryProductRepository",
    "FileProductRepository",
    "ProductService",
]

logger = logging.getLogger(__name__)


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0)
    name: str
    price: float = Field(ge=0)
    stock: int = Field(ge=0)

    def __str__(self) -> str:
        return f"Product{{id={self.id}, name='{self.name}', price={self.price:.2f}, stock={self.stock}}}"


# -----------------------------------------------------------------------------
# Repository Contract
# -----------------------------------------------------------------------------


class ProductRepository(ABC):
    @abstractmethod
    def save(self, product: Product) -> bool: ...

    @abstractmethod
    def find_by_id(self, product_id: int) -> Optional[Product]: ...

    @abstractmethod
    def find_all(self) -> List[Product]: ...

    @abstractmethod
    def update(self, product: Product) -> bool: ...

    @abstractmethod
    def delete_by_id(self, product_id: int) -> bool: ...

    @abstractmethod
    def count(self) -> int: ...

    def find_by_name(self, fragment: str) -> List[Product]:
        return [p for p in self.find_all() if fragment in p.name]

    def find_by_price_range(self, low: float, high: float) -> List[Product]:
        return [p for p in self.find_all() if low <= p.price <= high]

    def find_by_stock(self, minimum: int) -> List[Product]:
        return [p for p in self.find_all() if p.stock >= minimum]


class InMemoryProductRepository(MappingMutatorMixin[int, Product], ProductRepository):
    def __init__(self):
        self._products: Dict[int, Product] = {}

    def _get_mapping(self) -> MutableMapping[int, Product]:
        return self._products

    def save(self, product: Product) -> bool:
        self._put_artifact(product.id, product)
        return True

    def find_by_id(self, product_id: int) -> Optional[Product]:
        if product_id < 0 or not self._has_identifier(product_id):
            return None
        return self._get_artifact(product_id)

    def find_all(self) -> List[Product]:
        return [self._get_artifact(key) for key in sorted(self._iter_mapping())]

    def update(self, product: Product) -> bool:
        if not self._has_identifier(product.id):
            return False
        self._update_artifact(product.id, product)
        return True

    def delete_by_id(self, product_id: int) -> bool:
        if not self._has_identifier(product_id):
            return False
        self._del_artifact(product_id)
        return True

    def count(self) -> int:
        return self._len_mapping()


class FileProductRepository(InMemoryProductRepository):
    """Write-through repository backed by a CSV file.

    The file is read on first use. Lines that do not parse are logged and
    skipped. Every successful mutation rewrites the whole file.
    """

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)
        self._loaded = False

    def _get_mapping(self) -> MutableMapping[int, Product]:
        if not self._loaded:
            self._loaded = True
            self._load()
        return self._products

    def _load(self) -> None:
        if not self.path.exists():
            return
        with self.path.open("r", newline="", encoding="utf-8") as handle:
            for row in csv.reader(handle):
                if len(row) != 4:
                    logger.warning("skipping malformed line in %s: %r", self.path, row)
                    continue
                try:
                    product = Product(id=int(row[0]), name=row[1], price=float(row[2]), stock=int(row[3]))
                except (ValueError, PydanticValidationError) as exc:
                    logger.warning("skipping unparsable line in %s: %r (%s)", self.path, row, exc)
                    continue
                self._products[product.id] = product

    def _flush(self) -> None:
        try:
            with self.path.open("w", newline="", encoding="utf-8") as handle:
                writer = csv.writer(handle, lineterminator="\n")
                for product in self.find_all():
                    writer.writerow([product.id, product.name, product.price, product.stock])
        except OSError as exc:
            raise Fatal(
                f"Cannot open file for writing: {self.path}",
                ["Check that the run's working directory is writable"],
                {"participant": "FileProductRepository", "operation": "save"},
            ) from exc

    def save(self, product: Product) -> bool:
        super().save(product)
        self._flush()
        return True

    def update(self, product: Product) -> bool:
        if not super().update(product):
            return False
        self._flush()
        return True

    def delete_by_id(self, product_id: int) -> bool:
        if not super().delete_by_id(product_id):
            return False
        self._flush()
        return True


# -----------------------------------------------------------------------------
# Service
# -----------------------------------------------------------------------------


class ProductService:
    def __init__(self, repository: ProductRepository, narrator: Narrator):
        self.repository = repository
        self.narrator = narrator

    def _product(self, product_id: int, name: str, price: float, stock: int, action: str) -> Optional[Product]:
        try:
            return Product(id=product_id, name=name, price=price, stock=stock)
        except PydanticValidationError as exc:
            reasons = "; ".join(f"{e['loc'][0]}: {e['msg']}" for e in exc.errors())
            self.narrator.say(f"Error {action} product: {reasons}")
            return None

    def add_product(self, product_id: int, name: str, price: float, stock: int) -> bool:
        product = self._product(product_id, name, price, stock, "adding")
        return product is not None and self.repository.save(product)

    def get_product(self, product_id: int) -> Optional[Product]:
        return self.repository.find_by_id(product_id)

    def get_all_products(self) -> List[Product]:
        return self.repository.find_all()

    def update_product(self, product_id: int, name: str, price: float, stock: int) -> bool:
        product = self._product(product_id, name, price, stock, "updating")
        return product is not None and self.repository.update(product)

    def remove_product(self, product_id: int) -> bool:
        return self.repository.delete_by_id(product_id)

    def search_by_name(self, fragment: str) -> List[Product]:
        return self.repository.find_by_name(fragment)

    def products_in_price_range(self, low: float, high: float) -> List[Product]:
        return self.repository.find_by_price_range(low, high)

    def available_products(self, minimum: int = 1) -> List[Product]:
        return self.repository.find_by_stock(minimum)

    def product_count(self) -> int:
        return self.repository.count()

    def print_all_products(self) -> None:
        say = self.narrator.say
        products = self.get_all_products()
        if not products:
            say("No products found.")
            return
        say(f"All Products ({len(products)}):")
        say(f"{'ID':<6}{'Name':<18}{'Price':>10}{'Stock':>7}")
        say("-" * 41)
        for product in products:
            say(f"{product.id:<6}{product.name:<18}{'$' + format(product.price, '.2f'):>10}{product.stock:>7}")


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("repository", "Repository Pattern", "architectural", "In-memory and file-backed product repositories")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Repository Pattern Demo ===\n")

    say("1. In-Memory Repository Demo:")
    service = ProductService(InMemoryProductRepository(), narrator)
    service.add_product(1, "Laptop", 999.99, 10)
    service.add_product(2, "Mouse", 25.50, 50)
    service.add_product(3, "Keyboard", 75.00, 25)
    service.add_product(4, "Monitor", 299.99, 15)
    service.add_product(5, "Broken Cable", -3.0, 5)
    say("\nProducts added. Current inventory:")
    service.print_all_products()

    say("\nFinding product with ID 2:")
    product = service.get_product(2)
    say(f"Found: {product}" if product is not None else "Product not found")
    say(f"Finding product with ID -1: {service.get_product(-1) or 'Product not found'}")

    say("\nSearching for products containing 'Key':")
    for match in service.search_by_name("Key"):
        say(f"Found: {match}")

    say("\nProducts between $20 and $100:")
    for match in service.products_in_price_range(20.0, 100.0):
        say(str(match))

    say("\nProducts with at least 20 in stock:")
    for match in service.available_products(20):
        say(str(match))

    say("\nUpdating product ID 1:")
    if service.update_product(1, "Gaming Laptop", 1299.99, 8):
        say("Product updated successfully")
        say(f"Updated: {service.get_product(1)}")
    say(f"Updating missing product ID 42: {service.update_product(42, 'Ghost', 1.0, 1)}")

    say("\nDeleting product ID 2:")
    if service.remove_product(2):
        say("Product deleted successfully")
        say("Remaining products:")
        service.print_all_products()

    say("\n2. File Repository Demo:")
    path = ctx.workdir / "products.txt"
    if path.exists():
        path.unlink()
    file_service = ProductService(FileProductRepository(path), narrator)
    file_service.add_product(100, "File Product 1", 49.99, 20)
    file_service.add_product(101, "File Product 2", 89.99, 15)
    say("\nProducts saved to file:")
    file_service.print_all_products()

    say("\nLoading from file (new repository instance):")
    reloaded = ProductService(FileProductRepository(path), narrator)
    reloaded.print_all_products()
    say(f"Product count: {reloaded.product_count()}")


if __name__ == "__main__":
    sys.exit(run_standalone("repository"))
