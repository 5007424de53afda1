import json
from pathlib import Path
from typing import Any, Dict, List, Union


class CatalogError(Exception):
    pass


class ProductNotFoundError(CatalogError):
    def __init__(self, name: str, available: List[str]):
        self.name = name
        self.available = available
        super().__init__(f'Product "{name}" not found.')

    def as_dict(self) -> Dict[str, Any]:
        return {"error": str(self), "availableProducts": self.available}


def load_store_data(path: Union[str, Path]) -> Dict[str, Any]:
    # Elke call opnieuw lezen: wijzigingen in de JSON zijn direct zichtbaar
    return json.loads(Path(path).read_text(encoding="utf-8"))


def get_categories(data: Dict[str, Any]) -> Dict[str, Any]:
    return {"categories": data.get("categories", [])}


def find_product(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Zoek een product op naam (case-insensitive, spaties genegeerd)."""
    products = data.get("products", [])
    target = name.strip().lower()
    for product in products:
        if product["name"].lower() == target:
            return {
                "name": product["name"],
                "category": product.get("category"),
                "price": product.get("price"),
                "description": product.get("description"),
                "picture": product.get("picture"),
            }
    raise ProductNotFoundError(name, [p["name"] for p in products])


def get_discount_policy(data: Dict[str, Any]) -> Dict[str, Any]:
    return {"discountPolicy": data.get("discountPolicy")}
