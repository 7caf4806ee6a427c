"""
Sort parameter parsing for the top-products table.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

DEFAULT_SORT = "amount-desc"


class SortKey(str, Enum):
    """Sortable columns of the top-products ranking."""

    NAME = "name"
    PRICE = "price"
    CATEGORY = "category"
    QUANTITY = "quantity"
    AMOUNT = "amount"

    @property
    def column(self) -> str:
        """Label of the result column this key orders by."""
        return _SORT_COLUMNS[self]


_SORT_COLUMNS: dict[SortKey, str] = {
    SortKey.NAME: "product_name",
    SortKey.PRICE: "price",
    SortKey.CATEGORY: "category_name",
    SortKey.QUANTITY: "total_quantity",
    SortKey.AMOUNT: "total_amount",
}


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortSpec:
    key: SortKey = SortKey.AMOUNT
    direction: SortDirection = SortDirection.DESC

    @property
    def sort_key(self) -> str:
        return self.key.column

    @property
    def sort_order(self) -> str:
        return self.direction.value.upper()

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC


def parse_sort(sort: Optional[str]) -> SortSpec:
    """
    Parse a `"<key>-<direction>"` sort string, e.g. `"amount-desc"`.

    Unknown keys fall back to `amount`; anything other than `asc` sorts
    descending.
    """
    raw_key, _, raw_direction = (sort or DEFAULT_SORT).partition("-")

    try:
        key = SortKey(raw_key.strip().lower())
    except ValueError:
        key = SortKey.AMOUNT

    direction = SortDirection.ASC if raw_direction.strip().lower() == "asc" else SortDirection.DESC
    return SortSpec(key=key, direction=direction)
