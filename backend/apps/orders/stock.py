from dataclasses import dataclass
from typing import Iterable, List, Tuple

from apps.carts.pricing import PricedLine


@dataclass(frozen=True)
class StockEntry:
    line: PricedLine
    requested_quantity: int
    available_quantity: int

    @property
    def in_stock(self) -> bool:
        return self.available_quantity >= self.requested_quantity


def check_stock(lines: Iterable[PricedLine]) -> Tuple[List[StockEntry], List[StockEntry]]:
    """Split cart lines into those the shelf can cover and those it cannot."""
    in_stock: List[StockEntry] = []
    out_of_stock: List[StockEntry] = []
    for line in lines:
        entry = StockEntry(
            line=line,
            requested_quantity=line.quantity,
            available_quantity=max(0, line.available),
        )
        (in_stock if entry.in_stock else out_of_stock).append(entry)
    return in_stock, out_of_stock
