"""Data models for transactions."""
from dataclasses import dataclass, asdict, field
from decimal import Decimal
from typing import Dict, Optional

from budgetrules.utils.exceptions import ValidationError

# Category assigned when no rule matches
UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class Transaction:
    """Transaction as imported from a statement."""
    id: str
    date: str  # as written on the statement
    description: str
    amount: Decimal  # negative = expense
    category: Optional[str] = None

    def with_category(self, category: str) -> "CategorizedTransaction":
        """Return a categorized copy; self is left untouched."""
        data = asdict(self)
        data["category"] = category
        return CategorizedTransaction(**data)


@dataclass(frozen=True)
class CategorizedTransaction(Transaction):
    """Transaction whose category is always set."""
    category: str

    def __post_init__(self):
        if self.category is None:
            raise ValidationError(f"Transaction {self.id} has no category")


@dataclass
class CategorySummary:
    """Per-category totals over a batch of transactions."""
    totals: Dict[str, Decimal] = field(default_factory=dict)
    counts: Dict[str, int] = field(default_factory=dict)
    transaction_count: int = 0

    @property
    def uncategorized_count(self) -> int:
        return self.counts.get(UNCATEGORIZED, 0)
