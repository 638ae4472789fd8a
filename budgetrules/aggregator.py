"""Transaction aggregation module."""
from decimal import Decimal
from collections import defaultdict, Counter
from typing import List

from .models import CategorizedTransaction, CategorySummary
from budgetrules.utils.logger import get_logger
from budgetrules.utils.exceptions import ValidationError

logger = get_logger()


class Aggregator:
    """Aggregates categorized transactions by category."""

    def summarize(self, transactions: List[CategorizedTransaction]) -> CategorySummary:
        """
        Sum amounts and count transactions per category.

        Args:
            transactions: Categorized transactions

        Returns:
            CategorySummary with categories in order of first appearance
        """
        if not transactions:
            raise ValidationError("Cannot aggregate empty transaction list")

        totals = defaultdict(Decimal)
        counts = Counter()
        for txn in transactions:
            totals[txn.category] += txn.amount
            counts[txn.category] += 1

        logger.info(
            f"Aggregated {len(transactions)} transactions into {len(totals)} categories"
        )

        return CategorySummary(
            totals=dict(totals),
            counts=dict(counts),
            transaction_count=len(transactions)
        )
