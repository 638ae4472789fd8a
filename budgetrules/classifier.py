"""Rule-based transaction categorization."""
from typing import Iterable, List, Optional

from budgetrules.models import UNCATEGORIZED, Transaction, CategorizedTransaction
from budgetrules.rules.models import CategoryRuleSet, RuleMatch
from budgetrules.utils.logger import get_logger

logger = get_logger()


def find_match(description: Optional[str], rule_set: CategoryRuleSet) -> Optional[RuleMatch]:
    """
    Find the first rule matching a description.

    Categories are tried in rule set order and rules in listed order;
    the first hit wins. Literal rules compare against a lowercase copy
    of the description, pattern rules against the original text.

    Args:
        description: Transaction description
        rule_set: Ordered category rules

    Returns:
        RuleMatch or None if no rule matches
    """
    description = description or ""
    lowered = description.lower()

    for category, rules in rule_set:
        for rule in rules:
            if rule.matches(description, lowered):
                return RuleMatch(category, rule)

    return None


def classify(description: Optional[str], rule_set: CategoryRuleSet) -> str:
    """Return the matching category, or "Uncategorized"."""
    match = find_match(description, rule_set)
    return match.category if match else UNCATEGORIZED


class Classifier:
    """Categorizes transactions against one rule set."""

    def __init__(self, rule_set: CategoryRuleSet):
        self.rule_set = rule_set
        logger.debug(
            f"Classifier initialized with {len(rule_set)} categories, "
            f"{rule_set.rule_count} rules"
        )

    def get_category(self, description: Optional[str]) -> str:
        return classify(description, self.rule_set)

    def explain(self, description: Optional[str]) -> Optional[RuleMatch]:
        return find_match(description, self.rule_set)

    def categorize(self, transaction: Transaction, overwrite: bool = False) -> CategorizedTransaction:
        """
        Assign a category to a transaction.

        Args:
            transaction: Transaction to categorize
            overwrite: Re-classify even if the transaction already has a category

        Returns:
            New CategorizedTransaction; the input is not modified
        """
        existing = (transaction.category or "").strip()
        if existing and not overwrite:
            return transaction.with_category(existing)

        return transaction.with_category(self.get_category(transaction.description))

    def categorize_all(
        self,
        transactions: Iterable[Transaction],
        overwrite: bool = False
    ) -> List[CategorizedTransaction]:
        """Categorize a batch of transactions."""
        results = [self.categorize(txn, overwrite=overwrite) for txn in transactions]

        uncategorized = sum(1 for txn in results if txn.category == UNCATEGORIZED)
        logger.info(
            f"Categorized {len(results)} transactions "
            f"({uncategorized} uncategorized)"
        )
        return results
