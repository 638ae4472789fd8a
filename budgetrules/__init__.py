"""BudgetRules: rule-based transaction categorization."""
from .models import UNCATEGORIZED, Transaction, CategorizedTransaction, CategorySummary
from .classifier import Classifier, classify, find_match
from .rules import CategoryRuleSet, LiteralRule, PatternRule, load_rule_set, load_default_rule_set

__version__ = "0.1.0"

__all__ = [
    "UNCATEGORIZED",
    "Transaction",
    "CategorizedTransaction",
    "CategorySummary",
    "Classifier",
    "classify",
    "find_match",
    "CategoryRuleSet",
    "LiteralRule",
    "PatternRule",
    "load_rule_set",
    "load_default_rule_set"
]
