"""Custom exception classes for BudgetRules."""
from typing import Optional


class BudgetRulesError(Exception):
    """Base exception for BudgetRules."""
    pass


class ConfigError(BudgetRulesError):
    """Configuration-related errors."""
    pass


class RuleError(ConfigError):
    """A single rule could not be built from its definition."""

    def __init__(self, message: str, category: Optional[str] = None, index: Optional[int] = None):
        self.category = category
        self.index = index
        if category is not None:
            location = f"category '{category}'"
            if index is not None:
                location += f", rule #{index + 1}"
            message = f"{location}: {message}"
        super().__init__(message)


class TransactionImportError(BudgetRulesError):
    """Statement import errors."""
    pass


class ValidationError(BudgetRulesError):
    """Data validation errors."""
    pass
