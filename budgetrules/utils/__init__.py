"""Utility modules."""
from .logger import get_logger, configure_logging, set_source_context
from .exceptions import (
    BudgetRulesError,
    ConfigError,
    RuleError,
    TransactionImportError,
    ValidationError
)

__all__ = [
    "get_logger",
    "configure_logging",
    "set_source_context",
    "BudgetRulesError",
    "ConfigError",
    "RuleError",
    "TransactionImportError",
    "ValidationError"
]
