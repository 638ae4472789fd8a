"""Categorization rules."""
from .models import RuleKind, LiteralRule, PatternRule, Rule, RuleMatch, CategoryRuleSet
from .loader import load_rule_set, load_default_rule_set, parse_rule_set

__all__ = [
    "RuleKind",
    "LiteralRule",
    "PatternRule",
    "Rule",
    "RuleMatch",
    "CategoryRuleSet",
    "load_rule_set",
    "load_default_rule_set",
    "parse_rule_set"
]
