"""Rule file loading and validation."""
import json
from pathlib import Path
from typing import Any, List, Literal, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .models import PATTERN_FLAGS, CategoryRuleSet, LiteralRule, PatternRule, Rule
from budgetrules.utils.exceptions import ConfigError, RuleError
from budgetrules.utils.logger import get_logger

logger = get_logger()

DEFAULT_RULES_PATH = Path(__file__).parent.parent / "data" / "default_rules.yaml"


def _scalar_to_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class RuleSpec(BaseModel):
    """Pydantic schema for a single rule."""
    type: Literal["literal", "pattern"] = Field(description="Rule variant")
    value: str = Field(min_length=1, description="Substring or regular expression")
    flags: str = Field(default="", description="Pattern flag letters, e.g. 'i'")

    @field_validator("value", mode="before")
    @classmethod
    def number_as_text(cls, value: Any) -> Any:
        return _scalar_to_text(value)

    @field_validator("flags")
    @classmethod
    def check_flags(cls, flags: str) -> str:
        unknown = sorted(set(flags) - set(PATTERN_FLAGS))
        if unknown:
            raise ValueError(f"unknown flags {unknown}, expected any of {sorted(PATTERN_FLAGS)}")
        return flags


class CategorySpec(BaseModel):
    """Pydantic schema for a category and its rules."""
    name: str = Field(min_length=1)
    rules: List[Union[str, RuleSpec]] = Field(default_factory=list)

    @field_validator("rules", mode="before")
    @classmethod
    def numbers_as_literals(cls, rules: Any) -> Any:
        # A bare 76 in YAML is the gas station, not a number
        if isinstance(rules, list):
            return [_scalar_to_text(rule) for rule in rules]
        return rules

    @field_validator("name")
    @classmethod
    def strip_name(cls, name: str) -> str:
        name = name.strip()
        if not name:
            raise ValueError("category name must not be blank")
        return name


class RuleFile(BaseModel):
    """Pydantic schema for a rule file."""
    categories: List[CategorySpec]


def _build_rule(spec: Union[str, RuleSpec]) -> Rule:
    if isinstance(spec, str):
        return LiteralRule(spec)
    if spec.type == "literal":
        return LiteralRule(spec.value)
    return PatternRule.compile(spec.value, spec.flags)


def parse_rule_set(data: Any, strict: bool = True, source: str = "<memory>") -> CategoryRuleSet:
    """
    Build a rule set from already-parsed rule file data.

    Args:
        data: Parsed YAML/JSON document
        strict: Raise on the first rule that cannot be built; otherwise
            skip it with a warning
        source: Name used in log and error messages

    Returns:
        CategoryRuleSet in file order
    """
    try:
        rule_file = RuleFile.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid rule file {source}: {e}") from e

    entries = []
    skipped = 0
    for category in rule_file.categories:
        rules = []
        for index, spec in enumerate(category.rules):
            try:
                rules.append(_build_rule(spec))
            except RuleError as e:
                error = RuleError(str(e), category=category.name, index=index)
                if strict:
                    raise error from e
                logger.warning(f"Skipping rule in {source}: {error}")
                skipped += 1
        entries.append((category.name, rules))

    rule_set = CategoryRuleSet(entries)
    logger.info(
        f"Loaded {rule_set.rule_count} rules in {len(rule_set)} categories from {source}"
        + (f" ({skipped} skipped)" if skipped else "")
    )
    return rule_set


def load_rule_set(path: Union[str, Path], strict: bool = True) -> CategoryRuleSet:
    """Load a rule set from a YAML or JSON file."""
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Rule file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read rule file {path}: {e}") from e

    return parse_rule_set(data, strict=strict, source=str(path))


def load_default_rule_set() -> CategoryRuleSet:
    """Load the bundled example rules."""
    return load_rule_set(DEFAULT_RULES_PATH)
