"""Rule and rule set models."""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence, Tuple, Union

from budgetrules.utils.exceptions import ConfigError, RuleError

# JS-style flag letters accepted in rule files
PATTERN_FLAGS: Dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}


class RuleKind(str, Enum):
    """Rule variants."""
    LITERAL = "literal"
    PATTERN = "pattern"


@dataclass(frozen=True)
class LiteralRule:
    """Case-insensitive substring match.

    Containment is not whole-word: a ``CAR`` rule also matches
    ``CARDI'S FURNITURE``. Use a pattern with ``\\b`` for whole words.
    """
    text: str
    folded: str = field(init=False, repr=False, compare=False)

    kind = RuleKind.LITERAL

    def __post_init__(self):
        if not self.text:
            raise RuleError("literal rule text must not be empty")
        object.__setattr__(self, "folded", self.text.lower())

    def matches(self, description: str, lowered: str) -> bool:
        return self.folded in lowered

    def describe(self) -> str:
        return f'literal "{self.text}"'


@dataclass(frozen=True)
class PatternRule:
    """Regular expression searched in the original description."""
    regex: "re.Pattern[str]"

    kind = RuleKind.PATTERN

    def __post_init__(self):
        if not isinstance(self.regex, re.Pattern) or not isinstance(self.regex.pattern, str):
            raise RuleError(f"pattern rule needs a compiled text regex, got {self.regex!r}")

    @classmethod
    def compile(cls, source: str, flags: str = "") -> "PatternRule":
        """
        Build a pattern rule from its source and flag letters.

        Args:
            source: Regular expression source
            flags: Flag letters, e.g. "i" for ignore case

        Raises:
            RuleError: Unknown flag or invalid expression
        """
        re_flags = 0
        for letter in flags:
            if letter not in PATTERN_FLAGS:
                raise RuleError(f"unknown pattern flag '{letter}' in /{source}/{flags}")
            re_flags |= PATTERN_FLAGS[letter]

        try:
            return cls(re.compile(source, re_flags))
        except re.error as e:
            raise RuleError(f"invalid pattern /{source}/{flags}: {e}") from e

    @property
    def case_sensitive(self) -> bool:
        return not self.regex.flags & re.IGNORECASE

    @property
    def flag_letters(self) -> str:
        return "".join(letter for letter, flag in PATTERN_FLAGS.items() if self.regex.flags & flag)

    def matches(self, description: str, lowered: str) -> bool:
        return self.regex.search(description) is not None

    def describe(self) -> str:
        return f"pattern /{self.regex.pattern}/{self.flag_letters}"


Rule = Union[LiteralRule, PatternRule]


@dataclass(frozen=True)
class RuleMatch:
    """Category and the rule that selected it."""
    category: str
    rule: Rule


def _coerce_rule(rule):
    if isinstance(rule, str):
        return LiteralRule(rule)
    if isinstance(rule, re.Pattern):
        return PatternRule(rule)
    return rule


class CategoryRuleSet:
    """Ordered, immutable mapping of category name to its rules."""

    def __init__(self, entries: Iterable[Tuple[str, Sequence[Rule]]] = ()):
        built: List[Tuple[str, Tuple[Rule, ...]]] = []
        seen = set()

        for name, rules in entries:
            if not isinstance(name, str) or not name.strip():
                raise ConfigError(f"Category name must be a non-empty string: {name!r}")
            if name in seen:
                raise ConfigError(f"Duplicate category: {name}")
            seen.add(name)

            rules = tuple(rules)
            for index, rule in enumerate(rules):
                if not isinstance(rule, (LiteralRule, PatternRule)):
                    raise RuleError(
                        f"expected a literal or pattern rule, got {type(rule).__name__}",
                        category=name,
                        index=index
                    )
            built.append((name, rules))

        self._entries: Tuple[Tuple[str, Tuple[Rule, ...]], ...] = tuple(built)
        self._index: Dict[str, Tuple[Rule, ...]] = dict(built)

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Sequence[Union[Rule, str, "re.Pattern[str]"]]]
    ) -> "CategoryRuleSet":
        """Build from a dict; plain strings become literal rules, compiled regexes pattern rules."""
        return cls(
            (name, [_coerce_rule(rule) for rule in rules])
            for name, rules in mapping.items()
        )

    def __iter__(self) -> Iterator[Tuple[str, Tuple[Rule, ...]]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, category: object) -> bool:
        return category in self._index

    def __repr__(self) -> str:
        return f"CategoryRuleSet({len(self)} categories, {self.rule_count} rules)"

    @property
    def categories(self) -> List[str]:
        return [name for name, _ in self._entries]

    @property
    def rule_count(self) -> int:
        return sum(len(rules) for _, rules in self._entries)

    def rules_for(self, category: str) -> Tuple[Rule, ...]:
        """Rules of one category, in evaluation order."""
        try:
            return self._index[category]
        except KeyError:
            raise KeyError(f"Unknown category: {category}") from None
