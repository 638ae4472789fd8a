"""Tests for the rule-based classifier."""
import unittest
from decimal import Decimal

from budgetrules.classifier import Classifier, classify, find_match
from budgetrules.models import UNCATEGORIZED, Transaction, CategorizedTransaction
from budgetrules.rules.loader import load_default_rule_set
from budgetrules.rules.models import CategoryRuleSet, LiteralRule, PatternRule


class TestClassifyDefaultRules(unittest.TestCase):
    """Scenarios against the bundled example rules."""

    @classmethod
    def setUpClass(cls):
        cls.rule_set = load_default_rule_set()

    def test_literal_match(self):
        """Test a plain keyword match."""
        self.assertEqual(classify("CHIPOTLE MEXICAN GRILL #4521", self.rule_set), "Food")

    def test_literal_match_ignores_case(self):
        """Test that literal rules ignore letter casing."""
        self.assertEqual(classify("trader joe's #12", self.rule_set), "Groceries")

    def test_no_match_is_uncategorized(self):
        """Test the fallback category."""
        self.assertEqual(classify("WELLS FARGO TRANSFER", self.rule_set), UNCATEGORIZED)

    def test_earlier_category_wins(self):
        """Test that Services is chosen before the .COM shopping rule."""
        self.assertEqual(classify("NETFLIX.COM", self.rule_set), "Services")

    def test_empty_description(self):
        """Test that an empty description matches nothing."""
        self.assertEqual(classify("", self.rule_set), UNCATEGORIZED)

    def test_none_description(self):
        """Test that a missing description is treated as empty."""
        self.assertEqual(classify(None, self.rule_set), UNCATEGORIZED)

    def test_word_boundary_pattern(self):
        """Test the AWS pattern only matches the whole word."""
        self.assertEqual(classify("AMAZON AWS INVOICE", self.rule_set), "Tech Services")
        self.assertEqual(classify("AMAZON MKTPLACE", self.rule_set), "Online Shopping")


class TestClassify(unittest.TestCase):
    """Test matching order and rule semantics."""

    def test_pattern_word_boundary(self):
        """Test a \\b pattern does not match inside a longer word."""
        rule_set = CategoryRuleSet([("Tech Services", [PatternRule.compile(r"\bAWS\b", "i")])])

        self.assertEqual(classify("AMAZON AWS INVOICE", rule_set), "Tech Services")
        self.assertEqual(classify("AWESOME PRODUCT", rule_set), UNCATEGORIZED)

    def test_literal_any_casing(self):
        """Test literal matches for several casings of the description and rule."""
        rule_set = CategoryRuleSet.from_mapping({"Coffee": ["StarBucks"]})

        for description in ("STARBUCKS #1", "starbucks #1", "Starbucks #1", "sTaRbUcKs"):
            self.assertEqual(classify(description, rule_set), "Coffee")

    def test_literal_is_substring_not_word(self):
        """Test that literals match inside other words."""
        rule_set = CategoryRuleSet.from_mapping({"Transportation": ["CAR"]})
        self.assertEqual(classify("CARDI'S FURNITURE", rule_set), "Transportation")

    def test_case_sensitive_pattern(self):
        """Test that a pattern without the i flag keeps its case."""
        rule_set = CategoryRuleSet([("Tech", [PatternRule.compile(r"\bAWS\b")])])

        self.assertEqual(classify("AMAZON AWS", rule_set), "Tech")
        self.assertEqual(classify("amazon aws", rule_set), UNCATEGORIZED)

    def test_pattern_sees_original_text(self):
        """Test that patterns are not given the lowercased description."""
        rule_set = CategoryRuleSet([("Shouting", [PatternRule.compile(r"^[A-Z ]+$")])])

        self.assertEqual(classify("ALL CAPS", rule_set), "Shouting")
        self.assertEqual(classify("Mixed Case", rule_set), UNCATEGORIZED)

    def test_category_order_beats_position_in_text(self):
        """Test first-match-wins uses category order, not text position."""
        rule_set = CategoryRuleSet.from_mapping({
            "Second": ["GRILL"],
            "First": ["CHIPOTLE"],
        })
        self.assertEqual(classify("CHIPOTLE MEXICAN GRILL", rule_set), "Second")

    def test_rule_order_within_category(self):
        """Test that the first listed rule is reported."""
        first = LiteralRule("UBER")
        second = LiteralRule("UBER EATS")
        rule_set = CategoryRuleSet([("Food", [first, second])])

        match = find_match("UBER EATS ORDER", rule_set)
        self.assertEqual(match.category, "Food")
        self.assertIs(match.rule, first)

    def test_find_match_none(self):
        """Test find_match returns None without a match."""
        rule_set = CategoryRuleSet.from_mapping({"Food": ["TACO"]})
        self.assertIsNone(find_match("BOOKSTORE", rule_set))

    def test_empty_rule_set(self):
        """Test that an empty rule set classifies everything as uncategorized."""
        self.assertEqual(classify("ANYTHING", CategoryRuleSet()), UNCATEGORIZED)

    def test_idempotent(self):
        """Test repeated calls give the same answer."""
        rule_set = CategoryRuleSet([("Tech", [PatternRule.compile(r"aws", "i")])])
        results = {classify("AWS AWS AWS", rule_set) for _ in range(5)}
        self.assertEqual(results, {"Tech"})


class TestClassifier(unittest.TestCase):
    """Test Classifier functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.rule_set = CategoryRuleSet.from_mapping({
            "Food": ["CHIPOTLE"],
            "Groceries": ["SAFEWAY"],
        })
        self.classifier = Classifier(self.rule_set)
        self.transaction = Transaction(
            id="1",
            date="2025-05-01",
            description="SAFEWAY #123",
            amount=Decimal("-42.10")
        )

    def test_get_category(self):
        """Test the bound rule set is used."""
        self.assertEqual(self.classifier.get_category("chipotle 55"), "Food")
        self.assertEqual(self.classifier.get_category("SHELL OIL"), UNCATEGORIZED)

    def test_explain(self):
        """Test explain reports the winning rule."""
        match = self.classifier.explain("SAFEWAY")
        self.assertEqual(match.category, "Groceries")
        self.assertEqual(match.rule, LiteralRule("SAFEWAY"))

    def test_categorize_returns_new_transaction(self):
        """Test categorize does not modify the input."""
        result = self.classifier.categorize(self.transaction)

        self.assertIsInstance(result, CategorizedTransaction)
        self.assertEqual(result.category, "Groceries")
        self.assertEqual(result.amount, Decimal("-42.10"))
        self.assertIsNone(self.transaction.category)

    def test_categorize_keeps_existing_category(self):
        """Test an existing category is kept unless overwrite is set."""
        txn = Transaction("2", "2025-05-02", "SAFEWAY", Decimal("-5"), category="Household")

        self.assertEqual(self.classifier.categorize(txn).category, "Household")
        self.assertEqual(self.classifier.categorize(txn, overwrite=True).category, "Groceries")

    def test_categorize_blank_category_is_replaced(self):
        """Test that a blank category counts as missing."""
        txn = Transaction("3", "2025-05-03", "CHIPOTLE", Decimal("-12"), category="  ")
        self.assertEqual(self.classifier.categorize(txn).category, "Food")

    def test_categorize_all(self):
        """Test batch categorization keeps order."""
        transactions = [
            Transaction("1", "2025-05-01", "CHIPOTLE", Decimal("-10")),
            Transaction("2", "2025-05-02", "WELLS FARGO TRANSFER", Decimal("500")),
            Transaction("3", "2025-05-03", "safeway", Decimal("-30")),
        ]

        results = self.classifier.categorize_all(transactions)

        self.assertEqual(
            [txn.category for txn in results],
            ["Food", UNCATEGORIZED, "Groceries"]
        )
        self.assertEqual([txn.id for txn in results], ["1", "2", "3"])

    def test_rule_set_unchanged(self):
        """Test classification leaves the rule set as it was."""
        before = list(self.rule_set)
        self.classifier.categorize_all([self.transaction] * 3)
        self.assertEqual(list(self.rule_set), before)


if __name__ == "__main__":
    unittest.main()
