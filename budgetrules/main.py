"""Command line entry point."""
import sys
import argparse
from pathlib import Path
from typing import List, Optional

from budgetrules.aggregator import Aggregator
from budgetrules.classifier import Classifier
from budgetrules.config.settings import AppSettings
from budgetrules.importers import read_transactions_csv, write_transactions_csv
from budgetrules.models import CategorySummary
from budgetrules.rules.loader import load_default_rule_set, load_rule_set
from budgetrules.rules.models import CategoryRuleSet
from budgetrules.utils.exceptions import BudgetRulesError
from budgetrules.utils.logger import configure_logging, get_logger, set_source_context

logger = get_logger()


def _load_rules(settings: AppSettings) -> CategoryRuleSet:
    """Load the configured rule file, or the bundled defaults."""
    if settings.rules_path:
        return load_rule_set(settings.rules_path, strict=settings.rules_strict)
    return load_default_rule_set()


def classify_command(classifier: Classifier, description: str, explain: bool = False) -> None:
    """Print the category for a single description."""
    match = classifier.explain(description)
    print(classifier.get_category(description))

    if explain:
        if match:
            print(f"  matched {match.rule.describe()} in '{match.category}'")
        else:
            print("  no rule matched")


def categorize_command(
    classifier: Classifier,
    csv_path: Path,
    output: Optional[Path] = None,
    overwrite: bool = False,
    summary: bool = False
) -> None:
    """Categorize a CSV statement."""
    set_source_context(csv_path.name)
    try:
        transactions = read_transactions_csv(csv_path)
        categorized = classifier.categorize_all(transactions, overwrite=overwrite)

        if output:
            write_transactions_csv(categorized, output)
            logger.info(f"Wrote categorized statement to {output}")
        else:
            write_transactions_csv(categorized, sys.stdout)

        if summary and categorized:
            _print_summary_table(Aggregator().summarize(categorized))
    finally:
        set_source_context(None)


def _print_summary_table(result: CategorySummary) -> None:
    """Print per-category totals."""
    out = sys.stderr
    print(f"\n{'Category':<30} {'Count':>6} {'Total':>14}", file=out)
    print("-" * 52, file=out)

    for category, total in result.totals.items():
        print(f"{category:<30} {result.counts[category]:>6} {total:>14}", file=out)

    print("-" * 52, file=out)
    print(
        f"{result.transaction_count} transactions, "
        f"{result.uncategorized_count} uncategorized",
        file=out
    )


def check_rules_command(rule_set: CategoryRuleSet) -> None:
    """Print each category with its rule count."""
    print(f"{'Category':<30} {'Rules':>6}")
    print("-" * 37)

    for category, rules in rule_set:
        print(f"{category:<30} {len(rules):>6}")

    print(f"\nTotal: {len(rule_set)} categories, {rule_set.rule_count} rules")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="budgetrules",
        description="BudgetRules transaction categorizer"
    )
    parser.add_argument("--config", help="Path to budgetrules.yaml")
    parser.add_argument("--rules", help="Rule file (YAML or JSON), overrides the configuration")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    classify_parser = subparsers.add_parser("classify", help="Categorize a single description")
    classify_parser.add_argument("description", help="Transaction description")
    classify_parser.add_argument("--explain", action="store_true", help="Show the rule that matched")

    categorize_parser = subparsers.add_parser("categorize", help="Categorize a CSV statement")
    categorize_parser.add_argument("csv", type=Path, help="Statement with date, description, amount columns")
    categorize_parser.add_argument("-o", "--output", type=Path, help="Output CSV (default: stdout)")
    categorize_parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Re-categorize transactions that already have a category"
    )
    categorize_parser.add_argument("--summary", action="store_true", help="Print per-category totals")

    subparsers.add_parser("check-rules", help="Validate the rule file and list its categories")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for BudgetRules."""
    args = build_parser().parse_args(argv)

    try:
        settings = AppSettings.load(args.config)
        # --rules wins over the configured rule file
        if args.rules:
            settings.rules_path = args.rules
        is_valid, message = settings.validate()
        if not is_valid:
            logger.critical(f"Invalid configuration: {message}")
            return 1

        configure_logging(
            args.log_level or settings.log_level,
            settings.log_dir,
            settings.log_max_file_size_mb,
            settings.log_backup_count
        )

        rule_set = _load_rules(settings)

        if args.command == "check-rules":
            check_rules_command(rule_set)
            return 0

        classifier = Classifier(rule_set)

        if args.command == "classify":
            classify_command(classifier, args.description, explain=args.explain)
        elif args.command == "categorize":
            categorize_command(
                classifier,
                args.csv,
                output=args.output,
                overwrite=args.overwrite,
                summary=args.summary
            )
    except BudgetRulesError as e:
        logger.critical(f"{e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
