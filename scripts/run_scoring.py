#!/usr/bin/env python3
"""
Scoring Runner

Scores a JSON document of metric inputs and prints the result as JSON.

Input document (camelCase keys, any metric may be omitted with --partial):
    {
        "companyName": "Acme",
        "authorityLinks": {"actualLinks": 120, "monthlySpend": 5000, "investmentMonths": 12},
        "authorityDomains": {"clientDomains": 150, "competitorDomains": [180, 200, 160]},
        "trafficGrowth": {...},
        "rankingImprovements": {...},
        "aiVisibility": {...},
        "contentGap": {...}
    }

Usage:
    python scripts/run_scoring.py metrics.json
    python scripts/run_scoring.py metrics.json --partial
    cat metrics.json | python scripts/run_scoring.py -
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from src.reporter import build_score_summary, generate_red_flag_commentary
from src.scoring import (
    AuthorityLinksData,
    MalformedInputError,
    MetricName,
    ScoringEngine,
    ScoringPolicy,
    ValidationError,
)
from src.utils.config import get_settings

logger = logging.getLogger(__name__)

PARTIAL_ARGUMENTS = {
    MetricName.AUTHORITY_LINKS: "authority_links",
    MetricName.AUTHORITY_DOMAINS: "authority_domains",
    MetricName.TRAFFIC_GROWTH: "traffic_growth",
    MetricName.RANKING_IMPROVEMENTS: "ranking_improvements",
    MetricName.AI_VISIBILITY: "ai_visibility",
}


def load_document(source: str) -> dict:
    """Read the input document from a path, or stdin for '-'."""
    if source == "-":
        return json.load(sys.stdin)
    with open(source, encoding="utf-8") as f:
        return json.load(f)


def run_scoring(document: dict, partial: bool = False) -> dict:
    """
    Score an input document.

    Raises:
        ValidationError: spend or duration below the minimums
        MalformedInputError: a metric record is missing required fields
    """
    engine = ScoringEngine(ScoringPolicy.from_settings())

    if partial:
        metrics = {
            argument: document[metric.value]
            for metric, argument in PARTIAL_ARGUMENTS.items()
            if document.get(metric.value) is not None
        }
        return engine.calculate_partial_score(**metrics).to_dict()

    overall = engine.calculate_overall_score(
        document.get(MetricName.AUTHORITY_LINKS.value),
        document.get(MetricName.AUTHORITY_DOMAINS.value),
        document.get(MetricName.TRAFFIC_GROWTH.value),
        document.get(MetricName.RANKING_IMPROVEMENTS.value),
        document.get(MetricName.AI_VISIBILITY.value),
        content_gap=document.get("contentGap"),
    )

    links = AuthorityLinksData.parse(document[MetricName.AUTHORITY_LINKS.value])

    result = overall.to_dict()
    result["summary"] = build_score_summary(overall)
    result["redFlagCommentary"] = generate_red_flag_commentary(
        overall.red_flags,
        monthly_spend=links.monthly_spend,
        investment_months=links.investment_months,
        company_name=document.get("companyName", "Your company"),
    )
    return result


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Score SEO performance metrics and print the result as JSON"
    )
    parser.add_argument(
        "input",
        help="Path to a JSON document of metric inputs ('-' for stdin)"
    )
    parser.add_argument(
        "--partial",
        action="store_true",
        help="Score only the metrics present in the document"
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)"
    )

    args = parser.parse_args()

    load_dotenv()
    settings = get_settings()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        document = load_document(args.input)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read input document {args.input}: {e}")
        print(json.dumps({"error": f"Could not read input document: {e}"}, indent=args.indent))
        sys.exit(1)

    if not isinstance(document, dict):
        print(json.dumps(
            {"error": f"Input document must be a JSON object, got {type(document).__name__}"},
            indent=args.indent,
        ))
        sys.exit(1)

    try:
        result = run_scoring(document, partial=args.partial)
    except ValidationError as e:
        print(json.dumps({"isValid": False, "errors": e.errors}, indent=args.indent))
        sys.exit(1)
    except MalformedInputError as e:
        print(json.dumps({"metric": e.metric, "errors": e.errors}, indent=args.indent))
        sys.exit(1)

    print(json.dumps(result, indent=args.indent))


if __name__ == "__main__":
    main()
