"""Command line entry point for cost quotes, sale attribution and the coupon service."""

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import structlog

from .config import FeeConfig
from .coupons import CouponBook, CouponService, add_coupon_service_to_server
from .coupons.validation import SERVICE_NAME
from .earnings import CostRates, attribute_sale, calculate_build_cost, validate_cost_rates
from .errors import PricingError
from .server import configure_logging, run_server


def quote_build(args: argparse.Namespace) -> int:
    rates = CostRates(
        price_per_gram=args.price_per_gram,
        energy_rate_per_hour=args.energy_rate,
        labor_rate_per_hour=args.labor_rate,
        flat_packaging_cost=args.packaging,
        overhead_percentage=args.overhead,
        default_margin_percentage=args.margin,
    )
    problems = validate_cost_rates(rates)
    if problems:
        for problem in problems:
            print(f"error: {problem}", file=sys.stderr)
        return 2

    breakdown = calculate_build_cost(rates, args.hours, args.grams, args.labor_hours)
    print(json.dumps(asdict(breakdown), indent=2))
    return 0


def attribute(args: argparse.Namespace) -> int:
    fees = FeeConfig.from_env()
    processor_fee_rate = (
        fees.processor_fee_rate if args.processor_fee_rate is None else args.processor_fee_rate
    )
    founder_share_rate = (
        fees.founder_share_rate if args.founder_share_rate is None else args.founder_share_rate
    )
    breakdown = attribute_sale(args.sale, args.cogs, processor_fee_rate, founder_share_rate)
    print(json.dumps(asdict(breakdown), indent=2))
    return 0


def serve_coupons(args: argparse.Namespace) -> int:
    configure_logging()
    service = CouponService(CouponBook.from_json(args.coupons))
    run_server(
        add_coupon_service_to_server,
        service,
        service_name=SERVICE_NAME,
        port=args.port,
        logger=structlog.get_logger(),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storefront-pricing",
        description="Storefront pricing and earnings tools.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    quote = commands.add_parser("quote-build", help="Estimate build cost and suggested price")
    quote.add_argument("--price-per-gram", type=float, required=True)
    quote.add_argument("--energy-rate", type=float, required=True, help="Energy cost per hour")
    quote.add_argument("--labor-rate", type=float, required=True, help="Labor cost per hour")
    quote.add_argument("--packaging", type=float, default=0.0, help="Flat packaging cost")
    quote.add_argument("--overhead", type=float, default=0.0, help="Overhead percentage (0-100)")
    quote.add_argument("--margin", type=float, default=25.0, help="Target margin percentage (0-100)")
    quote.add_argument("--hours", type=float, required=True, help="Build duration in hours")
    quote.add_argument("--grams", type=float, required=True, help="Material mass in grams")
    quote.add_argument("--labor-hours", type=float, default=None, help="Labor hours if not the build duration")
    quote.set_defaults(func=quote_build)

    attr = commands.add_parser("attribute", help="Split a sale into fees and earnings")
    attr.add_argument("--sale", type=float, required=True, help="Sale amount")
    attr.add_argument("--cogs", type=float, required=True, help="Cost of goods sold")
    attr.add_argument("--processor-fee-rate", type=float, default=None, help="0-1 fraction of the sale")
    attr.add_argument("--founder-share-rate", type=float, default=None, help="0-1 fraction of gross profit")
    attr.set_defaults(func=attribute)

    serve = commands.add_parser("serve-coupons", help="Run the coupon validation service")
    serve.add_argument("--coupons", type=Path, required=True, help="JSON file with coupon definitions")
    serve.add_argument("--port", default=None, help="TCP port (default: $PORT or 50061)")
    serve.set_defaults(func=serve_coupons)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except PricingError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
