"""CLI entry point for pantry-vision."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

from .categories import categorize_grocery_item, expiry_days_for
from .config import load_config
from .gateway import VisionAnalysisGateway, encode_image


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="pantry-vision",
        description="Grocery photo analysis: detect pantry items with AI vision",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to a configuration file (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show provider log messages"
    )

    sub = parser.add_subparsers(dest="command")

    # analyze
    analyze_parser = sub.add_parser("analyze", help="Detect grocery items in photos")
    analyze_parser.add_argument(
        "--image", type=str, nargs="+", required=True, help="JPEG image files"
    )
    analyze_parser.add_argument("--json", action="store_true", help="Print JSON")

    # categorize
    cat_parser = sub.add_parser("categorize", help="Guess categories for food names")
    cat_parser.add_argument("names", nargs="+", help="Food names")
    cat_parser.add_argument("--json", action="store_true", help="Print JSON")

    # check-keys
    keys_parser = sub.add_parser("check-keys", help="Smoke-test the provider API keys")
    keys_parser.add_argument(
        "--provider",
        choices=["openai", "gemini", "vision", "all"],
        default="all",
        help="Which check to run",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    load_dotenv()
    config = load_config(args.config)

    match args.command:
        case "analyze":
            asyncio.run(_cmd_analyze(config, args))
        case "categorize":
            _cmd_categorize(args)
        case "check-keys":
            ok = asyncio.run(_cmd_check_keys(config, args))
            if not ok:
                sys.exit(1)


async def _cmd_analyze(config, args) -> None:
    async with VisionAnalysisGateway.from_config(config) as gateway:
        print("🔍 Analyzing groceries...", file=sys.stderr)
        if len(args.image) == 1:
            result = await gateway.analyze_file(args.image[0])
        else:
            photos = [encode_image(path) for path in args.image]
            result = await gateway.analyze_many(photos)

    reliable = [
        i for i in result.items if i.confidence >= config.vision.min_confidence
    ]

    if args.json:
        data = result.to_dict()
        data["items"] = [i.to_dict() for i in reliable]
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    if result.message:
        print(f"ℹ  {result.message}")
    if not reliable:
        print("No grocery items detected.")
        return
    print(f"\n🥬 Detected items ({len(reliable)}, via {result.method}):")
    for i in sorted(reliable, key=lambda x: x.confidence, reverse=True):
        bar = "█" * int(i.confidence * 10)
        qty = f"{i.quantity:g} {i.unit}"
        print(
            f"  {i.name:<20} {qty:<12} {i.confidence:.0%} {bar}  "
            f"[{i.category}] expires ~{i.expiry_date}"
        )


def _cmd_categorize(args) -> None:
    rows = []
    for name in args.names:
        category = categorize_grocery_item(name)
        rows.append(
            {"name": name, "category": category, "expiryDays": expiry_days_for(category)}
        )

    if args.json:
        print(json.dumps(rows, ensure_ascii=False, indent=2))
        return
    for row in rows:
        print(f"  {row['name']:<20} {row['category']:<10} ~{row['expiryDays']} days")


async def _cmd_check_keys(config, args) -> bool:
    from .smoke import check_gemini, check_openai, check_vision
    from .vision import create_provider

    results = []
    if args.provider in ("openai", "all"):
        print("📡 Testing OpenAI API connectivity...")
        results.append(
            await check_openai(
                config.vision.openai.api_key,
                base_url=config.vision.openai.base_url,
            )
        )
    if args.provider in ("gemini", "all"):
        print("📡 Testing Gemini API connectivity...")
        results.append(await check_gemini(config.vision.gemini.api_key))
    if args.provider in ("vision", "all"):
        print("🎯 Testing vision providers on a sample image...")
        providers = [
            create_provider(name, config)
            for name in config.vision.providers
            if name != "mock"
        ]
        try:
            results.extend(await check_vision(providers))
        finally:
            for provider in providers:
                close = getattr(provider, "aclose", None)
                if close is not None:
                    await close()

    for r in results:
        mark = "✅" if r.ok else "❌"
        print(f"{mark} {r.provider}: {r.detail}")
        for model in r.models:
            print(f"    - {model}")

    return all(r.ok for r in results)
