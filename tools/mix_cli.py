#!/usr/bin/env python3
"""
CLI tool for generating flavor mixes from the command line.
Usage: python tools/mix_cli.py --query "fresh and fruity"
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from openai import OpenAIError

sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import get_settings
from flavormix.core.catalog import FirestoreCatalogStore, JsonCatalogStore
from flavormix.core.model_interface import CompletionManager
from flavormix.core.pipeline import MixPipeline
from flavormix.core.prompt_builder import build_prompt, render_flavor
from flavormix.errors import UpstreamFailure


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate a hookah flavor mix from the flavor catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python tools/mix_cli.py --query "fresh and fruity"
  python tools/mix_cli.py -q "sweet dessert" --live
  python tools/mix_cli.py -q "minty" --show-prompt
  python tools/mix_cli.py --list-flavors
        """
    )

    parser.add_argument(
        "-q", "--query",
        type=str,
        help="Description of the mix you want"
    )

    parser.add_argument(
        "--user-id",
        type=str,
        default="cli",
        help="User identifier sent with the request (default: cli)"
    )

    parser.add_argument(
        "--live",
        action="store_true",
        help="Use Firestore and OpenAI instead of the local catalog and mock model"
    )

    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Path to data directory (default: from settings)"
    )

    parser.add_argument(
        "--list-flavors",
        action="store_true",
        help="List all flavors in the catalog"
    )

    parser.add_argument(
        "--show-prompt",
        action="store_true",
        help="Print the rendered prompt before generating"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON"
    )

    return parser.parse_args()


def build_catalog(args, settings):
    """Create the catalog store selected on the command line."""
    if args.live:
        store = FirestoreCatalogStore(
            collection=settings.flavor_collection,
            project_id=settings.firestore_project
        )
        store.connect()
        return store
    return JsonCatalogStore(args.data_dir or settings.data_dir, settings.catalog_file)


async def run(args) -> int:
    settings = get_settings()
    catalog = None
    manager = CompletionManager()

    try:
        try:
            catalog = build_catalog(args, settings)
        except Exception as e:
            print(f"Error: could not connect to the flavor catalog: {e}", file=sys.stderr)
            return 1

        if args.list_flavors or args.show_prompt:
            try:
                flavors = await catalog.fetch_all()
            except UpstreamFailure as e:
                print(f"Error: {e.message}", file=sys.stderr)
                return 1
            if args.list_flavors:
                if args.json:
                    print(json.dumps({"flavors": [f.to_dict() for f in flavors]}, indent=2))
                else:
                    print(f"Catalog has {len(flavors)} flavors:")
                    for flavor in flavors:
                        print(f"  - {render_flavor(flavor)}")
                return 0
            if args.query:
                print(build_prompt(flavors, args.query))
                print()

        if not args.query:
            print("Error: --query is required (or use --list-flavors)", file=sys.stderr)
            return 1

        try:
            client = manager.initialize(
                use_mock=not args.live,
                model=settings.openai_model,
                api_key=settings.openai_api_key
            )
        except OpenAIError as e:
            print(f"Error: could not create the completion client: {e}", file=sys.stderr)
            return 1

        pipeline = MixPipeline(catalog, client, max_tokens=settings.max_tokens)
        outcome = await pipeline.run({"userId": args.user_id, "query": args.query})
    finally:
        await manager.shutdown()
        if catalog is not None:
            await catalog.close()

    if not outcome.ok:
        if args.json:
            print(json.dumps({"error": {"message": outcome.error.message, "status": outcome.error.status}}, indent=2))
        else:
            print(f"Error: {outcome.error.message}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(outcome.result.model_dump(), indent=2))
    else:
        print(outcome.result.response)
    return 0


def main():
    """Main CLI entry point."""
    sys.exit(asyncio.run(run(parse_args())))


if __name__ == "__main__":
    main()
