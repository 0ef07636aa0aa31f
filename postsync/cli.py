"""Command-line interface for the post migration tool."""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .gateway.ncb import NCBGateway
from .models.migration import MigrationConfig, MigrationOptions
from .models.record import NormalizedRecord
from .orchestrator import MigrationError, MigrationOrchestrator
from .services.media import get_image_src, normalize_dropbox_image_url, normalize_dropbox_shared_url
from .services.normalizer import RecordNormalizer, rows_from
from .services.slugs import calculate_read_time, ensure_unique, generate_slug, slugify
from .services.text import format_date, strip_html

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 160


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Post Sync - Copy blog posts between NoCodeBackend instances"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Run migration
    run_parser = subparsers.add_parser("run", help="Run a migration (dry run unless --live)")
    run_parser.add_argument("--live", action="store_true", help="Create records at the target")
    run_parser.add_argument("--source-instance", help="Source instance (default from env)")
    run_parser.add_argument("--output", help="Write the JSON result to this file")

    # Preview normalization
    preview_parser = subparsers.add_parser("preview", help="Preview normalized payloads")
    preview_parser.add_argument("--input", required=True, help="Path to a JSON file of source rows")
    preview_parser.add_argument(
        "--details", action="store_true",
        help="Also show read time, excerpt, display date and image links"
    )

    # Slug helper
    slug_parser = subparsers.add_parser("slug", help="Slugify text and allocate a unique slug")
    slug_parser.add_argument("text", help="Text to slugify")
    slug_parser.add_argument("--existing", default="", help="Comma-separated slugs already taken")
    slug_parser.add_argument("--editor", action="store_true", help="Use the post editor slug rules")

    # API server
    serve_parser = subparsers.add_parser("serve", help="Serve the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Set up logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if args.command == "run":
        return run_migration(args)
    elif args.command == "preview":
        return run_preview(args)
    elif args.command == "slug":
        return run_slug(args)
    elif args.command == "serve":
        return run_serve(args)

    parser.print_help()
    return 1


def run_migration(args, config: Optional[MigrationConfig] = None, gateway=None) -> int:
    """Run a migration with configuration from the environment."""
    config = config or MigrationConfig.from_env()
    options = MigrationOptions(dry_run=not args.live, source_instance=args.source_instance)

    owns_gateway = gateway is None
    gateway = gateway or NCBGateway.from_config(config)

    try:
        result = MigrationOrchestrator(config, gateway).run(options)
    except MigrationError as e:
        logger.error(f"Migration failed: {e}")
        print(json.dumps({"ok": False, "error": str(e)}, indent=2))
        return 1
    finally:
        if owns_gateway:
            gateway.close()

    output = result.to_dict()
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(output, f, indent=2)
        logger.info(f"Saved migration result to {args.output}")

    print("\n" + "=" * 60)
    print("DRY RUN COMPLETE" if result.dry_run else "MIGRATION COMPLETE")
    print("=" * 60)
    print(f"Source: {result.source_instance}")
    print(f"Target: {result.target_instance}")
    print(f"Records Read: {result.source_count}")
    print(f"{'Would Create' if result.dry_run else 'Created'}: {result.created_count}")
    print(f"Skipped: {result.skipped}")
    print(f"Errors: {len(result.errors)}")
    for error in result.errors:
        print(f"  - {error.error}: {json.dumps(error.payload, default=str)[:80]}")
    return 0


def run_preview(args) -> int:
    """Print the normalized payload for each row in a JSON file."""
    with open(args.input, encoding="utf-8") as f:
        input_data = json.load(f)

    if isinstance(input_data, dict) and not isinstance(input_data.get("data"), list):
        input_data = [input_data]
    rows = rows_from(input_data)
    normalizer = RecordNormalizer()

    for row in rows:
        payload = normalizer.normalize(row)
        error = normalizer.validate(payload)
        output = {"error": error, "payload": payload} if error else payload
        if args.details and not error:
            output = {"payload": payload, "details": describe_post(payload)}
        print(json.dumps(output, indent=2, default=str))
        print("-" * 40)
    return 0


def describe_post(payload: NormalizedRecord, excerpt_length: int = EXCERPT_LENGTH) -> Dict[str, Any]:
    """Display details for a normalized post, as the blog pages show them."""
    image = normalize_dropbox_image_url(payload.get("featured_image_url"))
    excerpt = " ".join(strip_html(payload.get("content")).split())
    if len(excerpt) > excerpt_length:
        excerpt = excerpt[:excerpt_length].rstrip() + "..."

    return {
        "readTime": calculate_read_time(payload.get("content")),
        "excerpt": excerpt,
        "displayDate": format_date(payload.get("date")),
        "imageUrl": image,
        "imageInlineUrl": normalize_dropbox_shared_url(image),
        "imageSrc": get_image_src(image),
    }


def run_slug(args) -> int:
    """Print the slug for some text, made unique against existing slugs."""
    existing = [s.strip() for s in args.existing.split(",") if s.strip()]
    base = generate_slug(args.text) if args.editor else slugify(args.text)
    print(ensure_unique(base, existing))
    return 0


def run_serve(args) -> int:
    """Serve the FastAPI application with uvicorn."""
    import uvicorn

    uvicorn.run("postsync.api.main:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
