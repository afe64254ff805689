#!/usr/bin/env python3
"""
Command line entry point for the product board.

This script can:
1. Serve the product store API
2. List products
3. Approve, reject or re-open a product
4. Add and delete products (admin password)
5. Reset every product to pending (admin password)
"""

import argparse
import asyncio
import logging
import os
import sys

from product_board.client import ProductStoreClient
from product_board.config import server_config
from product_board.dashboard import ReconciliationEngine
from product_board.errors import GatewayError, ProductBoardError
from product_board.logging_config import setup_logging
from product_board.models import ProductStatus, format_price

logger = logging.getLogger("product_board.main")

STATUS_COMMANDS = {
    "approve": ProductStatus.APPROVED,
    "reject": ProductStatus.REJECTED,
    "pending": ProductStatus.PENDING,
}


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="product_board",
        description="Submit, list and review products.",
    )
    parser.add_argument("--url", default=None, help="Product store base URL.")
    parser.add_argument(
        "--password",
        default=os.getenv("PRODUCT_BOARD_PASSWORD", ""),
        help="Login or admin password (default: $PRODUCT_BOARD_PASSWORD).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the product store API.")
    serve.add_argument("--host", default=server_config.host)
    serve.add_argument("--port", type=int, default=server_config.port)

    listing = commands.add_parser("list", help="List products.")
    listing.add_argument("--approved", action="store_true", help="Only approved products.")

    for name, status in STATUS_COMMANDS.items():
        cmd = commands.add_parser(name, help=f"Mark a product {status.value}.")
        cmd.add_argument("product_id")

    add = commands.add_parser("add", help="Add a product (admin).")
    add.add_argument("--title", required=True)
    add.add_argument("--description", default=None)
    add.add_argument("--image", action="append", default=[], dest="images",
                     help="Image URL; repeat or separate with commas.")
    add.add_argument("--product-url", required=True)
    add.add_argument("--price", required=True)

    delete = commands.add_parser("delete", help="Delete a product (admin).")
    delete.add_argument("product_id")

    commands.add_parser("reset-all", help="Set every product back to pending (admin).")
    return parser


def print_products(engine: ReconciliationEngine, approved_only: bool = False):
    """Print the dashboard list."""
    products = engine.visible_products(approved_only=approved_only)
    counts = engine.counts()
    print(f"\n{len(products)} products "
          f"({counts[ProductStatus.PENDING]} pending, "
          f"{counts[ProductStatus.APPROVED]} approved, "
          f"{counts[ProductStatus.REJECTED]} rejected)")
    print("=" * 60)
    for product in products:
        print(f"\n- [{product.status.value:<8}] {product.title[:60]}")
        print(f"  ID: {product.id}")
        print(f"  Price: {format_price(product.price)}")
        print(f"  Images: {len(product.image_urls)}")
        print(f"  URL: {product.product_url}")


async def run_command(args: argparse.Namespace) -> int:
    """Log in, load the list and run one intent through the engine."""
    async with ProductStoreClient(base_url=args.url) as client:
        try:
            role = await client.login(args.password)
        except GatewayError as e:
            print(f"Login failed: {e.detail or e}")
            return 1

        engine = ReconciliationEngine(client, role)
        if not await engine.refresh():
            print(engine.error)
            return 1

        try:
            if args.command == "list":
                ok = True
            elif args.command in STATUS_COMMANDS:
                ok = await engine.change_status(args.product_id, STATUS_COMMANDS[args.command])
            elif args.command == "add":
                ok = await engine.create({
                    "title": args.title,
                    "description": args.description,
                    "imageUrls": ",".join(args.images),
                    "productUrl": args.product_url,
                    "price": args.price,
                })
            elif args.command == "delete":
                ok = await engine.delete(args.product_id)
            elif args.command == "reset-all":
                ok = await engine.reset_all_to_pending()
            else:
                raise ValueError(f"Unknown command: {args.command}")
        except ProductBoardError as e:
            print(f"Error: {e}")
            return 1

        if not ok:
            print(engine.error)
        print_products(engine, approved_only=getattr(args, "approved", False))
        return 0 if ok else 1


def serve(host: str, port: int) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("product_board.api.main:app", host=host, port=port)


def main() -> None:
    """Main entry point."""
    log_file = setup_logging()
    logger.info("product_board starting, log file: %s", log_file)

    args = _build_parser().parse_args()

    if args.command == "serve":
        serve(args.host, args.port)
        return

    sys.exit(asyncio.run(run_command(args)))


if __name__ == "__main__":
    main()
