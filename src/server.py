"""Protean Engine runner for the product search indexer.

Starts the Engine that reads reindex signals from the broker and runs the
index subscribers (product.updated → assemble and upsert, product.deleted
→ delete).

Usage:
    python src/server.py
    python src/server.py --test-mode   # drain pending messages and exit
"""

import argparse
import asyncio

from protean.server.engine import Engine


def _get_domain():
    """Import and initialize the domain with its subscribers registered."""
    from productsearch.domain import productsearch

    import productsearch.subscribers  # noqa: F401

    productsearch.init(traverse=False)
    return productsearch


async def run(test_mode: bool = False):
    engine = Engine(_get_domain(), test_mode=test_mode)
    await asyncio.gather(engine.run())


def main():
    parser = argparse.ArgumentParser(description="Product search Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages and exit",
    )
    args = parser.parse_args()

    asyncio.run(run(test_mode=args.test_mode))


if __name__ == "__main__":
    main()
