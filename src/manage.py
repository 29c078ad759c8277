"""Product search indexer operations CLI.

Runs the change feed consumer and the buffer flusher, and drives full or
partial reindexing.

Usage:
    python src/manage.py consume-cdc             # Consume source-table changes
    python src/manage.py flush --count 500       # Flush the event buffer once
    python src/manage.py flush-loop              # Flush periodically until interrupted
    python src/manage.py migrate-all             # Buffer every product id
    python src/manage.py migrate-ids 1 2 3       # Buffer specific product ids
    python src/manage.py reindex 1 2 3           # Index products directly, bypassing the buffer
    python src/manage.py load-categories         # Refresh the category cache
    python src/manage.py create-index            # Create the search index if missing
"""

import argparse
import signal
import sys
import threading


def _domain_context():
    from productsearch.domain import productsearch

    productsearch.init(traverse=False)
    return productsearch.domain_context()


def _stop_event() -> threading.Event:
    stop_event = threading.Event()

    def _stop(signum, frame):
        stop_event.set()

    signal.signal(signal.SIGINT, _stop)
    signal.signal(signal.SIGTERM, _stop)
    return stop_event


def consume_cdc():
    from productsearch.cdc.consumer import create_consumer
    from productsearch.cdc.registry import default_handlers
    from productsearch.config import get_settings

    settings = get_settings()
    with _domain_context():
        consumer = create_consumer(default_handlers(), settings.kafka_bootstrap_servers, settings.kafka_group_id)
        consumer.run(_stop_event())


def flush(count):
    from productsearch.migration.service import get_migration_service

    with _domain_context():
        published = get_migration_service().flush_event_buffer(count)
    print(f"Published {published} product update(s).")


def flush_loop(count, interval):
    from productsearch.buffer import get_event_buffer
    from productsearch.buffer.scheduler import run_flush_loop

    with _domain_context():
        total = run_flush_loop(get_event_buffer(), count, interval, _stop_event())
    print(f"Published {total} product update(s).")


def migrate_all(page_size):
    from productsearch.migration.service import get_migration_service

    with _domain_context():
        count = get_migration_service().migrate_all(page_size=page_size)
    print(f"Buffered {count} product id(s).")


def migrate_ids(product_ids):
    from productsearch.migration.service import get_migration_service

    with _domain_context():
        count = get_migration_service().migrate_by_ids(product_ids)
    print(f"Buffered {count} product id(s).")


def reindex(product_ids):
    from productsearch.indexing import get_index_service

    result = get_index_service().bulk_update_products(product_ids)
    print(f"Upserted {len(result.upserted)}, deleted {len(result.deleted)}, failed {len(result.failed)}.")
    if result.failed:
        print(f"  Failed ids: {' '.join(str(pid) for pid in result.failed)}")
        sys.exit(1)


def load_categories():
    from productsearch.category import get_category_service

    count = get_category_service().load_cache()
    print(f"Cached {count} categories.")


def create_index():
    from productsearch.indexing import get_search_index

    index = get_search_index()
    if not hasattr(index, "ensure_index"):
        print("Active search index adapter needs no setup.")
        return
    created = index.ensure_index()
    print("Index created." if created else "Index already exists.")


def main():
    from productsearch.config import get_settings

    settings = get_settings()

    parser = argparse.ArgumentParser(description="Product search indexer operations")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("consume-cdc", help="Consume source-table change events")

    flush_parser = subparsers.add_parser("flush", help="Flush the event buffer once")
    flush_parser.add_argument("--count", type=int, default=settings.flush_count, help="Maximum ids to pop")

    loop_parser = subparsers.add_parser("flush-loop", help="Flush the event buffer periodically")
    loop_parser.add_argument("--count", type=int, default=settings.flush_count, help="Maximum ids per flush")
    loop_parser.add_argument(
        "--interval",
        type=float,
        default=settings.flush_interval_seconds,
        help="Seconds between flushes when the buffer is drained",
    )

    all_parser = subparsers.add_parser("migrate-all", help="Buffer every product id for reindexing")
    all_parser.add_argument("--page-size", type=int, default=settings.fanout_page_size, help="Ids per page")

    ids_parser = subparsers.add_parser("migrate-ids", help="Buffer specific product ids for reindexing")
    ids_parser.add_argument("product_ids", type=int, nargs="+")

    reindex_parser = subparsers.add_parser("reindex", help="Index products directly")
    reindex_parser.add_argument("product_ids", type=int, nargs="+")

    subparsers.add_parser("load-categories", help="Reload the category cache from the database")
    subparsers.add_parser("create-index", help="Create the search index if it does not exist")

    args = parser.parse_args()

    if args.command == "consume-cdc":
        consume_cdc()
    elif args.command == "flush":
        flush(args.count)
    elif args.command == "flush-loop":
        flush_loop(args.count, args.interval)
    elif args.command == "migrate-all":
        migrate_all(args.page_size)
    elif args.command == "migrate-ids":
        migrate_ids(args.product_ids)
    elif args.command == "reindex":
        reindex(args.product_ids)
    elif args.command == "load-categories":
        load_categories()
    elif args.command == "create-index":
        create_index()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
