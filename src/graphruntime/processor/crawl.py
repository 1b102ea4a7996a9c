#!/usr/bin/env python3
"""
One-shot crawl

Crawls the graph once from an arbitrary node and prints every visited node
with its depth and the relationship it was reached through.

Usage:
    python -m graphruntime.processor.crawl [--max-depth N] [--label LABEL]
"""

import argparse
import sys

from graphruntime.crawler.crawler import GraphCrawler
from graphruntime.crawler.handler import TraversalContext
from graphruntime.crawler.strategy import IncludeNodesWithLabel
from graphruntime.errors import StoreUnavailable, TraversalError
from graphruntime.processor.config import get_config


def print_visit(context: TraversalContext):
    node = context.element
    via = context.arrival_relationship.type if context.arrival_relationship else "(start)"
    name = node.get_property("name", "")
    print(f"{'  ' * context.depth}{node.id} {sorted(node.labels)} {name} <- {via}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Crawl the graph once and print visited nodes")
    parser.add_argument("--max-depth", type=int, help="Deepest level to visit (default: $CRAWL_MAX_DEPTH or 9)")
    parser.add_argument("--label", help="Only print nodes carrying this label")
    parser.add_argument("--database", "-d", help="Neo4j database (default: $NEO4J_DATABASE)")
    args = parser.parse_args()

    max_depth = args.max_depth if args.max_depth is not None else get_config()["max_depth"]
    strategy = IncludeNodesWithLabel([args.label]) if args.label else None
    crawler = GraphCrawler(print_visit, node_inclusion_strategy=strategy, max_depth=max_depth)

    from graphruntime.processor.daemon import open_store
    store = open_store(args.database)
    try:
        visited = crawler.start_crawling(store)
        print(f"\nVisited {visited} node(s)")
    except (StoreUnavailable, TraversalError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        store.close()


if __name__ == "__main__":
    main()
