#!/usr/bin/env python3
"""
Module Record Administration

Inspects and edits the per-module records kept on the runtime anchor node.

Usage:
    python -m graphruntime.processor.admin list
    python -m graphruntime.processor.admin force-reinit <module_id>
    python -m graphruntime.processor.admin prune <module_id> [<module_id> ...]

`prune` keeps the records of the listed modules and removes all others,
the same cleanup the runtime performs on start.
"""

import argparse
import sys
from typing import List

from graphruntime.errors import CorruptRuntimeState
from graphruntime.runtime.context import RuntimeContext
from graphruntime.runtime.records import ForcedReinit
from graphruntime.runtime.registry import ModuleRegistry
from graphruntime.store.base import GraphStore


def list_records(store: GraphStore) -> List[str]:
    """Return one printable line per stored record."""
    registry = ModuleRegistry(RuntimeContext.create(store))
    lines = []
    for module_id, record in sorted(registry.records().items()):
        if isinstance(record, ForcedReinit):
            lines.append(f"{module_id}\tforced re-initialization (at {record.timestamp})")
        else:
            lines.append(f"{module_id}\t{record.value}")
    return lines


def force_reinit(store: GraphStore, module_id: str):
    ModuleRegistry(RuntimeContext.create(store)).force_reinitialization(module_id)


def prune(store: GraphStore, keep: List[str]) -> List[str]:
    return ModuleRegistry(RuntimeContext.create(store)).remove_unused_modules(keep)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Manage runtime module records")
    parser.add_argument("--database", "-d", help="Neo4j database (default: $NEO4J_DATABASE)")
    subparsers = parser.add_subparsers(dest="action")

    subparsers.add_parser("list", help="List stored module records")

    force_parser = subparsers.add_parser("force-reinit", help="Force a module to re-initialize on next start")
    force_parser.add_argument("module_id")

    prune_parser = subparsers.add_parser("prune", help="Remove records of all modules not listed")
    prune_parser.add_argument("keep", nargs="*", metavar="MODULE_ID")

    args = parser.parse_args()
    if not args.action:
        parser.print_help()
        sys.exit(1)

    from graphruntime.processor.daemon import open_store
    store = open_store(args.database)
    try:
        if args.action == "list":
            lines = list_records(store)
            if not lines:
                print("No module records")
            for line in lines:
                print(line)
        elif args.action == "force-reinit":
            force_reinit(store, args.module_id)
            print(f"Module {args.module_id} will re-initialize on next start")
        elif args.action == "prune":
            removed = prune(store, args.keep)
            print(f"Removed {len(removed)} record(s): {', '.join(removed) or '-'}")
    except CorruptRuntimeState as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    finally:
        store.close()


if __name__ == "__main__":
    main()
