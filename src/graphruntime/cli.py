#!/usr/bin/env python3
"""
Graph Runtime CLI - Unified command-line interface for the graph runtime.

Usage:
    graphruntime run [--modules FILE]        Start the runtime daemon
    graphruntime run --single                Run one cycle and exit
    graphruntime crawl [--max-depth N]       Crawl once and print visited nodes
    graphruntime modules list                List stored module records
    graphruntime modules force-reinit <id>   Re-initialize a module on next start
    graphruntime modules prune <id>...       Remove records of other modules
"""

import argparse
import sys

from graphruntime import __version__


def cmd_run(args):
    """Handle runtime daemon commands."""
    from graphruntime.processor import daemon
    sys.argv = ["run"] + args
    daemon.main()


def cmd_crawl(args):
    """Handle one-shot crawl commands."""
    from graphruntime.processor import crawl
    sys.argv = ["crawl"] + args
    crawl.main()


def cmd_modules(args):
    """Handle module record commands."""
    from graphruntime.processor import admin
    sys.argv = ["modules"] + args
    admin.main()


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="graphruntime",
        description="Graph runtime - periodic modules over a Neo4j graph",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  run        Start the runtime daemon
  crawl      Crawl the graph once
  modules    Inspect and edit module records on the anchor node

Examples:
  graphruntime run -v --modules modules.yaml
  graphruntime run --force-init crawler
  graphruntime crawl --max-depth 3 --label Person
  graphruntime modules list
""",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "run",
        help="Start the runtime daemon",
        add_help=False,
    )

    subparsers.add_parser(
        "crawl",
        help="Crawl the graph once",
        add_help=False,
    )

    subparsers.add_parser(
        "modules",
        help="Manage module records",
        add_help=False,
    )

    # Parse only the first argument to get the command
    args, remaining = parser.parse_known_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    handlers = {
        "run": cmd_run,
        "crawl": cmd_crawl,
        "modules": cmd_modules,
    }

    handler = handlers.get(args.command)
    if handler:
        handler(remaining)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
