#!/usr/bin/env python3
"""orgpress command line: publish documents and preview their front matter."""

import argparse
import logging
import sys

from services.frontmatter import render
from services.publisher import Dispatcher, Kind
from services.reader import MetadataReader
from services.settings import build_config


def _publish(cfg, args) -> int:
    dispatcher = Dispatcher(cfg)
    for path in args.files:
        print(dispatcher.dispatch(path))
    return 0


def _publish_all(cfg, kind: Kind) -> int:
    outcomes = Dispatcher(cfg).publish_all(kind)
    for outcome in outcomes:
        print(outcome.message)
    if not outcomes:
        print(f"No {kind.value.lower()}s found in {cfg.source_dir}")
    return 1 if any(not o.ok for o in outcomes) else 0


def _metadata(cfg, args) -> int:
    try:
        metadata, err = MetadataReader(cfg).read(args.file)
    except (OSError, UnicodeDecodeError) as e:
        err = f"Cannot read '{args.file}': {e}"
    if err:
        print(err, file=sys.stderr)
        return 1
    sys.stdout.write(render(metadata))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the `orgpress` CLI command."""
    parser = argparse.ArgumentParser(description="Publish documents to a static-site tree")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_publish = sub.add_parser("publish", help="Publish one or more files")
    p_publish.add_argument("files", nargs="+")
    sub.add_parser("publish-posts", help="Publish every post in the source directory")
    sub.add_parser("publish-pages", help="Publish every page in the source directory")
    p_meta = sub.add_parser("metadata", help="Print the front matter a file would get")
    p_meta.add_argument("file")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = build_config()
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 2

    if args.command == "publish":
        return _publish(cfg, args)
    if args.command == "publish-posts":
        return _publish_all(cfg, Kind.POST)
    if args.command == "publish-pages":
        return _publish_all(cfg, Kind.PAGE)
    return _metadata(cfg, args)


if __name__ == "__main__":
    sys.exit(main())
