#!/usr/bin/env python3
"""
cli.py – convert chat export bundles to Markdown, or inspect an export.

Usage:
    chat-md convert                 # processes dump/**/*.json
    chat-md convert --root exports --no-toc
    chat-md inspect dump/chat.md    # parsed notes + fingerprints as JSON

Bundle layout (one chat per file):
    {
      "meta":       {"noteId": "...", "chatTitle": "...", ...},
      "turns":      [{"role": "user", "text": "..."}, ...],
      "htmlBodies": ["<p>...</p>", ...],          # optional
      "options":    {"includeToc": true, ...}     # optional
    }
"""

import argparse
import dataclasses
import json
import logging
import pathlib
import sys

from . import config
from .exceptions import BundleError
from .exporter import build_markdown_export
from .fingerprints import extract_prompt_response_turns, hash_prompt_response_pair
from .importer import parse_export
from .models import ExportMetadata, ExportOptions, Turn


# ------- bundles ---------------------------------------------------------
def _is_text(value) -> bool:
    return value is None or isinstance(value, str)


def load_bundle(path: pathlib.Path):
    """Return (meta, turns, options) for one JSON bundle.

    Raises BundleError when the file is not JSON or has no usable turns.
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise BundleError(f"cannot read {path}: {e}") from e

    if not isinstance(payload, dict):
        raise BundleError(f"{path}: expected a JSON object")
    turns = payload.get("turns")
    if not isinstance(turns, list) or not all(isinstance(t, dict) for t in turns):
        raise BundleError(f"{path}: 'turns' must be a list of objects")
    for i, turn in enumerate(turns):
        for key in ("text", "html"):
            if not _is_text(turn.get(key)):
                raise BundleError(f"{path}: turns[{i}].{key} must be a string")
    for key in ("meta", "options"):
        if not isinstance(payload.get(key), (dict, type(None))):
            raise BundleError(f"{path}: '{key}' must be an object")

    meta = ExportMetadata.from_dict(payload.get("meta") or {})
    options = ExportOptions.from_dict(payload.get("options"))
    if payload.get("htmlBodies") is not None:
        options.html_bodies = payload["htmlBodies"]

    if options.html_bodies is not None and (
            not isinstance(options.html_bodies, list)
            or not all(_is_text(h) for h in options.html_bodies)):
        raise BundleError(f"{path}: 'htmlBodies' must be a list of strings")
    for name in ("title", "freeform_notes"):
        if not _is_text(getattr(options, name)):
            raise BundleError(f"{path}: option '{name}' must be a string")
    return meta, [Turn.from_dict(t) for t in turns], options


def convert_bundle(src: pathlib.Path, dst: pathlib.Path, **overrides) -> None:
    meta, turns, options = load_bundle(src)
    if overrides:
        options = dataclasses.replace(options, **overrides)
    md_txt = build_markdown_export(meta, turns, options)
    try:
        dst.write_text(md_txt, encoding="utf-8")
    except OSError as e:
        raise BundleError(f"cannot write {dst}: {e}") from e


# ------- commands --------------------------------------------------------
def cmd_convert(args) -> int:
    root = pathlib.Path(args.root)
    bundles = sorted(root.glob(args.glob))
    if not bundles:
        sys.exit(f"No export bundles found under {root}/{args.glob}")

    overrides = {}
    if args.no_toc:
        overrides["include_toc"] = False
    if args.no_front_matter:
        overrides["include_front_matter"] = False

    done, failed = 0, 0
    for src in bundles:
        dst = src.with_suffix(".md")
        try:
            convert_bundle(src, dst, **overrides)
        except BundleError as e:
            failed += 1
            print(f"✗ {src.relative_to(root)} – {e}")
            continue
        done += 1
        print(f"✓ {dst.relative_to(root)}")

    print(f"\nFinished: {done} converted, {failed} failed.")
    return 1 if failed and not done else 0


def cmd_inspect(args) -> int:
    path = pathlib.Path(args.file)
    try:
        markdown = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        sys.exit(f"✗ {path} – {e}")

    report = []
    for note in parse_export(markdown, path.name):
        row = dataclasses.asdict(note)
        row["fingerprints"] = [
            hash_prompt_response_pair(t.prompt, t.response)
            for t in extract_prompt_response_turns(note.markdown)
        ]
        report.append(row)

    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chat-md",
        description="Convert chat transcripts to long-lived Markdown documents.")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_convert = sub.add_parser("convert", help="convert JSON bundles to .md files")
    p_convert.add_argument("--root", default=str(config.ROOT),
                           help="directory holding the bundles (default: %(default)s)")
    p_convert.add_argument("--glob", default=config.GLOB,
                           help="bundle pattern under --root (default: %(default)s)")
    p_convert.add_argument("--no-toc", action="store_true", help="omit the table of contents")
    p_convert.add_argument("--no-front-matter", action="store_true",
                           help="omit front matter and the metadata comment")
    p_convert.set_defaults(func=cmd_convert)

    p_inspect = sub.add_parser("inspect", help="print the notes parsed from an export")
    p_inspect.add_argument("file", help="exported Markdown file")
    p_inspect.set_defaults(func=cmd_inspect)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except KeyboardInterrupt:
        sys.exit("\nInterrupted by user.")


if __name__ == "__main__":
    sys.exit(main())
