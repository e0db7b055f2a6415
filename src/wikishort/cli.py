"""CLI for wikishort - shortest unambiguous wiki links for a Markdown vault."""

import argparse
import json
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .core.links import extract_links
from .core.uniqueness import ambiguous_names, unique_names
from .display import shorten_html
from .runtime import build_runtime
from .settings import settings_to_dict


def version_string() -> str:
    return (
        f"wikishort {__version__} "
        f"(python {platform.python_version()}, platform {platform.platform()})"
    )


def cmd_optimize(args: argparse.Namespace, rt: Any) -> int:
    """Run a rewrite pass over some or all documents."""
    dry_run = args.dry_run or args.check
    rewriter = rt.optimizer.rewriter

    if args.paths:
        docs = [rt.store.document_for(Path(p)) for p in args.paths]
        unique = unique_names(rt.store.list_documents())
        results = [rewriter.optimize(doc, dry_run=dry_run, unique=unique) for doc in docs]
    else:
        results = rewriter.optimize_all(dry_run=dry_run)

    changed = [r for r in results if r.changed]

    if args.json:
        out = [
            {
                "path": r.path,
                "changed": r.changed,
                "links": r.links,
                "rewritten": [{"old": old, "new": new} for old, new in r.rewritten],
            }
            for r in results
        ]
        print(json.dumps(out, indent=2))
    elif not args.quiet:
        verb = "Would rewrite" if dry_run else "Rewrote"
        for r in changed:
            print(f"{verb} {r.path}")
            for old, new in r.rewritten:
                print(f"  {old} -> {new}")
        print(f"\nScanned: {len(results)}")
        print(f"Changed: {len(changed)}")

    if args.check and changed:
        return 1
    return 0


def cmd_unique(args: argparse.Namespace, rt: Any) -> int:
    """List unique (or ambiguous) short names."""
    docs = list(rt.store.list_documents())
    names = sorted(ambiguous_names(docs) if args.ambiguous else unique_names(docs))

    if args.json:
        print(json.dumps(names, indent=2))
    else:
        for name in names:
            print(name)
    return 0


def cmd_links(args: argparse.Namespace, rt: Any) -> int:
    """Print the distinct links in one document."""
    doc = rt.store.document_for(Path(args.path))
    links = extract_links(rt.store.read_text(doc))

    if args.json:
        out = [
            {"raw": link.raw_inner, "target": link.target_name, "alias": link.alias}
            for link in links.values()
        ]
        print(json.dumps(out, indent=2))
    else:
        for link in links.values():
            alias = "" if link.alias is None else link.alias
            print(f"{link.raw_inner}\t{link.target_name}\t{alias}")
    return 0


def cmd_display(args: argparse.Namespace, rt: Any) -> int:
    """Shorten visible text of rendered internal links in HTML."""
    if args.file:
        html = Path(args.file).read_text(encoding="utf-8")
    else:
        html = sys.stdin.read()
    sys.stdout.write(shorten_html(html, rt.settings))
    return 0


def cmd_watch(args: argparse.Namespace, rt: Any) -> int:
    """Watch vault and rewrite links in changed documents."""
    from .watch import watch_vault

    debounce_ms = args.debounce_ms
    if debounce_ms is None:
        debounce_ms = rt.config.watch.debounce_ms

    return watch_vault(
        store=rt.store,
        optimizer=rt.optimizer,
        debounce_ms=debounce_ms,
        quiet=args.quiet,
        json_output=args.json,
    )


def cmd_settings_show(args: argparse.Namespace, rt: Any) -> int:
    """Print persisted settings."""
    data = settings_to_dict(rt.settings)
    if args.json:
        print(json.dumps(data, indent=2))
    else:
        for key, value in data.items():
            print(f"{key}: {json.dumps(value)}")
    return 0


def cmd_settings_set(args: argparse.Namespace, rt: Any) -> int:
    """Change one setting and persist it."""
    rt.settings_store.update(args.key, args.value)
    if not args.quiet:
        print(f"Saved {rt.settings_store.path}")
    return 0


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="wikishort", description="Shorten wiki links in a Markdown vault"
    )
    parser.add_argument(
        "--version", action="version", version=version_string()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/wikishort.toml, vault/wikishort.toml)",
    )
    parser.add_argument(
        "--vault",
        type=Path,
        default=None,
        help="Path to vault directory (overrides config)",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Path to settings file (default: <vault>/.wikishort/settings.yaml)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # optimize command
    parser_optimize = subparsers.add_parser("optimize", help="Rewrite links to short form")
    parser_optimize.add_argument(
        "paths", nargs="*", help="Vault-relative documents (default: all)"
    )
    parser_optimize.add_argument(
        "--dry-run", action="store_true", help="Report changes without writing"
    )
    parser_optimize.add_argument(
        "--check", action="store_true",
        help="Exit 1 if any document would change (implies --dry-run)"
    )

    # unique command
    parser_unique = subparsers.add_parser("unique", help="List unique short names")
    parser_unique.add_argument(
        "--ambiguous", action="store_true",
        help="List names held by more than one document instead"
    )

    # links command
    parser_links = subparsers.add_parser("links", help="Show links in a document")
    parser_links.add_argument("path", help="Vault-relative document path")

    # display command
    parser_display = subparsers.add_parser(
        "display", help="Shorten link text in rendered HTML"
    )
    parser_display.add_argument("file", nargs="?", help="HTML file (default: stdin)")

    # watch command
    parser_watch = subparsers.add_parser("watch", help="Watch vault for changes")
    parser_watch.add_argument(
        "--debounce-ms", type=int, default=None,
        help="Debounce window in milliseconds (default: from config, 150)"
    )

    # settings command
    parser_settings = subparsers.add_parser("settings", help="Show or change settings")
    settings_sub = parser_settings.add_subparsers(dest="settings_cmd", required=True)
    settings_sub.add_parser("show", help="Print settings")
    parser_settings_set = settings_sub.add_parser("set", help="Change a setting")
    parser_settings_set.add_argument("key", help="Setting name")
    parser_settings_set.add_argument("value", help="New value")

    args = parser.parse_args()

    try:
        rt = build_runtime(
            vault_path=args.vault,
            settings_path=args.settings,
            config_path=args.config,
        )
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.cmd in ("optimize", "unique", "links") and not rt.store.root.is_dir():
        print(f"Error: Vault not found: {rt.store.root}", file=sys.stderr)
        sys.exit(1)

    handlers = {
        "optimize": cmd_optimize,
        "unique": cmd_unique,
        "links": cmd_links,
        "display": cmd_display,
        "watch": cmd_watch,
    }

    if args.cmd == "settings":
        settings_handlers = {
            "show": cmd_settings_show,
            "set": cmd_settings_set,
        }
        handler = settings_handlers.get(args.settings_cmd)
    else:
        handler = handlers.get(args.cmd)

    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
