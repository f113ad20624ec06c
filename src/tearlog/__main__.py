"""Entry point: python -m tearlog <command>

- add / edit / delete / list:  journal entries
- stats:                       yearly statistics
- tags / emojis:               manage tags and intensities
- dedupe:                      run the duplicate removal pass
- sync:                        one merge with the configured record store
- watch:                       sync periodically until interrupted
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from datetime import datetime

from tearlog.config import SyncConfig, TearlogConfig, load_config
from tearlog.errors import NotFoundError, TearlogError, ValidationError
from tearlog.journal import Journal
from tearlog.sync.base import RecordStore

logger = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _build_record_store(sync: SyncConfig) -> RecordStore:
    if sync.backend == "directory":
        if not sync.directory:
            raise ValidationError("sync.directory must be set for the directory backend")
        from tearlog.sync.directory import DirectoryRecordStore

        return DirectoryRecordStore(sync.directory)
    if sync.backend == "none":
        raise ValidationError("Sync is disabled; set [sync] backend in tearlog.toml")
    raise ValidationError(f"Unknown sync backend: {sync.backend}")


# ── Lookups ──────────────────────────────────────────────────


def _find_entry_id(journal: Journal, prefix: str) -> str:
    matches = [e.id for e in journal.entries.entries if e.id.startswith(prefix)]
    if len(matches) != 1:
        raise NotFoundError(f"No unique entry matches '{prefix}' ({len(matches)} found)")
    return matches[0]


def _emoji_id(journal: Journal, symbol: str | None) -> str | None:
    if symbol is None:
        return journal.emojis.emojis[0].id if journal.emojis.emojis else None
    emoji = journal.emojis.find_by_symbol(symbol)
    if emoji is None:
        raise NotFoundError(f"Unknown emoji: {symbol}")
    return emoji.id


def _tag_id(journal: Journal, name: str | None) -> str | None:
    if name is None:
        return None
    tag = journal.tags.find_by_name(name)
    if tag is None:
        raise NotFoundError(f"Unknown tag: {name}")
    return tag.id


def _parse_date(value: str | None) -> datetime:
    if value is None:
        return datetime.now()
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid date '{value}', expected ISO format (2024-03-05T21:40)") from None


# ── Commands ─────────────────────────────────────────────────


def _cmd_add(journal: Journal, args: argparse.Namespace) -> None:
    entry = journal.add_entry(
        date=_parse_date(args.date),
        emoji_id=_emoji_id(journal, args.emoji),
        tag_id=_tag_id(journal, args.tag),
        note=args.note,
    )
    if entry is None:
        print("Entry already exists, nothing added.")
    else:
        print(f"Added {entry.id[:8]} at {entry.date:%Y-%m-%d %H:%M}")


def _cmd_edit(journal: Journal, args: argparse.Namespace) -> None:
    entry = journal.entries.get(_find_entry_id(journal, args.id))
    tag_id = None if args.no_tag else (_tag_id(journal, args.tag) if args.tag else entry.tag_id)
    updated = journal.update_entry(
        entry.id,
        date=_parse_date(args.date) if args.date else entry.date,
        emoji_id=_emoji_id(journal, args.emoji) if args.emoji else entry.emoji_id,
        tag_id=tag_id,
        note=args.note if args.note is not None else entry.note,
    )
    print(f"Updated {updated.id[:8]}")


def _cmd_delete(journal: Journal, args: argparse.Namespace) -> None:
    entry_id = _find_entry_id(journal, args.id)
    journal.delete_entry(entry_id)
    print(f"Deleted {entry_id[:8]}")


def _cmd_list(journal: Journal, args: argparse.Namespace) -> None:
    analyzer = journal.analyzer()
    groups = analyzer.grouped_entries(args.year)
    if not groups:
        print("No entries yet.")
        return
    for group in groups:
        print(group.label)
        for entry in group.entries:
            emoji = analyzer.get_emoji(entry)
            tag = journal.tags.get(entry.tag_id)
            parts = [f"  {entry.id[:8]}", f"{entry.date:%d %H:%M}", emoji.symbol]
            if tag:
                parts.append(tag.name)
            if entry.note:
                parts.append(entry.note)
            print("  ".join(parts))


def _cmd_stats(journal: Journal, args: argparse.Namespace) -> None:
    year = args.year or datetime.now().year
    analyzer = journal.analyzer()
    print(f"{analyzer.total_entries_for_year(year)} crying moments in {year}")
    print()
    print("  ".join(f"{s.symbol} {s.count}" for s in analyzer.emoji_statistics(year)))
    print()
    for month in analyzer.monthly_data_by_intensity(year):
        bar = "".join(
            emoji.symbol * count for emoji, count in zip(analyzer.emojis, month.counts)
        )
        print(f"{month.month_start:%b} {month.total:3d} {bar}")
    print()
    for stat in analyzer.tag_statistics(year):
        print(f"{stat.name:<20} {stat.count}")


def _cmd_tags(journal: Journal, args: argparse.Namespace) -> None:
    action = args.action
    if action == "add":
        tag = journal.add_tag(args.name)
        print(f"Added {tag.name}" if tag else f"Tag {args.name} already exists.")
    elif action == "remove":
        tag_id = _tag_id(journal, args.name)
        journal.remove_tag(tag_id)
        print(f"Removed {args.name}")
    elif action == "rename":
        tag = journal.rename_tag(_tag_id(journal, args.name), args.new_name)
        print(f"Renamed to {tag.name}")
    elif action == "move":
        journal.move_tags([args.source], args.destination)
    for index, tag in enumerate(journal.tags.tags):
        print(f"{index:2d}  {tag.name}")


def _cmd_emojis(journal: Journal, args: argparse.Namespace) -> None:
    action = args.action
    if action == "add":
        emoji = journal.add_emoji(args.symbol, color=args.color, opacity=args.opacity)
        if emoji is None:
            print(f"Emoji {args.symbol} already exists.")
    elif action == "remove":
        if journal.remove_emoji(args.index) is None:
            raise NotFoundError(f"No emoji at index {args.index}")
    elif action == "edit":
        if journal.update_emoji(args.index, symbol=args.symbol, color=args.color, opacity=args.opacity) is None:
            raise NotFoundError(f"No emoji at index {args.index}")
    elif action == "move":
        journal.move_emojis([args.source], args.destination)
    for index, emoji in enumerate(journal.emojis.emojis):
        print(f"{index:2d}  {emoji.symbol}  {emoji.color}  {emoji.opacity:.2f}")


def _cmd_dedupe(journal: Journal, args: argparse.Namespace) -> None:
    report = journal.remove_duplicates()
    print(f"Removed {report.emojis} emojis, {report.tags} tags, {report.entries} entries")


def _cmd_sync(journal: Journal, args: argparse.Namespace) -> None:
    remote = _build_record_store(journal.config.sync)
    report = asyncio.run(journal.sync(remote))
    if report.skipped:
        print(f"Sync skipped: {remote.name} is {report.status.value}")
        return
    print(
        f"Synced with {report.store}: {report.inserted} new, {report.updated} updated, "
        f"{report.uploaded} uploaded, {report.duplicates.total} duplicates removed"
    )


def _cmd_watch(journal: Journal, args: argparse.Namespace) -> None:
    from tearlog.scheduler.jobs import SyncScheduler

    remote = _build_record_store(journal.config.sync)
    scheduler = SyncScheduler(journal, remote, journal.config)

    async def run() -> None:
        shutdown_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, shutdown_event.set)
        await scheduler.start(shutdown_event)

    asyncio.run(run())


# ── Parser ───────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tearlog", description="Personal crying journal")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("add", help="Log a crying moment")
    p.add_argument("--date", help="ISO timestamp (default: now)")
    p.add_argument("--emoji", help="Intensity emoji (default: first)")
    p.add_argument("--tag", help="Tag name")
    p.add_argument("--note", default="", help="Free-text note")
    p.set_defaults(func=_cmd_add)

    p = sub.add_parser("edit", help="Edit an entry")
    p.add_argument("id", help="Entry id or unique prefix")
    p.add_argument("--date")
    p.add_argument("--emoji")
    p.add_argument("--tag")
    p.add_argument("--no-tag", action="store_true", help="Clear the tag")
    p.add_argument("--note")
    p.set_defaults(func=_cmd_edit)

    p = sub.add_parser("delete", help="Delete an entry")
    p.add_argument("id", help="Entry id or unique prefix")
    p.set_defaults(func=_cmd_delete)

    p = sub.add_parser("list", help="List entries by month")
    p.add_argument("--year", type=int)
    p.set_defaults(func=_cmd_list)

    p = sub.add_parser("stats", help="Yearly statistics")
    p.add_argument("--year", type=int)
    p.set_defaults(func=_cmd_stats)

    p = sub.add_parser("tags", help="Manage tags")
    tag_sub = p.add_subparsers(dest="action")
    tag_sub.add_parser("list")
    tp = tag_sub.add_parser("add")
    tp.add_argument("name")
    tp = tag_sub.add_parser("remove")
    tp.add_argument("name")
    tp = tag_sub.add_parser("rename")
    tp.add_argument("name")
    tp.add_argument("new_name")
    tp = tag_sub.add_parser("move")
    tp.add_argument("source", type=int)
    tp.add_argument("destination", type=int)
    p.set_defaults(func=_cmd_tags)

    p = sub.add_parser("emojis", help="Manage intensity emojis")
    emoji_sub = p.add_subparsers(dest="action")
    emoji_sub.add_parser("list")
    ep = emoji_sub.add_parser("add")
    ep.add_argument("symbol")
    ep.add_argument("--color")
    ep.add_argument("--opacity", type=float, default=1.0)
    ep = emoji_sub.add_parser("remove")
    ep.add_argument("index", type=int)
    ep = emoji_sub.add_parser("edit")
    ep.add_argument("index", type=int)
    ep.add_argument("--symbol")
    ep.add_argument("--color")
    ep.add_argument("--opacity", type=float)
    ep = emoji_sub.add_parser("move")
    ep.add_argument("source", type=int)
    ep.add_argument("destination", type=int)
    p.set_defaults(func=_cmd_emojis)

    sub.add_parser("dedupe", help="Remove duplicate entries, tags and emojis").set_defaults(
        func=_cmd_dedupe
    )
    sub.add_parser("sync", help="Merge with the configured record store").set_defaults(
        func=_cmd_sync
    )
    sub.add_parser("watch", help="Sync periodically until interrupted").set_defaults(
        func=_cmd_watch
    )
    return parser


def main(argv: list[str] | None = None, config: TearlogConfig | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = config or load_config()
    _setup_logging(config.log_level)

    try:
        journal = Journal(config)
        args.func(journal, args)
    except TearlogError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
