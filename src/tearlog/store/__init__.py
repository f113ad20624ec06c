"""On-disk journal store: one markdown file per entity.

Layout:
    ~/.tearlog/journal/
    ├── entries/
    │   └── <id>.md                 # Frontmatter: date, emoji_id, tag_id; body: note
    ├── tags/
    │   └── <id>.md                 # Frontmatter: name, order
    ├── emojis/
    │   └── <id>.md                 # Frontmatter: symbol, color, opacity, order
    ├── .versions/                  # Timestamped backups (10 per entity)
    └── .sync_state.json            # last_refresh and other sync bookkeeping
"""

from tearlog.store.journal_store import JournalStore

__all__ = ["JournalStore"]
