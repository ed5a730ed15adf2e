from __future__ import annotations

PARTS_LATEST_KEY = "journal:parts:latest"
SO_FAR_LATEST_KEY = "journal:parts:so-far:latest"
RECENT_SUMMARY_KEY = "journal:recent-summary"


def part_summary_key(part_index: int) -> str:
    return f"journal:part:{part_index}"


def part_title_key(part_index: int) -> str:
    return f"journal:part:{part_index}:title"


def part_entries_key(part_index: int) -> str:
    return f"journal:part:{part_index}:entries"


__all__ = [
    "PARTS_LATEST_KEY",
    "RECENT_SUMMARY_KEY",
    "SO_FAR_LATEST_KEY",
    "part_entries_key",
    "part_summary_key",
    "part_title_key",
]
