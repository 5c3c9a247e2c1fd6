import zlib

TAG_PALETTE: tuple[str, ...] = (
    "#3b82f6",  # blue
    "#ef4444",  # red
    "#10b981",  # green
    "#f59e0b",  # amber
    "#8b5cf6",  # purple
    "#ec4899",  # pink
    "#6366f1",  # indigo
    "#14b8a6",  # teal
    "#84cc16",  # lime
    "#f97316",  # orange
    "#64748b",  # slate
    "#71717a",  # zinc
)


def palette_color(tag_name: str) -> str:
    """Palette color for a tag name, stable across runs and processes."""
    digest = zlib.crc32(tag_name.lower().encode("utf-8"))
    return TAG_PALETTE[digest % len(TAG_PALETTE)]
