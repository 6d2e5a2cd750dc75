"""Output pipeline — Markdown export of notes, and the clipboard."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import yaml

from livenotes.codec import ProjectData
from livenotes.timefmt import format_absolute, format_relative

logger = logging.getLogger(__name__)


def _format_line(text: str, ts: int | None, speaker: str | None, anchor_ms: int) -> str:
    parts = []
    if ts is not None:
        stamp = format_relative(ts - anchor_ms) if anchor_ms else format_absolute(ts)
        parts.append(f"[{stamp}]")
    if speaker:
        parts.append(f"**{speaker}:**")
    # Keep in-block newlines inside the same list item.
    parts.append(text.replace("\n", "\n  "))
    return "- " + " ".join(parts)


def build_markdown(project: ProjectData, title: str | None = None) -> str:
    """Build a Markdown string with YAML front matter for a notes project."""
    blocks, timestamps, speakers = project.decode()
    now = datetime.now()

    front_matter: dict = {
        "title": title or f"Notes {now.strftime('%Y-%m-%d %H:%M')}",
        "date": now.isoformat(),
        "blocks": len(blocks),
        "timestamps": len(timestamps),
    }
    if project.anchor_ms:
        front_matter["recording_start"] = format_absolute(project.anchor_ms)
    if speakers:
        front_matter["speakers"] = sorted(set(speakers.values()))

    lines = ["---"]
    lines.append(yaml.dump(front_matter, default_flow_style=False, sort_keys=False, allow_unicode=True).strip())
    lines.append("---")
    lines.append("")
    lines.append("## Notes")
    lines.append("")
    for i, text in enumerate(blocks):
        if not text.strip():
            continue
        lines.append(_format_line(text, timestamps.get(i), speakers.get(i), project.anchor_ms))
    lines.append("")
    return "\n".join(lines)


def save_notes(project: ProjectData, path: str | Path, title: str | None = None) -> Path:
    """Write notes Markdown to *path*."""
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(build_markdown(project, title=title), encoding="utf-8")
    path.chmod(0o600)  # owner read/write only; meeting notes may be sensitive
    logger.info("Notes saved: %s", path)
    return path


def copy_to_clipboard(text: str) -> bool:
    """Copy text to system clipboard. Returns True on success."""
    try:
        import pyperclip
        pyperclip.copy(text)
        logger.info("Selection copied to clipboard.")
        return True
    except Exception as exc:
        logger.warning("Could not copy to clipboard: %s", exc)
        return False
