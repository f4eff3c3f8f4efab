"""CSS Change Application Engine.

Decides where a style lives for an HTML document and edits exactly one file:

1. an embedded ``<style>`` block of the document,
2. otherwise the first linked local stylesheet holding the selector,
3. otherwise a new ``<style>`` block synthesized into the document.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from visual_inspector.errors import DocumentNotFound, DocumentUnreadable
from visual_inspector.stylesheet import CssChange, extract_styles, mutate_css

__all__ = [
    "ApplyResult",
    "apply_css_change",
    "get_styles_for_selector",
    "find_style_blocks",
    "find_linked_stylesheets",
    "add_style_block",
    "read_source",
]

log = logging.getLogger(__name__)

_STYLE_BLOCK_RE = re.compile(r"(<style\b[^>]*>)(.*?)(</style\s*>)", re.IGNORECASE | re.DOTALL)
_LINK_TAG_RE = re.compile(r"<link\b[^>]*>", re.IGNORECASE)
_ATTR_RE = re.compile(
    r"""([a-zA-Z_:][-a-zA-Z0-9_:.]*)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+))"""
)
_HEAD_CLOSE_RE = re.compile(r"</head\s*>", re.IGNORECASE)
_REMOTE_PREFIXES = ("http://", "https://", "//")


@dataclass(frozen=True)
class ApplyResult:
    success: bool
    message: str
    modified_file: str | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"success": self.success, "message": self.message}
        if self.modified_file is not None:
            data["modifiedFile"] = self.modified_file
        return data


def read_source(path: str | Path) -> str:
    """Read a document or stylesheet as UTF-8, keeping its line endings.

    Raises DocumentNotFound for a missing file and DocumentUnreadable when it
    cannot be read or decoded.
    """
    path = Path(path)
    if not path.is_file():
        raise DocumentNotFound(str(path))
    try:
        with path.open(encoding="utf-8", newline="") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentUnreadable(str(path), str(exc), cause=exc) from exc


def _write(path: Path, content: str) -> None:
    try:
        with path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(content)
    except (OSError, UnicodeEncodeError) as exc:
        raise DocumentUnreadable(str(path), str(exc), cause=exc) from exc
    log.info("Wrote %s", path)


def find_style_blocks(html: str) -> list[str]:
    """CSS text of every embedded ``<style>`` block, in document order."""
    return [m.group(2) for m in _STYLE_BLOCK_RE.finditer(html)]


def _link_attributes(tag: str) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for name, dq, sq, bare in _ATTR_RE.findall(tag):
        attrs[name.lower()] = dq or sq or bare
    return attrs


def find_linked_stylesheets(html: str, base_dir: str | Path) -> list[Path]:
    """Local stylesheets linked from *html*, resolved against *base_dir*.

    Remote (``http(s)://``) and protocol-relative (``//``) links are skipped.
    """
    base = Path(base_dir)
    files: list[Path] = []
    for tag in _LINK_TAG_RE.findall(html):
        attrs = _link_attributes(tag)
        if "stylesheet" not in attrs.get("rel", "").lower().split():
            continue
        href = attrs.get("href", "").strip()
        if not href or href.lower().startswith(_REMOTE_PREFIXES):
            continue
        href = href.split("#", 1)[0].split("?", 1)[0]
        if href:
            files.append((base / href).resolve())
    return files


def add_style_block(html: str, change: CssChange) -> str:
    """Insert a ``<style>`` block holding just *change*.

    Goes right before ``</head>`` when the document has one, else at the top.
    """
    new_style = (
        f"\n<style>\n{change.selector} {{\n  {change.property}: {change.value};\n}}\n</style>"
    )
    match = _HEAD_CLOSE_RE.search(html)
    if match:
        return html[: match.start()] + new_style + "\n" + html[match.start():]
    return new_style + "\n" + html


def _apply_to_style_blocks(html: str, change: CssChange) -> tuple[bool, str]:
    found = False

    def rewrite(match: re.Match[str]) -> str:
        nonlocal found
        result = mutate_css(match.group(2), change)
        if not result.modified:
            return match.group(0)
        found = True
        return match.group(1) + result.content + match.group(3)

    return found, _STYLE_BLOCK_RE.sub(rewrite, html)


def apply_css_change(document_path: str | Path, change: CssChange) -> ApplyResult:
    """Apply *change* to the document at *document_path* or its stylesheets.

    Raises DocumentNotFound if the document does not exist and
    DocumentUnreadable if a file it needs cannot be read or written.
    Otherwise always succeeds, having written exactly one file.
    """
    path = Path(document_path).resolve()
    if not path.is_file():
        raise DocumentNotFound(str(document_path))

    html = read_source(path)

    found, updated = _apply_to_style_blocks(html, change)
    if found:
        _write(path, updated)
        return ApplyResult(
            success=True,
            message=f"CSS applied in <style> of {path.name}",
            modified_file=str(path),
        )

    for css_file in find_linked_stylesheets(html, path.parent):
        if not css_file.is_file():
            log.debug("Linked stylesheet %s does not exist", css_file)
            continue
        result = mutate_css(read_source(css_file), change)
        if result.modified:
            _write(css_file, result.content)
            return ApplyResult(
                success=True,
                message=f"CSS applied in {css_file.name}",
                modified_file=str(css_file),
            )

    _write(path, add_style_block(html, change))
    return ApplyResult(
        success=True,
        message=f"New style added to {path.name}",
        modified_file=str(path),
    )


def get_styles_for_selector(document_path: str | Path, selector: str) -> dict[str, str]:
    """Cascade of declarations for *selector* across a document's stylesheets.

    Embedded blocks are read first, then linked files, later sources winning.
    A missing document yields an empty mapping. Raises DocumentUnreadable
    when the document or a linked stylesheet cannot be decoded.
    """
    path = Path(document_path).resolve()
    if not path.is_file():
        return {}
    html = read_source(path)
    styles: dict[str, str] = {}
    for css in find_style_blocks(html):
        styles.update(extract_styles(css, selector))
    for css_file in find_linked_stylesheets(html, path.parent):
        if css_file.is_file():
            styles.update(extract_styles(read_source(css_file), selector))
    return styles
