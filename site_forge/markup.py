"""
HTML document discovery, parsing, and asset reference extraction.
"""

from __future__ import annotations

import os
from pathlib import Path

from bs4 import BeautifulSoup, Tag
from bs4.exceptions import ParserRejectedMarkup

from site_forge.errors import FilesystemError, ParseError

HTML_SUFFIXES = (".html", ".htm")
LINK_RELS = {"stylesheet", "icon", "shortcut"}


def find_html_files(root: Path) -> list[Path]:
    """Return every .html/.htm file under root, a directory's own files before its subdirectories."""
    try:
        with os.scandir(root) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        raise FilesystemError(f"cannot read directory {root}: {exc}") from exc

    files: list[Path] = []
    subdirs: list[Path] = []
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            subdirs.append(Path(entry.path))
        elif entry.is_file() and entry.name.endswith(HTML_SUFFIXES):
            files.append(Path(entry.path))
    for sub in subdirs:
        files.extend(find_html_files(sub))
    return files


def parse_document(markup: str | bytes) -> BeautifulSoup:
    # html.parser keeps the tree literal: no <html>/<head>/<body> is invented.
    try:
        return BeautifulSoup(markup, "html.parser")
    except ParserRejectedMarkup as exc:
        raise ParseError(str(exc)) from exc


def read_document(path: Path) -> BeautifulSoup:
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise FilesystemError(f"cannot read {path}: {exc}") from exc
    return parse_document(data)


def _rel_value(tag: Tag) -> str:
    # bs4 splits rel into tokens; the whole value is compared, case-sensitively.
    rel = tag.get("rel")
    if rel is None:
        return ""
    if isinstance(rel, str):
        return " ".join(rel.split())
    return " ".join(str(x) for x in rel)


def split_srcset(value: str) -> list[str]:
    urls: list[str] = []
    for candidate in value.split(","):
        tokens = candidate.split()
        if tokens:
            urls.append(tokens[0])
    return urls


def extract_references(soup: BeautifulSoup) -> list[str]:
    refs: list[str] = []
    for tag in soup.find_all(["img", "link", "script", "source"]):
        if tag.name == "img":
            src = str(tag.get("src") or "")
            if src and not src.startswith("data:"):
                refs.append(src)
        elif tag.name == "link":
            href = str(tag.get("href") or "")
            if href and _rel_value(tag) in LINK_RELS:
                refs.append(href)
        elif tag.name == "script":
            src = str(tag.get("src") or "")
            if src:
                refs.append(src)
        elif tag.name == "source":
            srcset = str(tag.get("srcset") or "")
            if srcset:
                refs.extend(split_srcset(srcset))
    return refs


def extract_references_from_file(path: Path) -> list[str]:
    return extract_references(read_document(path))
