"""
BUILD check: the root document is structurally complete and carries the
basic SEO meta tags.
"""

from __future__ import annotations

from pathlib import Path

from bs4 import BeautifulSoup

from site_forge.errors import FilesystemError, ParseError
from site_forge.markup import find_html_files, read_document
from site_forge.models import BuildResult, Status

ROOT_DOCUMENT = "index.html"


def _meta_content(soup: BeautifulSoup, attr: str, value: str) -> str:
    for tag in soup.find_all("meta"):
        if tag.get(attr) == value:
            content = str(tag.get("content") or "")
            if content:
                return content
    return ""


def structural_errors(soup: BeautifulSoup) -> list[str]:
    errors: list[str] = []
    for name in ("html", "head", "body", "title"):
        if soup.find(name) is None:
            errors.append(f"missing <{name}> tag")
    if not _meta_content(soup, "name", "description"):
        errors.append("missing meta description")
    if not _meta_content(soup, "property", "og:title"):
        errors.append("missing og:title meta tag")
    return errors


def check_build(site_dir: Path) -> BuildResult:
    index = site_dir / ROOT_DOCUMENT
    if not index.exists():
        return BuildResult(Status.FAIL, details=f"{ROOT_DOCUMENT} not found")

    try:
        soup = read_document(index)
    except FilesystemError as exc:
        return BuildResult(Status.FAIL, details=f"Failed to read {ROOT_DOCUMENT}: {exc}")
    except ParseError as exc:
        return BuildResult(Status.FAIL, details=f"HTML parse error: {exc}")

    try:
        pages = len(find_html_files(site_dir))
    except FilesystemError as exc:
        return BuildResult(Status.FAIL, details=f"Error counting pages: {exc}")

    errors = structural_errors(soup)
    if errors:
        return BuildResult(Status.FAIL, pages=pages, details=", ".join(errors))
    return BuildResult(Status.PASS, pages=pages, details=f"Valid HTML, {pages} page(s), meta tags present")
