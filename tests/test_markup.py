from __future__ import annotations

from pathlib import Path

import pytest

from conftest import write_files
from site_forge.errors import FilesystemError
from site_forge.markup import extract_references, find_html_files, parse_document, split_srcset


def test_find_html_files_lists_own_files_before_subdirectories(tmp_path: Path) -> None:
    write_files(
        tmp_path,
        {
            "index.html": "<html></html>",
            "b/about.html": "<html></html>",
            "a/deep/page.htm": "<html></html>",
            "zz.html": "<html></html>",
            "style.css": "",
            "notes.html.bak": "",
        },
    )

    files = find_html_files(tmp_path)

    assert [p.relative_to(tmp_path).as_posix() for p in files] == [
        "index.html",
        "zz.html",
        "a/deep/page.htm",
        "b/about.html",
    ]


def test_find_html_files_empty_directory(tmp_path: Path) -> None:
    assert find_html_files(tmp_path) == []


def test_find_html_files_missing_root_raises(tmp_path: Path) -> None:
    with pytest.raises(FilesystemError):
        find_html_files(tmp_path / "nope")


def test_extract_references_in_document_order() -> None:
    soup = parse_document(
        """<!DOCTYPE html>
<html>
<head>
  <link rel="stylesheet" href="style.css">
  <link rel="icon" href="favicon.ico">
</head>
<body>
  <img src="hero.jpg" alt="Hero">
  <img src="images/logo.svg" alt="Logo">
  <script src="app.js"></script>
  <picture>
    <source srcset="banner.webp" type="image/webp">
    <source srcset="banner.jpg" type="image/jpeg">
    <img src="banner-fallback.jpg" alt="Banner">
  </picture>
</body>
</html>"""
    )

    assert extract_references(soup) == [
        "style.css",
        "favicon.ico",
        "hero.jpg",
        "images/logo.svg",
        "app.js",
        "banner.webp",
        "banner.jpg",
        "banner-fallback.jpg",
    ]


def test_extract_references_skips_data_uris_and_unrelated_links() -> None:
    soup = parse_document(
        """<head>
  <link rel="preload" href="/fonts/a.woff2">
  <link rel="canonical" href="https://example.com/">
  <link rel="shortcut icon" href="/favicon.ico">
  <link href="/orphan.css">
  <script>console.log(1)</script>
</head>
<body>
  <img src="data:image/png;base64,AAAA">
  <img src="">
  <img src="/images/a.jpg">
  <img src="/images/a.jpg">
</body>"""
    )

    assert extract_references(soup) == ["/images/a.jpg", "/images/a.jpg"]


def test_link_rel_must_equal_a_single_kind() -> None:
    soup = parse_document(
        """<head>
  <link rel="preload stylesheet" href="/a.css">
  <link rel="alternate icon" href="/b.ico">
  <link rel="Stylesheet" href="/c.css">
  <link rel="shortcut" href="/d.ico">
  <link rel="icon" href="/e.svg">
</head>"""
    )

    assert extract_references(soup) == ["/d.ico", "/e.svg"]


def test_split_srcset_drops_descriptors() -> None:
    assert split_srcset("/images/a-400.webp 400w, /images/a-800.webp 800w,  ,b.jpg 2x") == [
        "/images/a-400.webp",
        "/images/a-800.webp",
        "b.jpg",
    ]


def test_malformed_markup_still_extracts() -> None:
    soup = parse_document('<html><body><div><img src="a.png"><p>unclosed <script src="b.js">')

    assert extract_references(soup) == ["a.png", "b.js"]
