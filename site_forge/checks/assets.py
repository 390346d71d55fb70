"""
ASSETS check: every asset referenced by any HTML document must exist on disk.
"""

from __future__ import annotations

from pathlib import Path

from site_forge.errors import FilesystemError, ParseError
from site_forge.markup import extract_references_from_file, find_html_files
from site_forge.models import AssetsResult, Status
from site_forge.resolver import resolve_reference


def check_assets(site_dir: Path) -> AssetsResult:
    try:
        html_files = find_html_files(site_dir)
    except FilesystemError as exc:
        return AssetsResult(Status.FAIL, details=f"Error finding HTML files: {exc}")

    if not html_files:
        return AssetsResult(Status.FAIL, details=f"No documents found: no HTML files in {site_dir}")

    total = 0
    missing: list[str] = []
    for html_file in html_files:
        try:
            references = extract_references_from_file(html_file)
        except (FilesystemError, ParseError) as exc:
            return AssetsResult(
                Status.FAIL,
                total=total,
                missing=tuple(missing),
                details=f"Error parsing {html_file}: {exc}",
            )
        for reference in references:
            total += 1
            resolved = resolve_reference(reference, site_dir)
            if not resolved.exists:
                missing.append(resolved.reference)

    if missing:
        return AssetsResult(Status.FAIL, total=total, missing=tuple(missing), details=f"Missing {len(missing)} assets")
    if total == 0:
        return AssetsResult(Status.FAIL, details=f"No asset references found in {len(html_files)} document(s)")
    return AssetsResult(Status.PASS, total=total, details=f"{total}/{total} assets verified")
