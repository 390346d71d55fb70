"""
Map asset references found in HTML onto files in the built site directory.

References come in three shapes:

- root-relative URL paths (``/images/a.jpg``), possibly carrying a deployment
  base path in front (``/my-site/images/a.jpg``),
- explicit relative paths (``./style.css``),
- bare relative paths (``images/a.jpg``).

A root-relative path is not a filesystem-absolute path. Joining it with the
site root through ``os.path.join`` would throw the root away, so it is glued
onto the root as a string instead.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# Build output directories whose position marks where the site root starts.
CONTENT_SEGMENTS = ("/images/", "/_astro/")


@dataclass(frozen=True)
class ResolvedAsset:
    reference: str
    path: Path
    exists: bool


def strip_base_path(reference: str) -> str:
    for segment in CONTENT_SEGMENTS:
        idx = reference.find(segment)
        if idx >= 0:
            return reference[idx:]
    # /favicon.ico and any other root-level path stay untouched.
    return reference


def _join(root: str, fragment: str) -> Path:
    return Path(os.path.normpath(os.path.join(root, fragment.lstrip("/"))))


def resolve_asset_path(reference: str, root: str | Path) -> Path:
    base = str(root)
    if reference.startswith("/"):
        return Path(base + strip_base_path(reference))
    if reference.startswith("./"):
        return _join(base, reference[1:])
    return _join(base, reference)


def resolve_reference(reference: str, root: str | Path) -> ResolvedAsset:
    path = resolve_asset_path(reference, root)
    return ResolvedAsset(reference=reference, path=path, exists=os.path.exists(path))
