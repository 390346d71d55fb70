from __future__ import annotations

from pathlib import Path

import pytest
import requests

from conftest import write_files
from site_forge.server import serve_directory


def test_serves_site_files_over_loopback(tmp_path: Path) -> None:
    write_files(tmp_path, {"index.html": "<h1>home</h1>", "_astro/site.css": "body {}"})

    with serve_directory(tmp_path, settle_delay=0) as url:
        assert url.startswith("http://127.0.0.1:")
        index = requests.get(url + "/", timeout=5)
        css = requests.get(url + "/_astro/site.css", timeout=5)
        missing = requests.get(url + "/nope.js", timeout=5)

    assert index.status_code == 200
    assert "<h1>home</h1>" in index.text
    assert css.text == "body {}"
    assert missing.status_code == 404


def test_server_is_gone_after_block_exits(tmp_path: Path) -> None:
    write_files(tmp_path, {"index.html": "ok"})

    with serve_directory(tmp_path, settle_delay=0) as url:
        pass

    with pytest.raises(requests.exceptions.ConnectionError):
        requests.get(url + "/", timeout=2)


def test_server_closes_when_block_raises(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        with serve_directory(tmp_path, settle_delay=0) as url:
            raise ValueError("boom")

    with pytest.raises(requests.exceptions.ConnectionError):
        requests.get(url + "/", timeout=2)
