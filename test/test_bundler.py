import io
import zipfile

import pytest

from page4u_mcp.errors import ValidationError
from page4u_mcp.services import bundler
from page4u_mcp.services.bundler import (
    ARCHIVE_NAME,
    ROOT_DOCUMENT,
    AssetEntry,
    build_deploy_file,
    bundle_site,
    check_asset_path,
)

HTML = '<html><img src="images/logo.png"></html>'


def _entries(data):
    with zipfile.ZipFile(io.BytesIO(data)) as z:
        return {name: z.read(name) for name in z.namelist()}


def test_archive_holds_root_document_and_assets_at_their_paths():
    assets = [AssetEntry("images/logo.png", b"\x89PNG"), AssetEntry("css/style.css", b"body{}")]
    entries = _entries(bundle_site(HTML, assets))
    assert set(entries) == {ROOT_DOCUMENT, "images/logo.png", "css/style.css"}
    assert entries[ROOT_DOCUMENT] == HTML.encode("utf-8")
    assert entries["images/logo.png"] == b"\x89PNG"


def test_bundling_is_deterministic():
    assets = [AssetEntry("a.js", b"1"), AssetEntry("b/c.txt", b"2")]
    assert bundle_site(HTML, assets) == bundle_site(HTML, list(assets))


def test_duplicate_paths_are_rejected():
    with pytest.raises(ValidationError) as exc:
        bundle_site(HTML, [AssetEntry("a.css", b"1"), AssetEntry("a.css", b"2")])
    assert exc.value.field == "assets"


def test_asset_cannot_shadow_root_document():
    with pytest.raises(ValidationError):
        bundle_site(HTML, [AssetEntry(ROOT_DOCUMENT, b"<html/>")])


@pytest.mark.parametrize("path", ["", "  ", "/etc/passwd", "../up.png", "img/../../x"])
def test_bad_asset_paths(path):
    with pytest.raises(ValueError):
        check_asset_path(path)


def test_no_assets_sends_plain_html_without_bundling(monkeypatch):
    def boom(*args, **kwargs):
        raise AssertionError("bundle_site must not run without assets")

    monkeypatch.setattr(bundler, "bundle_site", boom)
    upload = build_deploy_file(HTML, [])
    assert upload.filename == ROOT_DOCUMENT
    assert upload.content_type == "text/html"
    assert upload.content == HTML.encode("utf-8")
    assert not upload.is_archive


def test_assets_always_produce_an_archive():
    upload = build_deploy_file(HTML, [AssetEntry("logo.svg", b"<svg/>")])
    assert upload.filename == ARCHIVE_NAME
    assert upload.content_type == "application/zip"
    assert upload.is_archive
    assert set(_entries(upload.content)) == {ROOT_DOCUMENT, "logo.svg"}
