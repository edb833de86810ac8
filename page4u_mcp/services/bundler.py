"""Build the file uploaded by deploy_page: a bare index.html or a site.zip bundle"""
import io
import logging
import zipfile
from dataclasses import dataclass
from typing import List, Sequence

from page4u_mcp.errors import ValidationError

logger = logging.getLogger(__name__)

ROOT_DOCUMENT = "index.html"
ARCHIVE_NAME = "site.zip"

# Fixed entry timestamp so identical inputs give identical archives.
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


@dataclass(frozen=True)
class AssetEntry:
    """A file shipped next to index.html, addressed by its relative path."""

    path: str
    content: bytes


@dataclass(frozen=True)
class DeployFile:
    filename: str
    content: bytes
    content_type: str

    @property
    def is_archive(self) -> bool:
        return self.filename == ARCHIVE_NAME


def check_asset_path(path: str) -> str:
    """Validate one relative asset path and return it unchanged."""
    if not path or not path.strip():
        raise ValueError("asset path must not be empty")
    if path.startswith("/"):
        raise ValueError(f"asset path '{path}' must be relative (no leading '/')")
    if ".." in path.replace("\\", "/").split("/"):
        raise ValueError(f"asset path '{path}' must not contain '..' segments")
    return path


def _zip_entry(name: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name, date_time=_ZIP_EPOCH)
    info.compress_type = zipfile.ZIP_DEFLATED
    info.external_attr = 0o644 << 16
    return info


def bundle_site(html: str, assets: Sequence[AssetEntry]) -> bytes:
    """Zip ``html`` as index.html together with every asset at its own path.

    Colliding names (including an asset called index.html) are rejected rather
    than overwritten.
    """
    seen = {ROOT_DOCUMENT}
    for i, asset in enumerate(assets):
        try:
            check_asset_path(asset.path)
        except ValueError as e:
            raise ValidationError(f"assets.{i}.filename", str(e)) from e
        if asset.path in seen:
            raise ValidationError("assets", f"duplicate archive entry '{asset.path}'")
        seen.add(asset.path)

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as z:
        z.writestr(_zip_entry(ROOT_DOCUMENT), html.encode("utf-8"))
        for asset in assets:
            z.writestr(_zip_entry(asset.path), asset.content)

    data = buf.getvalue()
    logger.debug("Bundled %s + %d asset(s) into %d bytes", ROOT_DOCUMENT, len(assets), len(data))
    return data


def build_deploy_file(html: str, assets: Sequence[AssetEntry] = ()) -> DeployFile:
    """Pick the upload shape: a plain HTML document, or a zip when assets exist."""
    assets: List[AssetEntry] = list(assets or ())
    if not assets:
        return DeployFile(ROOT_DOCUMENT, html.encode("utf-8"), "text/html")
    return DeployFile(ARCHIVE_NAME, bundle_site(html, assets), "application/zip")
