"""Image loading from local files or HTTP(S) URLs.

Every input is decoded with Pillow and flattened to 8-bit grayscale.
"""

from __future__ import annotations

import logging
import tempfile
import urllib.error
import urllib.request
from pathlib import Path
from typing import Callable
from urllib.parse import urlparse

from PIL import Image, UnidentifiedImageError

from typeart.core.source import GraySource

log = logging.getLogger(__name__)

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tif", ".tiff", ".webp")


def detect_format(path: Path) -> str:
    """Detect image format from file extension."""
    suffix = path.suffix.lower()
    if suffix in (".jpg", ".jpeg"):
        return "jpeg"
    if suffix in (".tif", ".tiff"):
        return "tiff"
    if suffix in IMAGE_SUFFIXES:
        return suffix.lstrip(".")
    raise ValueError(f"Unsupported format: {suffix}")


def is_url(path: str) -> bool:
    """Check if the input looks like an HTTP(S) URL."""
    parsed = urlparse(str(path))
    return parsed.scheme in ("http", "https")


def _guess_extension_from_url(url: str) -> str:
    """Extract file extension from a URL path."""
    suffix = Path(urlparse(url).path).suffix.lower()
    if suffix in IMAGE_SUFFIXES:
        return suffix
    # Pillow sniffs the real format on open
    return ".png"


def download_image(
    url: str,
    on_progress: Callable[[int, int], None] | None = None,
) -> Path:
    """Download an image from a URL to a temp file.

    Args:
        url: HTTP(S) URL to download.
        on_progress: optional callback(bytes_downloaded, total_bytes).

    Returns:
        Path to the downloaded temporary file.

    Raises:
        ValueError: if the URL is unreachable or returns an empty body.
    """
    ext = _guess_extension_from_url(url)
    tmp = tempfile.NamedTemporaryFile(suffix=ext, delete=False)
    tmp_path = Path(tmp.name)

    try:
        req = urllib.request.Request(url, headers={"User-Agent": "typeart/0.1"})
        with urllib.request.urlopen(req, timeout=30) as resp:
            total = int(resp.headers.get("Content-Length", 0))
            downloaded = 0
            while True:
                chunk = resp.read(65536)
                if not chunk:
                    break
                tmp.write(chunk)
                downloaded += len(chunk)
                if on_progress:
                    on_progress(downloaded, total)
        tmp.close()
    except urllib.error.URLError as e:
        tmp.close()
        tmp_path.unlink(missing_ok=True)
        raise ValueError(f"Failed to download {url}: {e}") from e
    except Exception:
        tmp.close()
        tmp_path.unlink(missing_ok=True)
        raise

    if tmp_path.stat().st_size == 0:
        tmp_path.unlink(missing_ok=True)
        raise ValueError(f"Downloaded file is empty: {url}")

    log.debug("downloaded %s to %s", url, tmp_path)
    return tmp_path


def load_image(path: Path) -> GraySource:
    """Decode a local image file into a grayscale source."""
    try:
        with Image.open(path) as img:
            img.load()
            source = GraySource.from_image(img)
    except UnidentifiedImageError as e:
        raise ValueError(f"Cannot decode image: {path}") from e
    log.debug("loaded %s as %r", path, source)
    return source


def open_image(path: str | Path) -> GraySource:
    """Open an image and return it as a grayscale source.

    Accepts local file paths or HTTP(S) URLs. URLs are downloaded to a
    temporary file first.
    """
    path_str = str(path)
    if is_url(path_str):
        local_path = download_image(path_str)
        try:
            return load_image(local_path)
        finally:
            local_path.unlink(missing_ok=True)

    local_path = Path(path_str)
    if not local_path.exists():
        raise FileNotFoundError(f"File not found: {local_path}")
    detect_format(local_path)
    return load_image(local_path)
