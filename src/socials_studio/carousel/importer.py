"""Template import: uploaded files to normalized slide backgrounds.

Every usable input becomes a 1080x1080 PNG. Images are fitted inside the
canvas ("contain") on white, so nothing is cropped.

Supported inputs:
- image (png/jpg/jpeg/webp): one slide
- zip: one slide per image entry, ordered by filename with numbers compared
  numerically (slide2 before slide10)
- pdf: pages are NOT rasterized. A fixed number of blank placeholder
  slides is produced instead and a warning is logged.

Anything else is skipped. Import fails only when no slide results.
"""

from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass
from io import BytesIO
from pathlib import PurePosixPath

from PIL import Image, UnidentifiedImageError

from ..constants import (
    CANVAS_SIZE,
    PDF_PLACEHOLDER_COLOR,
    PDF_PLACEHOLDER_SLIDES,
    TemplateFileType,
)
from ..errors import UnsupportedError
from ..utils import natural_sort_key

_logger = logging.getLogger("carousel")

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp"}
ZIP_IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg"}


@dataclass
class TemplateFile:
    """An uploaded template file."""

    filename: str
    data: bytes
    mime_type: str | None = None

    @property
    def file_type(self) -> TemplateFileType | None:
        """Detect the kind of upload from mime type or extension."""
        suffix = PurePosixPath(self.filename.lower()).suffix
        mime = (self.mime_type or "").lower()
        if mime == "application/pdf" or suffix == ".pdf":
            return TemplateFileType.PDF
        if mime in ("application/zip", "application/x-zip-compressed") or suffix == ".zip":
            return TemplateFileType.ZIP
        if mime.startswith("image/") or suffix in IMAGE_EXTENSIONS:
            return TemplateFileType.IMAGE
        return None


def normalize_image(data: bytes, size: int = CANVAS_SIZE) -> bytes:
    """Fit an image inside a square white canvas and encode as PNG.

    Raises:
        UnidentifiedImageError: If the bytes are not an image.
    """
    img = Image.open(BytesIO(data))
    if img.mode in ("RGBA", "LA", "P"):
        img = img.convert("RGBA")
    else:
        img = img.convert("RGB")

    scale = min(size / img.width, size / img.height)
    img = img.resize(
        (min(size, max(1, round(img.width * scale))), min(size, max(1, round(img.height * scale)))),
        Image.Resampling.LANCZOS,
    )

    canvas = Image.new("RGB", (size, size), (255, 255, 255))
    offset = ((size - img.width) // 2, (size - img.height) // 2)
    if img.mode == "RGBA":
        canvas.paste(img, offset, img)
    else:
        canvas.paste(img, offset)

    output = BytesIO()
    canvas.save(output, format="PNG")
    return output.getvalue()


def placeholder_slide(size: int = CANVAS_SIZE) -> bytes:
    """Blank slide used in place of an unrasterized PDF page."""
    output = BytesIO()
    Image.new("RGB", (size, size), PDF_PLACEHOLDER_COLOR).save(output, format="PNG")
    return output.getvalue()


def extract_zip_images(data: bytes) -> list[bytes]:
    """Get normalized slides from the image entries of a ZIP archive."""
    slides: list[bytes] = []
    with zipfile.ZipFile(BytesIO(data)) as archive:
        entries = [
            info for info in archive.infolist()
            if not info.is_dir()
            and PurePosixPath(info.filename.lower()).suffix in ZIP_IMAGE_EXTENSIONS
        ]
        entries.sort(key=lambda info: natural_sort_key(PurePosixPath(info.filename).name))

        for info in entries:
            try:
                slides.append(normalize_image(archive.read(info)))
            except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
                _logger.warning(f"ZIP_ENTRY_SKIPPED | entry:{info.filename} | error:{e}")
    return slides


def import_template_files(files: list[TemplateFile]) -> list[bytes]:
    """Turn uploaded files into ordered slide backgrounds.

    Slides from several files are concatenated in upload order.

    Args:
        files: Uploaded files.

    Returns:
        PNG bytes per slide.

    Raises:
        UnsupportedError: If no file produced a slide.
    """
    slides: list[bytes] = []

    for upload in files:
        file_type = upload.file_type
        try:
            if file_type == TemplateFileType.PDF:
                _logger.warning(
                    f"PDF_PLACEHOLDER | file:{upload.filename} | "
                    f"slides:{PDF_PLACEHOLDER_SLIDES} | pages are not rasterized"
                )
                slides.extend(placeholder_slide() for _ in range(PDF_PLACEHOLDER_SLIDES))
            elif file_type == TemplateFileType.ZIP:
                slides.extend(extract_zip_images(upload.data))
            elif file_type == TemplateFileType.IMAGE:
                slides.append(normalize_image(upload.data))
            else:
                _logger.info(f"FILE_SKIPPED | file:{upload.filename} | reason:unsupported type")
        except (zipfile.BadZipFile, UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            _logger.warning(f"FILE_SKIPPED | file:{upload.filename} | error:{e}")

    if not slides:
        raise UnsupportedError("No valid slides found in uploaded files")
    return slides
