"""
Upload Store

Transient local storage for photos uploaded through the form. Files live here
only until the site that references them has been published.
"""

import os
import secrets
import time
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from propertysite.core.constants import (
    ALLOWED_IMAGE_EXTENSIONS,
    ALLOWED_IMAGE_MIMETYPES,
    MAX_UPLOAD_FILES,
    MAX_UPLOAD_SIZE,
    UPLOAD_URL_PREFIX,
)
from propertysite.exceptions import UploadError
from propertysite.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class UploadedFile:
    """A staged upload, referenced by ``path`` (``/uploads/<filename>``)."""

    filename: str
    original_name: str
    path: str
    size: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape the form expects."""
        data = asdict(self)
        data["originalName"] = data.pop("original_name")
        return data


def _extension(name: str) -> str:
    return os.path.splitext(name or "")[1].lower()


def _unique_name(extension: str) -> str:
    """Timestamp plus random suffix, e.g. ``1712345678901-3f9a1c2b7d4e.jpg``."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(6)}{extension}"


class UploadStore:
    """Validates, writes and later discards uploaded images."""

    def __init__(
        self,
        directory: str,
        max_files: int = MAX_UPLOAD_FILES,
        max_size: int = MAX_UPLOAD_SIZE,
    ):
        self.directory = Path(directory).resolve()
        self.max_files = max_files
        self.max_size = max_size

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def _read_validated(self, upload: FileStorage) -> bytes:
        """Check type and size of one upload and return its bytes."""
        name = upload.filename or ""
        extension = _extension(name)
        mimetype = (upload.mimetype or "").lower()

        if extension not in ALLOWED_IMAGE_EXTENSIONS or mimetype not in ALLOWED_IMAGE_MIMETYPES:
            raise UploadError("Only image files are allowed", filename=name)

        # Read one byte past the limit to detect oversize files without buffering them whole
        content = upload.stream.read(self.max_size + 1)
        if len(content) > self.max_size:
            raise UploadError(
                f"File too large (max {self.max_size // (1024 * 1024)}MB)",
                filename=name,
            )
        return content

    def save_all(self, uploads: Sequence[FileStorage]) -> List[UploadedFile]:
        """Validate every upload, then write them all.

        Nothing is written unless the whole batch passes validation.

        Raises:
            UploadError: on a disallowed type, oversize file, or too many files.
        """
        uploads = [u for u in uploads if u and u.filename]
        if not uploads:
            raise UploadError("No files uploaded")
        if len(uploads) > self.max_files:
            raise UploadError(f"Too many files (max {self.max_files} per upload)")

        payloads = [(upload, self._read_validated(upload)) for upload in uploads]

        self.ensure_directory()
        saved: List[UploadedFile] = []
        try:
            for upload, content in payloads:
                filename = _unique_name(_extension(upload.filename))
                (self.directory / filename).write_bytes(content)
                saved.append(UploadedFile(
                    filename=filename,
                    original_name=secure_filename(upload.filename) or upload.filename,
                    path=f"{UPLOAD_URL_PREFIX}{filename}",
                    size=len(content),
                ))
        except OSError as e:
            self.discard(item.path for item in saved)
            raise UploadError(f"Failed to store upload: {e}") from e

        logger.info("Stored %d upload(s) in %s", len(saved), self.directory)
        return saved

    def resolve(self, path: str) -> Path:
        """Map an ``/uploads/<name>`` reference to its file on disk.

        Raises:
            UploadError: if the reference points outside the upload directory.
        """
        name = (path or "").strip()
        if name.startswith(UPLOAD_URL_PREFIX):
            name = name[len(UPLOAD_URL_PREFIX):]
        name = name.lstrip("/")
        candidate = (self.directory / name).resolve()
        if not name or candidate.parent != self.directory:
            raise UploadError(f"Invalid upload reference: {path}")
        return candidate

    def read(self, path: str) -> bytes:
        """Return the bytes of a staged upload.

        Raises:
            UploadError: if the reference is invalid.
            OSError: if the file cannot be read.
        """
        return self.resolve(path).read_bytes()

    def discard(self, paths: Iterable[str]) -> int:
        """Delete staged uploads, best-effort. Returns how many were removed."""
        removed = 0
        for path in paths:
            try:
                self.resolve(path).unlink()
                removed += 1
            except (UploadError, OSError) as e:
                logger.debug("Could not remove upload %s: %s", path, e)
        return removed
