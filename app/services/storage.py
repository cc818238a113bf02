"""Local file storage for uploaded documents and generated permits."""

import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


class FileStorage:
    """
    Stores named blobs under a root directory and returns their public URL path.

    Names are relative paths such as ``permits/permit_7.pdf``. Saving under an
    existing name overwrites it.
    """

    def __init__(self, root: str | Path, url_prefix: str = "/uploads") -> None:
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def path_for(self, name: str) -> Path:
        """Resolve a stored name to a filesystem path. Raises ValueError outside the root."""
        if not name or not name.strip():
            raise ValueError("Storage name must be non-empty")
        root = self.root.resolve()
        path = (root / name).resolve()
        if root != path and root not in path.parents:
            raise ValueError(f"Storage name escapes the storage root: {name!r}")
        return path

    def url_for(self, name: str) -> str:
        return f"{self.url_prefix}/{name.lstrip('/')}"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def save(self, name: str, data: bytes) -> str:
        """Write data under name (replacing any previous file) and return its URL path."""
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write to a sibling temp file and rename so readers never see a partial file.
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=path.suffix)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info("Stored file", extra={"storage_name": name, "size_bytes": len(data)})
        return self.url_for(name)


def get_storage(settings: "Settings") -> FileStorage:
    return FileStorage(settings.UPLOADS_DIR, settings.UPLOADS_URL_PREFIX)
