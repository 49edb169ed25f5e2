import os
import secrets
from datetime import datetime, timezone

from flask import current_app
from werkzeug.utils import secure_filename

from .errors import NotFound, ValidationError

IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}
ATTACHMENT_EXTENSIONS = IMAGE_EXTENSIONS | {
    "pdf",
    "txt",
    "csv",
    "doc",
    "docx",
    "xls",
    "xlsx",
    "ppt",
    "pptx",
    "odt",
    "ods",
    "zip",
}


class BlobStore:
    """Flat directory of uploaded files addressed by generated filenames."""

    def __init__(self, root: str, url_prefix: str = "/uploads"):
        self.root = root
        self.url_prefix = url_prefix.rstrip("/")

    def _ensure_root(self):
        os.makedirs(self.root, exist_ok=True)

    def url_for(self, filename: str) -> str:
        return f"{self.url_prefix}/{filename}"

    def path_for(self, filename: str) -> str:
        safe = secure_filename(filename or "")
        if not safe or safe != filename:
            raise NotFound("File not found")
        return os.path.join(self.root, safe)

    def save(self, file_storage, allowed_extensions: set[str]) -> dict:
        original = file_storage.filename or ""
        ext = original.rsplit(".", 1)[-1].lower() if "." in original else ""
        if ext not in allowed_extensions:
            raise ValidationError(f"File type not allowed: {ext or 'unknown'}")
        self._ensure_root()
        filename = f"{secrets.token_hex(12)}.{ext}"
        path = os.path.join(self.root, filename)
        file_storage.save(path)
        size = os.path.getsize(path)
        current_app.logger.info("[upload] stored %s (%d bytes)", filename, size)
        return {
            "filename": filename,
            "originalName": original,
            "mimeType": file_storage.mimetype or "application/octet-stream",
            "size": size,
            "url": self.url_for(filename),
        }

    def delete(self, filename: str) -> None:
        path = self.path_for(filename)
        if not os.path.isfile(path):
            raise NotFound("File not found")
        os.remove(path)
        current_app.logger.info("[upload] deleted %s", filename)

    def list_files(self) -> list[dict]:
        if not os.path.isdir(self.root):
            return []
        items = []
        for entry in os.scandir(self.root):
            if not entry.is_file():
                continue
            st = entry.stat()
            items.append(
                {
                    "filename": entry.name,
                    "url": self.url_for(entry.name),
                    "size": st.st_size,
                    "uploadedAt": datetime.fromtimestamp(st.st_mtime, timezone.utc)
                    .replace(tzinfo=None)
                    .isoformat(),
                }
            )
        items.sort(key=lambda it: it["uploadedAt"], reverse=True)
        return items

    def list_images(self) -> list[dict]:
        return [
            it
            for it in self.list_files()
            if it["filename"].rsplit(".", 1)[-1].lower() in IMAGE_EXTENSIONS
        ]


def get_store() -> BlobStore:
    return current_app.extensions["loggen_blobs"]
