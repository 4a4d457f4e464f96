"""Read named XML parts out of a .docx ZIP container."""

from __future__ import annotations

from io import BytesIO
from zipfile import BadZipFile, ZipFile

from charset_normalizer import from_bytes

DOCUMENT_PART = "word/document.xml"
COMMENTS_PART = "word/comments.xml"


class ArchiveOpenError(Exception):
    """Raised when bytes are not a readable ZIP container."""


class DocxArchive:
    """In-memory view over the parts of a .docx package."""

    def __init__(self, archive: ZipFile) -> None:
        self._archive = archive
        self._names = {name for name in archive.namelist() if not name.endswith("/")}

    @classmethod
    def open(cls, data: bytes) -> "DocxArchive":
        try:
            return cls(ZipFile(BytesIO(data), "r"))
        except (BadZipFile, OSError, ValueError) as exc:
            raise ArchiveOpenError(f"Not a readable .docx container: {exc}") from exc

    def __enter__(self) -> "DocxArchive":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._archive.close()

    def has_part(self, name: str) -> bool:
        return name in self._names

    def read_text(self, name: str) -> str | None:
        """Return the decoded text of ``name`` or None when the part is absent."""

        if name not in self._names:
            return None
        try:
            raw = self._archive.read(name)
        except (BadZipFile, OSError) as exc:
            raise ArchiveOpenError(f"Failed to read archive part {name}: {exc}") from exc
        return _decode_part(raw)


def _decode_part(raw: bytes) -> str:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    best = from_bytes(raw).best()
    if best and best.encoding:
        return str(best)
    return raw.decode("utf-8", errors="replace")
