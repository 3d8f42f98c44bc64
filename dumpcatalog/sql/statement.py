"""Extract the DDL statements held in a schema file."""

from __future__ import annotations

import bz2
import gzip
import lzma
import threading
from typing import TYPE_CHECKING

from dumpcatalog.core.logging import get_logger
from dumpcatalog.domain.source import Compression, FileInfo
from dumpcatalog.errors import StatementExtractionError

if TYPE_CHECKING:
    from dumpcatalog.storage import Storage

logger = get_logger(__name__)

# character_set -> python codec
CHARACTER_SETS: dict[str, str] = {
    "auto": "utf-8",
    "utf8mb4": "utf-8",
    "binary": "latin-1",
    "gb18030": "gb18030",
    "gbk": "gbk",
    "latin1": "cp1252",
}


def decode_character_set(data: bytes, character_set: str) -> str:
    """Decode schema bytes with a configured character set.

    ``binary`` keeps every byte as-is (one character per byte).

    Raises:
        StatementExtractionError: Unknown character set or undecodable data.
    """
    codec = CHARACTER_SETS.get(character_set.lower())
    if codec is None:
        raise StatementExtractionError(f"unsupported character set '{character_set}'")
    try:
        return data.decode(codec)
    except UnicodeDecodeError as e:
        raise StatementExtractionError(
            f"cannot decode input as {character_set}: {e}"
        ) from e


def _decompress(data: bytes, compression: Compression, path: str) -> bytes:
    try:
        if compression == Compression.NONE:
            return data
        if compression == Compression.GZIP:
            return gzip.decompress(data)
        if compression == Compression.BZIP2:
            return bz2.decompress(data)
        if compression == Compression.XZ:
            return lzma.decompress(data)
    except (OSError, EOFError, lzma.LZMAError) as e:
        raise StatementExtractionError(
            f"failed to decompress '{path}' as {compression.value}: {e}", path=path
        ) from e
    raise StatementExtractionError(
        f"compression '{compression.value}' is not supported for schema file '{path}'",
        path=path,
    )


def _fold_statements(text: bytes) -> bytes:
    """Join the statements of a dump file, dropping comment-only statements.

    Lines are trimmed and blank lines skipped. A statement ends at a line
    ending with ';'. Versioned comments such as ``/*!40101 SET ... */;``
    are dropped.
    """
    data = bytearray()
    buffer = bytearray()
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        buffer += line
        if buffer.endswith(b";"):
            if not (buffer.startswith(b"/*") and buffer.endswith(b"*/;")):
                data += buffer
            buffer.clear()
        else:
            buffer += b"\n"
    return bytes(data)


def export_statement(
    storage: Storage,
    file_info: FileInfo,
    character_set: str,
    cancel: threading.Event | None = None,
) -> str:
    """Read a schema file and return its statements as text.

    Args:
        storage: Storage holding the file
        file_info: The schema file to read
        character_set: Encoding of the file content
        cancel: Optional cancellation event

    Returns:
        The kept statements, concatenated

    Raises:
        StorageError: The file could not be read
        StatementExtractionError: Decompression or decoding failed
    """
    path = file_info.file_meta.path
    raw = storage.read_all(path, cancel=cancel)
    raw = _decompress(raw, file_info.file_meta.compression, path)
    data = _fold_statements(raw)
    try:
        return decode_character_set(data, character_set)
    except StatementExtractionError as e:
        logger.error(
            "schema_decode_failed",
            path=path,
            character_set=character_set,
            hint="please convert the file to the target encoding manually",
        )
        raise StatementExtractionError(
            f"failed to decode {path} as {character_set}: {e}", path=path
        ) from e
