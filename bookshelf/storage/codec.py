"""Binary encoding of the catalog.

The catalog is stored as a single msgpack document. Entries are mapped
onto plain records first so that decoding never touches the filesystem:
a cataloged file that has since moved still loads, it just fails to
open.
"""

from pathlib import Path

import msgspec

from bookshelf.core.models import Entry
from bookshelf.core.tags import Tag


class EntryRecord(msgspec.Struct, frozen=True):
    """Stored form of an Entry."""

    location: str
    bibliography: str | None = None
    tags: list[Tag] = []


class CatalogRecord(msgspec.Struct, frozen=True):
    """Stored form of a Catalog: entries in order plus the tag index."""

    entries: list[EntryRecord] = []
    tags: list[Tag] = []


_encoder = msgspec.msgpack.Encoder()
_decoder = msgspec.msgpack.Decoder(CatalogRecord)


def entry_to_record(entry: Entry) -> EntryRecord:
    return EntryRecord(
        location=str(entry.location),
        bibliography=str(entry.bibliography) if entry.bibliography else None,
        tags=list(entry.tags),
    )


def record_to_entry(record: EntryRecord) -> Entry:
    return Entry(
        location=Path(record.location),
        bibliography=Path(record.bibliography) if record.bibliography else None,
        tags=tuple(record.tags),
    )


def encode(entries: list[Entry], tags: list[Tag]) -> bytes:
    """Serialize entries and the tag index to msgpack."""
    record = CatalogRecord(
        entries=[entry_to_record(entry) for entry in entries],
        tags=list(tags),
    )
    return _encoder.encode(record)


def decode(data: bytes) -> tuple[list[Entry], list[Tag]]:
    """Deserialize msgpack produced by ``encode``.

    Raises:
        msgspec.DecodeError: If ``data`` is not a valid catalog document.
    """
    record = _decoder.decode(data)
    return [record_to_entry(entry) for entry in record.entries], record.tags
