from typing import Iterable, Iterator, TextIO

from .record import Record


class ServiceSnapshot:
    """
    Immutable point-in-time copy of a set of records.

    Snapshots are the interchange unit between a storage engine and the
    CSV/XML files: ``make_snapshot()`` produces one for export, the
    ``load_from_*`` constructors produce one for ``restore()``.
    """

    def __init__(self, records: Iterable[Record] = ()):
        # Records are frozen dataclasses, so a tuple of them is a private copy
        self._records: tuple[Record, ...] = tuple(records)

    @property
    def records(self) -> tuple[Record, ...]:
        """Return the records in snapshot order."""
        return self._records

    @classmethod
    def load_from_csv(cls, reader: TextIO) -> 'ServiceSnapshot':
        """Build a snapshot from a CSV text stream."""
        from ..serialization import RecordCsvReader

        return cls(RecordCsvReader(reader).read_all())

    @classmethod
    def load_from_xml(cls, reader) -> 'ServiceSnapshot':
        """Build a snapshot from an XML file path or binary/text stream."""
        from ..serialization import RecordXmlReader

        return cls(RecordXmlReader(reader).read_all())

    def save_to_csv(self, writer: TextIO) -> None:
        """Write every record to a CSV text stream."""
        from ..serialization import RecordCsvWriter

        RecordCsvWriter(writer).write(self._records)

    def save_to_xml(self, writer) -> None:
        """Write every record as an XML document."""
        from ..serialization import RecordXmlWriter

        RecordXmlWriter(writer).write(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __str__(self) -> str:
        return f"Snapshot object with {len(self._records)} record(s)"
