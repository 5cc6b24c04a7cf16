"""
Structured personal names and their canonical string form.

A name is held as three independent, optional parts: surname, given name and
patronymic. The index never stores the parts themselves; it stores the
canonical form, which is the single-space-joined concatenation of whichever
parts are present, in the order surname → given → patronymic:

```python
from nameindex.records import NameRecord

NameRecord(surname="Ivanov", given="Ivan", patronymic="Ivanovich").canonical()
# Returns: "Ivanov Ivan Ivanovich"

NameRecord(surname="  Petrov ", patronymic="Petrovich").canonical()
# Returns: "Petrov Petrovich"
```

Each part is trimmed on its own before joining, so the canonical form never has
leading, trailing or doubled spaces produced by the join itself.
"""

from __future__ import annotations
import logging
from collections import abc
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Union

from nameindex.consts import NAME_PART_SEPARATOR


class InvalidArgument(ValueError):
    """Malformed caller input: an empty record or an unusable query prefix."""


@dataclass(frozen=True)
class NameRecord:
    """Immutable personal name with optional surname, given name and patronymic."""

    given: Optional[str] = None
    surname: Optional[str] = None
    patronymic: Optional[str] = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "NameRecord":
        """Build a record from a dict with optional `given`/`surname`/`patronymic` keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(mapping) - known
        if unknown:
            raise InvalidArgument(f"Unknown name fields: {sorted(unknown)}. Expected: {sorted(known)}")
        return cls(**{key: mapping.get(key) for key in known})

    def trimmed(self) -> "NameRecord":
        """Copy of the record with surrounding whitespace stripped from every part."""
        return NameRecord(
            given=_strip(self.given),
            surname=_strip(self.surname),
            patronymic=_strip(self.patronymic),
        )

    def canonical(self) -> str:
        """
        Canonical full-name string used for storage, sorting and matching.

        Raises InvalidArgument when every part is missing or whitespace-only,
        since such a record has no leading character to be filed under.
        """
        record = self.trimmed()
        # Joining only the non-empty parts gives exactly one space between
        # surname/given, given/patronymic, and surname/patronymic when given is absent.
        parts = [part for part in (record.surname, record.given, record.patronymic) if part]
        if not parts:
            raise InvalidArgument("All name parts are empty.")
        return NAME_PART_SEPARATOR.join(parts)

    def first_symbol(self) -> str:
        return self.canonical()[0]

    def __lt__(self, other: "NameRecord") -> bool:
        if not isinstance(other, NameRecord):
            return NotImplemented
        return self.canonical() < other.canonical()

    def __str__(self) -> str:
        return self.canonical()


RecordLike = Union[NameRecord, Mapping[str, Any]]


def _strip(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgument(f"Name parts must be strings, got {type(value).__name__}")
    return value.strip()


def canonicalize(record: RecordLike, fold_case: bool = False) -> str:
    """
    Turn a record (or a mapping of its parts) into its canonical string.

    Args:
        record: NameRecord or mapping with optional name-part keys
        fold_case: upper-case the result so matching ignores letter case

    Returns:
        The canonical form, upper-cased when `fold_case` is set
    """
    if isinstance(record, abc.Mapping):
        record = NameRecord.from_mapping(record)
    elif not isinstance(record, NameRecord):
        raise InvalidArgument(f"Expected a NameRecord or mapping, got {type(record).__name__}")

    try:
        value = record.canonical()
    except InvalidArgument as e:
        logging.warning(f"Rejected name record {record!r}: {e}")
        raise

    return value.upper() if fold_case else value
