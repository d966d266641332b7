"""
Dataset index: record id to name lookup used for validity checks and reporting.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .errors import DatasetFormatError
from .models import Record, RecordId

logger = logging.getLogger(__name__)


def parse_csv_line(line: str) -> Tuple[str, str]:
    """Split an `id,name` row at the first comma.

    A name wrapped in double quotes is unquoted and its doubled quotes are
    collapsed; commas inside the name need no quoting.
    """
    first_comma = line.find(",")
    if first_comma == -1:
        raise DatasetFormatError(f"Invalid CSV row: {line}")

    record_id = line[:first_comma].strip()
    name = line[first_comma + 1:].strip()

    if len(name) >= 2 and name.startswith('"') and name.endswith('"'):
        name = name[1:-1].replace('""', '"')

    return record_id, name


class DatasetIndex:
    """Immutable id -> record mapping for one dataset."""

    def __init__(self, records: Iterable[Record]):
        """Initialize index with records."""
        self._records: List[Record] = list(records)
        logger.info(f"Initializing dataset index with {len(self._records)} records")
        self._by_id: Dict[RecordId, Record] = {}
        self._validate()
        logger.info("Dataset index initialized successfully")

    def _validate(self) -> None:
        """Reject duplicate record ids."""
        duplicates = []
        for record in self._records:
            if record.id in self._by_id:
                duplicates.append(record.id)
                continue
            self._by_id[record.id] = record

        if duplicates:
            duplicate_list = "\n".join(f"  - {record_id}" for record_id in duplicates)
            raise DatasetFormatError(f"Duplicate record ids found in dataset:\n{duplicate_list}")

    @classmethod
    def from_csv(cls, path: Union[str, Path]) -> "DatasetIndex":
        """Load dataset from a header + `id,name` CSV file."""
        logger.info(f"Loading dataset from {path}")

        path_obj = Path(path)
        if not path_obj.exists():
            raise FileNotFoundError(f"Dataset file not found: {path}")

        try:
            text = path_obj.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise
        except (OSError, UnicodeDecodeError) as e:
            raise DatasetFormatError(f"Cannot read dataset {path}: {e}") from e
        lines = [line for line in text.splitlines() if line.strip()]

        records: List[Record] = []
        # First non-blank line is the header
        for line_num, line in enumerate(lines[1:], 2):
            try:
                record_id, name = parse_csv_line(line)
            except DatasetFormatError as e:
                raise DatasetFormatError(f"Error parsing row {line_num} in {path}: {e}") from e
            records.append(Record(id=RecordId(record_id), name=name))

        logger.info(f"Loaded {len(records)} records from {path}")
        return cls(records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._by_id

    def get(self, record_id: str) -> Optional[Record]:
        return self._by_id.get(RecordId(record_id))

    def name_of(self, record_id: str, default: str = "<unknown-id>") -> str:
        record = self.get(record_id)
        return record.name if record else default

    def valid_ids(self) -> frozenset:
        """Set of every record id in the dataset."""
        return frozenset(self._by_id)

    def records(self) -> List[Record]:
        return list(self._records)
