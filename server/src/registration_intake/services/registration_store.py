"""Registration store - append-only JSON persistence of registrations"""

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

from pydantic import ValidationError

from registration_intake.models.registration import RegistrationRecord

logger = logging.getLogger(__name__)

REGISTRATIONS_FILENAME = "registrations.json"


class StorageUnavailableError(RuntimeError):
    """The data directory or collection file cannot be read or written"""


class RegistrationStore:
    """Owns the persisted registration collection.

    The whole collection is read on every operation and rewritten after
    every append. Ids are position based (``count + 1``), which holds only
    while a single writer appends.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)
        self.registrations_file = self.data_dir / REGISTRATIONS_FILENAME

    def ensure_data_dir(self) -> None:
        """Create the data directory if it is missing"""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create data directory {self.data_dir}: {e}")
            raise StorageUnavailableError(
                f"Cannot create data directory {self.data_dir}"
            ) from e

    def load(self) -> List[RegistrationRecord]:
        """
        Load the full collection in persisted order.

        A missing file yields an empty collection. A file that cannot be
        parsed also yields an empty collection; the file itself is left
        untouched until the next append overwrites it.

        Raises:
            StorageUnavailableError: If the file exists but cannot be read
        """
        self.ensure_data_dir()

        try:
            raw = self.registrations_file.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error(f"Cannot read {self.registrations_file}: {e}")
            raise StorageUnavailableError(
                f"Cannot read {self.registrations_file}"
            ) from e

        try:
            documents = json.loads(raw.decode("utf-8"))
            if not isinstance(documents, list):
                raise TypeError(f"expected a list, got {type(documents).__name__}")
            return [RegistrationRecord.from_document(doc) for doc in documents]
        except (ValueError, TypeError, KeyError, AttributeError, ValidationError) as e:
            logger.warning(
                f"Ignoring malformed registrations file {self.registrations_file}: {e}"
            )
            return []

    def save(self, records: List[RegistrationRecord]) -> None:
        """Overwrite the collection file with the given records"""
        self.ensure_data_dir()

        payload = json.dumps(
            [record.to_document() for record in records], indent=2, ensure_ascii=False
        )
        tmp_file = self.registrations_file.with_name(
            self.registrations_file.name + ".tmp"
        )
        try:
            tmp_file.write_text(payload, encoding="utf-8")
            os.replace(tmp_file, self.registrations_file)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp_file.unlink(missing_ok=True)
            logger.error(f"Cannot write {self.registrations_file}: {e}")
            raise StorageUnavailableError(
                f"Cannot write {self.registrations_file}"
            ) from e

    def append(self, fields: Dict[str, Any]) -> RegistrationRecord:
        """
        Append a submission to the collection and persist it.

        Args:
            fields: Submitted attributes, stored verbatim

        Returns:
            RegistrationRecord: The stored record with its id and timestamp

        Raises:
            StorageUnavailableError: If the collection cannot be read or written
        """
        records = self.load()
        record = RegistrationRecord.create(len(records) + 1, fields)
        records.append(record)
        self.save(records)

        logger.info(f"Stored registration {record.id}")
        return record
