"""Persistence of export records (host file reference -> object key)."""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol, Union

from s3_media_tools.core import get_logger
from s3_media_tools.core.exceptions import ExportRecordError

logger = get_logger(__name__)

OBJECT_KEY_FIELD = "object_key"


class ExportRecordStore(Protocol):
    """Protocol for the host's per-file metadata storage.

    Implementations raise ``ExportRecordError`` when the storage fails.
    """

    def get(self, ref: str, field: str) -> Optional[str]:
        ...

    def set(self, ref: str, field: str, value: str) -> None:
        ...


class InMemoryExportRecordStore:
    """Keeps export records in a dictionary."""

    def __init__(self) -> None:
        self._records: dict[str, dict[str, str]] = {}

    def get(self, ref: str, field: str) -> Optional[str]:
        return self._records.get(ref, {}).get(field)

    def set(self, ref: str, field: str, value: str) -> None:
        self._records.setdefault(ref, {})[field] = value


class JsonFileExportRecordStore:
    """Keeps export records in a JSON file: ``{ref: {field: value}}``.

    The file is read on every access and replaced as a whole on every
    change, so readers never see a partially written file.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> dict[str, dict[str, str]]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open(encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            error_msg = f"Failed to read export records from '{self.path}': {e}"
            logger.error(error_msg, error=str(e))
            raise ExportRecordError(error_msg)

        if not isinstance(records, dict):
            error_msg = f"Export records in '{self.path}' are not a JSON object"
            logger.error(error_msg)
            raise ExportRecordError(error_msg)
        return records

    def get(self, ref: str, field: str) -> Optional[str]:
        return self._load().get(ref, {}).get(field)

    def set(self, ref: str, field: str, value: str) -> None:
        records = self._load()
        records.setdefault(ref, {})[field] = value

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, sort_keys=True)
            Path(tmp_name).replace(self.path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            error_msg = f"Failed to write export records to '{self.path}': {e}"
            logger.error(error_msg, error=str(e))
            raise ExportRecordError(error_msg)

        logger.debug("Export record written", path=str(self.path), ref=ref)
