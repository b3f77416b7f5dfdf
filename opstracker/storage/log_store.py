"""Bounded operation log and admin settings storage."""

import uuid
from typing import Any

from pydantic import ValidationError

from opstracker.core.clock import Clock, now_ms
from opstracker.core.errors import CorruptValueError, StorageError
from opstracker.core.logging import get_logger
from opstracker.models.admin import AdminSettings
from opstracker.models.operation import OperationInput, OperationRecord
from opstracker.storage.backends import JsonStore
from opstracker.storage.redis_client import StorageKeys

logger = get_logger(__name__)

LOG_RETENTION = 100


class EventLogStore:
    """Newest-first operation log capped at ``LOG_RETENTION`` records.

    Reads are always served from the backend, never cached. Read failures
    and corrupt data degrade to an empty log or default settings so that a
    broken cache never blocks recording; write failures raise
    ``StorageError``.
    """

    def __init__(
        self,
        backend: JsonStore,
        key_prefix: str = "opstracker",
        clock: Clock = now_ms,
    ):
        self._backend = backend
        self._keys = StorageKeys(key_prefix)
        self._clock = clock

    @property
    def clock(self) -> Clock:
        return self._clock

    async def append(self, entry: OperationInput, is_alert: bool = False) -> OperationRecord:
        """Stamp and prepend an operation, dropping records beyond the cap.

        Args:
            entry: Caller-reported operation
            is_alert: Mark as a synthetic alert record

        Returns:
            The stored record

        Raises:
            StorageError: If the log could not be written
        """
        timestamp = self._clock()
        record_id = uuid.uuid4().hex[:12]
        record = OperationRecord(
            **entry.model_dump(),
            id=f"alert-{record_id}" if is_alert else record_id,
            timestamp=timestamp,
            is_alert=is_alert,
        )

        records = await self.list_records()
        records.insert(0, record)
        retained = records[:LOG_RETENTION]

        await self._backend.set_json(
            self._keys.logs,
            [r.model_dump(mode="json", by_alias=True) for r in retained],
        )
        return record

    async def list_records(self) -> list[OperationRecord]:
        """Get all retained records, most recent first."""
        payload = await self._read(self._keys.logs)
        if payload is None:
            return []
        if not isinstance(payload, list):
            logger.warning("Stored log is not a list, ignoring", key=self._keys.logs)
            return []

        records = []
        for item in payload:
            try:
                records.append(OperationRecord.model_validate(item))
            except ValidationError:
                logger.warning("Skipping malformed log record", key=self._keys.logs)
                continue
        return records

    async def get_settings(self) -> AdminSettings:
        """Get persisted settings, or the defaults if none are stored."""
        settings, _ = await self.load_settings()
        return settings

    async def load_settings(self) -> tuple[AdminSettings, bool]:
        """Get settings and whether they may be written back.

        The flag is False only when the backend failed to answer: the
        stored value may still be intact, so overwriting it with defaults
        would lose the admin's settings. Missing or corrupt values are
        replaced by the defaults and may be overwritten.
        """
        try:
            payload = await self._backend.get_json(self._keys.settings)
        except CorruptValueError as e:
            logger.warning("Stored settings are corrupt, using defaults", key=self._keys.settings, error=str(e))
            return AdminSettings(), True
        except StorageError as e:
            logger.warning("Settings read failed, using defaults", key=self._keys.settings, error=str(e))
            return AdminSettings(), False
        if payload is None:
            return AdminSettings(), True
        try:
            return AdminSettings.model_validate(payload), True
        except ValidationError:
            logger.warning("Stored settings are malformed, using defaults", key=self._keys.settings)
            return AdminSettings(), True

    async def put_settings(self, settings: AdminSettings) -> None:
        """Replace the persisted settings.

        Raises:
            StorageError: If the settings could not be written
        """
        await self._backend.set_json(
            self._keys.settings,
            settings.model_dump(mode="json", by_alias=True),
        )

    async def clear(self) -> None:
        """Delete every record. Settings are kept."""
        await self._backend.delete(self._keys.logs)

    async def ping(self) -> bool:
        return await self._backend.ping()

    async def _read(self, key: str) -> Any | None:
        try:
            return await self._backend.get_json(key)
        except StorageError as e:
            logger.warning("Storage read failed, using empty state", key=key, error=str(e))
            return None
