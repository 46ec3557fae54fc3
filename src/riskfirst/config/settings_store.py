"""Per-user persistence of risk settings as JSON blobs."""

import logging
import re
from pathlib import Path

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from riskfirst.config.settings import RiskSettings, StoreSettings


logger = logging.getLogger(__name__)

_USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.@-]+$")


class SettingsStore:
    """Stores each user's RiskSettings as an opaque blob.

    Blobs live at ``{data_dir}/{user_id}.json`` and are merged onto the
    defaults when loaded, so records written by older versions gain any new
    fields automatically.
    """

    def __init__(self, settings: StoreSettings) -> None:
        """Initialize the store.

        Args:
            settings: Store configuration.
        """
        self._data_dir = Path(settings.data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)

    def _get_file_path(self, user_id: str) -> Path:
        """Get the blob path for a user."""
        if not _USER_ID_PATTERN.match(user_id) or user_id in {".", ".."}:
            raise ValueError(f"Invalid user id: {user_id!r}")
        return self._data_dir / f"{user_id}.json"

    async def load(self, user_id: str) -> RiskSettings:
        """Load a user's settings, falling back to defaults.

        A missing blob yields the defaults. An unreadable or invalid blob is
        logged and also yields the defaults.

        Args:
            user_id: The user whose settings to load.

        Returns:
            The stored settings merged onto the defaults.
        """
        file_path = self._get_file_path(user_id)
        if not file_path.exists():
            return RiskSettings()

        try:
            async with aiofiles.open(file_path, "rb") as f:
                content = await f.read()
            return RiskSettings.from_blob(content)
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.error(f"Failed to load risk settings for {user_id}: {e}")
            return RiskSettings()

    async def save(self, user_id: str, settings: RiskSettings) -> None:
        """Persist a user's settings as a whole record.

        The blob is written to a temporary file and renamed over the old one,
        so an interrupted save leaves the previous record intact.

        Args:
            user_id: The user whose settings to save.
            settings: The record to persist.
        """
        file_path = self._get_file_path(user_id)
        tmp_path = file_path.with_name(f"{file_path.name}.tmp")
        try:
            async with aiofiles.open(tmp_path, "w") as f:
                await f.write(settings.to_blob())
            await aiofiles.os.replace(tmp_path, file_path)
        except OSError as e:
            logger.error(f"Failed to save risk settings for {user_id}: {e}")
            if tmp_path.exists():
                tmp_path.unlink()
            raise

    async def update(self, user_id: str, **changes) -> RiskSettings:
        """Apply a partial update to a user's settings and persist it.

        Args:
            user_id: The user whose settings to update.
            **changes: Field names mapped to their new values.

        Returns:
            The updated settings.
        """
        current = await self.load(user_id)
        updated = current.with_updates(**changes)
        await self.save(user_id, updated)
        return updated
