# tests/config/test_settings_store.py
"""Tests for SettingsStore."""

import aiofiles.os
import pytest

from riskfirst.config.settings import RiskSettings, StoreSettings
from riskfirst.config.settings_store import SettingsStore


@pytest.fixture
def store(tmp_path) -> SettingsStore:
    """Create a store rooted in a temporary directory."""
    return SettingsStore(StoreSettings(data_dir=str(tmp_path / "settings")))


class TestSettingsStore:
    """Tests for SettingsStore."""

    def test_creates_data_dir(self, tmp_path):
        """The data directory is created on init."""
        data_dir = tmp_path / "nested" / "settings"

        SettingsStore(StoreSettings(data_dir=str(data_dir)))

        assert data_dir.is_dir()

    @pytest.mark.asyncio
    async def test_missing_blob_loads_defaults(self, store):
        """A user with nothing saved gets the defaults."""
        settings = await store.load("user-1")

        assert settings == RiskSettings()

    @pytest.mark.asyncio
    async def test_save_then_load(self, store):
        """A saved record loads back unchanged."""
        saved = RiskSettings(max_leverage=5, enforce_prop_firm_limits=False)

        await store.save("user-1", saved)
        loaded = await store.load("user-1")

        assert loaded == saved

    @pytest.mark.asyncio
    async def test_partial_blob_merged_onto_defaults(self, store, tmp_path):
        """Blobs written with fewer fields gain the defaults."""
        (tmp_path / "settings" / "user-2.json").write_text('{"mdlPercent": 3}')

        settings = await store.load("user-2")

        assert settings.mdl_percent == 3.0
        assert settings.ml_percent == 10.0

    @pytest.mark.asyncio
    async def test_corrupt_blob_falls_back_to_defaults(self, store, tmp_path, caplog):
        """A corrupt blob is logged and replaced by the defaults."""
        (tmp_path / "settings" / "user-3.json").write_text("{broken")

        settings = await store.load("user-3")

        assert settings == RiskSettings()
        assert "Failed to load risk settings for user-3" in caplog.text

    @pytest.mark.asyncio
    async def test_non_utf8_blob_falls_back_to_defaults(self, store, tmp_path, caplog):
        """A blob that is not valid UTF-8 is logged and replaced by the defaults."""
        (tmp_path / "settings" / "user-5.json").write_bytes(b'{"maxLeverage": 5, "x": "\xff\xfe"}')

        settings = await store.load("user-5")

        assert settings == RiskSettings()
        assert "Failed to load risk settings for user-5" in caplog.text

    @pytest.mark.asyncio
    async def test_update_survives_non_utf8_blob(self, store, tmp_path):
        """Updating over an undecodable blob starts from the defaults."""
        (tmp_path / "settings" / "user-6.json").write_bytes(b"\xff\xfe\x00")

        updated = await store.update("user-6", max_leverage=5)

        assert updated == RiskSettings(max_leverage=5)
        assert await store.load("user-6") == updated

    @pytest.mark.asyncio
    async def test_save_leaves_no_temp_file(self, store, tmp_path):
        """A completed save leaves only the blob behind."""
        await store.save("user-7", RiskSettings(max_leverage=5))

        assert sorted(p.name for p in (tmp_path / "settings").iterdir()) == ["user-7.json"]

    @pytest.mark.asyncio
    async def test_failed_save_keeps_previous_record(self, store, tmp_path, monkeypatch):
        """An interrupted save neither truncates the old blob nor leaves a temp file."""
        await store.save("user-8", RiskSettings(max_leverage=5))

        async def failing_replace(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(aiofiles.os, "replace", failing_replace)

        with pytest.raises(OSError, match="disk full"):
            await store.save("user-8", RiskSettings(max_leverage=20))

        assert (await store.load("user-8")).max_leverage == 5.0
        assert not (tmp_path / "settings" / "user-8.json.tmp").exists()

    @pytest.mark.asyncio
    async def test_update_persists_partial_change(self, store):
        """Updates merge onto the stored record and are saved."""
        await store.save("user-4", RiskSettings(max_leverage=5))

        updated = await store.update("user-4", daily_loss_limit_pct=2.0)
        reloaded = await store.load("user-4")

        assert updated.max_leverage == 5.0
        assert updated.daily_loss_limit_pct == 2.0
        assert reloaded == updated

    @pytest.mark.asyncio
    async def test_users_are_isolated(self, store):
        """Each user has their own record."""
        await store.save("alice", RiskSettings(max_leverage=2))

        assert (await store.load("bob")).max_leverage == 25.0

    @pytest.mark.asyncio
    async def test_unsafe_user_id_rejected(self, store):
        """User ids that could escape the data directory are refused."""
        with pytest.raises(ValueError):
            await store.load("../etc/passwd")
