from unittest.mock import patch

from sqlalchemy.ext.asyncio import AsyncEngine

import billbook.db as db_module


class TestBuildEngine:
    async def test_explicit_url(self, tmp_path):
        engine = db_module.build_engine(f"sqlite+aiosqlite:///{tmp_path / 'a.db'}")
        try:
            assert isinstance(engine, AsyncEngine)
            assert engine.url.database.endswith("a.db")
        finally:
            await engine.dispose()

    async def test_settings_url(self, tmp_path):
        with patch.object(db_module, "settings") as mock_settings:
            mock_settings.db_url = f"sqlite+aiosqlite:///{tmp_path / 'from_settings.db'}"
            mock_settings.db_echo = False
            engine = db_module.build_engine()
        try:
            assert engine.url.database.endswith("from_settings.db")
        finally:
            await engine.dispose()

    async def test_not_cached(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'b.db'}"
        first = db_module.build_engine(url)
        second = db_module.build_engine(url)
        try:
            assert first is not second
        finally:
            await first.dispose()
            await second.dispose()
