"""Notification preference toggles.

The store is an explicitly owned object; where the toggles are kept is
decided by the backend handed to it (SQLite via SQLAlchemy in the app,
a dict in tests).
"""

from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hondenwedstrijd.models import AppSetting
from hondenwedstrijd.schemas import NotificationPreferences

logger = logging.getLogger(__name__)

KEY_PREFIX = "notifications."


class PreferenceBackend(Protocol):
    async def load(self) -> dict[str, str]: ...

    async def save(self, values: dict[str, str]) -> None: ...


class MemoryPreferenceBackend:
    def __init__(self, initial: dict[str, str] | None = None):
        self.values: dict[str, str] = dict(initial or {})

    async def load(self) -> dict[str, str]:
        return dict(self.values)

    async def save(self, values: dict[str, str]) -> None:
        self.values.update(values)


class SqlPreferenceBackend:
    """Key/value rows in the app_settings table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def load(self) -> dict[str, str]:
        async with self._session_factory() as session:
            rows = (
                await session.execute(
                    select(AppSetting).where(AppSetting.key.startswith(KEY_PREFIX))
                )
            ).scalars().all()
        return {row.key: row.value for row in rows}

    async def save(self, values: dict[str, str]) -> None:
        async with self._session_factory() as session:
            for key, value in values.items():
                row = await session.get(AppSetting, key)
                if row:
                    row.value = value
                else:
                    session.add(AppSetting(key=key, value=value))
            await session.commit()


class PreferenceStore:
    def __init__(self, backend: PreferenceBackend):
        self._backend = backend

    async def get(self) -> NotificationPreferences:
        stored = await self._backend.load()
        values = {
            name: stored.get(KEY_PREFIX + name) == "1"
            for name in NotificationPreferences.model_fields
        }
        return NotificationPreferences(**values)

    async def update(self, prefs: NotificationPreferences) -> NotificationPreferences:
        await self._backend.save(
            {KEY_PREFIX + name: "1" if value else "0" for name, value in prefs.model_dump().items()}
        )
        logger.info("Notification preferences updated: %s", prefs.model_dump())
        return prefs
