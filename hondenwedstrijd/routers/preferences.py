from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from hondenwedstrijd.auth import require_api_key
from hondenwedstrijd.schemas import NotificationPreferences
from hondenwedstrijd.services.preferences import PreferenceStore

router = APIRouter(prefix="/api/preferences", tags=["preferences"])


def get_preference_store(request: Request) -> PreferenceStore:
    return request.app.state.preferences


@router.get("", response_model=NotificationPreferences)
async def read_preferences(store: PreferenceStore = Depends(get_preference_store)):
    return await store.get()


@router.put("", response_model=NotificationPreferences, dependencies=[Depends(require_api_key)])
async def update_preferences(
    data: NotificationPreferences, store: PreferenceStore = Depends(get_preference_store)
):
    return await store.update(data)
