from fastapi import APIRouter, Depends

from studypack.schemas.preferences import Preferences, PreferencesUpdate
from studypack.services.file_storage import PreferenceStore, get_preference_store
from studypack.utils.identity import get_user_id

router = APIRouter()


@router.get("", response_model=Preferences)
async def get_preferences(
    user_id: str = Depends(get_user_id),
    store: PreferenceStore = Depends(get_preference_store),
):
    return store.get(user_id)


@router.put("", response_model=Preferences)
async def update_preferences(
    payload: PreferencesUpdate,
    user_id: str = Depends(get_user_id),
    store: PreferenceStore = Depends(get_preference_store),
):
    return store.update(user_id, payload)
