from fastapi import APIRouter, Depends

from vocab_drill.models.preferences import Preferences, PreferencesUpdate
from vocab_drill.services.runtime import DrillRuntime, get_runtime

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("", response_model=Preferences)
async def get_preferences(runtime: DrillRuntime = Depends(get_runtime)):
    return runtime.session.preferences


@router.put("", response_model=Preferences)
async def update_preferences(payload: PreferencesUpdate, runtime: DrillRuntime = Depends(get_runtime)):
    session = runtime.session
    if payload.mode is not None and payload.mode != session.mode:
        session.set_mode(payload.mode)
    if payload.direction is not None and payload.direction != session.direction:
        session.set_direction(payload.direction)
    if payload.shuffle is not None and payload.shuffle != session.shuffle:
        session.set_shuffle(payload.shuffle)
    if payload.theme is not None and payload.theme != session.theme:
        session.set_theme(payload.theme)
    await runtime.flush()
    return session.preferences
