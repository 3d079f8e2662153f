from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Dict
from app.core.database import get_db
from app.core.schemas import ApiResponse
from app.settings.schemas import SettingResponse, SettingUpdate
from app.settings.service import SettingService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/", response_model=ApiResponse[Dict[str, str]])
async def list_settings(db: Session = Depends(get_db)):
    """All settings as a key to value mapping."""
    setting_service = SettingService(db)
    return ApiResponse[Dict[str, str]](data=setting_service.list_settings())


@router.get("/{key}", response_model=ApiResponse[SettingResponse])
async def get_setting(key: str, db: Session = Depends(get_db)):
    setting_service = SettingService(db)
    setting = setting_service.get_setting(key)
    return ApiResponse[SettingResponse](data=SettingResponse.model_validate(setting))


@router.put("/{key}", response_model=ApiResponse[SettingResponse])
async def update_setting(
    key: str,
    setting_data: SettingUpdate,
    db: Session = Depends(get_db)
):
    """Create or overwrite a setting."""
    setting_service = SettingService(db)
    setting = setting_service.upsert_setting(key, setting_data.value)
    return ApiResponse[SettingResponse](
        message="Setting updated successfully",
        data=SettingResponse.model_validate(setting)
    )
