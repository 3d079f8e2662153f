from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from uuid import UUID


class SettingUpdate(BaseModel):
    value: Optional[str] = None


class SettingResponse(BaseModel):
    id: UUID
    key: str
    value: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
