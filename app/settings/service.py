import logging
from typing import Dict
from sqlalchemy.orm import Session
from app.core.exceptions import ResourceNotFoundError, ValidationError
from app.core.service_base import BaseService
from app.settings.models import Setting

logger = logging.getLogger(__name__)


class SettingService(BaseService):
    """Key/value application settings. Writes upsert, nothing is deleted."""

    def __init__(self, db: Session):
        super().__init__(db)

    def list_settings(self) -> Dict[str, str]:
        settings = self.db.query(Setting).order_by(Setting.key.asc()).all()
        return {setting.key: setting.value for setting in settings}

    def get_setting(self, key: str) -> Setting:
        setting = self.db.query(Setting).filter(Setting.key == key).first()
        if not setting:
            raise ResourceNotFoundError(resource_type="Setting", resource_id=key)
        return setting

    def upsert_setting(self, key: str, value: str) -> Setting:
        if value is None or value == "":
            raise ValidationError(detail="Value is required", field="value", value=value)

        setting = self.db.query(Setting).filter(Setting.key == key).first()
        if setting:
            setting.value = value
        else:
            setting = Setting(key=key, value=value)
            self.db.add(setting)

        self.safe_commit("Error saving setting", resource_type="Setting")
        self.db.refresh(setting)

        self.log_service_action("upsert_setting", "Setting", key)
        return setting
