from sqlalchemy import Column, String, DateTime, Text, Uuid
from sqlalchemy.sql import func
from app.core.database import Base, generate_uuid


class Setting(Base):
    __tablename__ = "settings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=generate_uuid)
    key = Column(String(100), unique=True, nullable=False, index=True)
    value = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
