from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from .db import Base


class CachedReport(Base):
    __tablename__ = "cached_reports"

    sha256 = Column(String(64), primary_key=True, index=True)
    result_json = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
