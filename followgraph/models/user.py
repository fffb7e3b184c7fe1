# followgraph/models/user.py
from sqlalchemy import Boolean, Column, Integer, String, DateTime
from datetime import datetime

from ..db.base_class import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    user_nicename = Column(String, unique=True, index=True)  # URL slug
    display_name = Column(String, nullable=True)
    email = Column(String, unique=True, index=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def slug(self) -> str:
        return self.user_nicename or self.username

    @property
    def name(self) -> str:
        return self.display_name or self.username
