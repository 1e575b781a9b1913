from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from taskboard.database import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    tasks = relationship("Task", back_populates="owner", cascade="all, delete-orphan")
