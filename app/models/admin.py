# app/models/admin.py
"""Administrators table. Access is granted only when role == 'admin'."""

from sqlalchemy import Column, String
from app.database import Base


class Admin(Base):
    __tablename__ = "admins"

    email = Column(String(320), primary_key=True)
    role = Column(String(20), nullable=False, default="admin")

    def __repr__(self):
        return f"<Admin {self.email} role={self.role}>"
