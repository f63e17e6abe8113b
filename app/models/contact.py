from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from app.database import Base


class ContactInfo(Base):
    __tablename__ = "contact_info"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(50), nullable=False)  # phone, email, address, ...
    value = Column(String(500), nullable=False)
    label_en = Column(String(200), nullable=True)
    label_ar = Column(String(200), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Company(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name_en = Column(String(200), nullable=False)
    name_ar = Column(String(200), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
