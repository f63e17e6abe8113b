"""Populate an empty database with the starter categories and contact details.

Run with ``python -m app.seed``. Existing rows are left alone, so the command
can be repeated safely.
"""

import logging

from sqlalchemy.orm import Session

from app.config import settings
from app.database import Base, SessionLocal, engine
from app import models  # noqa: F401 register all models with Base.metadata
from app.models.category import Category
from app.models.contact import ContactInfo
from app.services.auth_service import ensure_admin_user

logger = logging.getLogger(__name__)

SAMPLE_CATEGORIES = [
    {
        "name": "Current Properties",
        "name_ar": "العقارات الحالية",
        "description": "Currently managed properties",
        "description_ar": "العقارات المُدارة حالياً",
    },
    {
        "name": "Complexes",
        "name_ar": "المجمعات",
        "description": "Commercial and residential complexes",
        "description_ar": "المجمعات التجارية والسكنية",
    },
    {
        "name": "Residential",
        "name_ar": "السكنية",
        "description": "Residential properties and villas",
        "description_ar": "العقارات السكنية والفيلل",
    },
]

SAMPLE_CONTACTS = [
    {"type": "phone", "value": "+966-XX-XXX-XXXX", "label_en": "Main Office", "label_ar": "المكتب الرئيسي"},
    {"type": "email", "value": "info@example.com", "label_en": "General Info", "label_ar": "معلومات عامة"},
    {"type": "address", "value": "Riyadh, Saudi Arabia", "label_en": "Main Office", "label_ar": "المكتب الرئيسي"},
]


def seed(db: Session) -> dict:
    created = {"categories": 0, "contacts": 0}
    for data in SAMPLE_CATEGORIES:
        exists = db.query(Category).filter(Category.name == data["name"]).first()
        if not exists:
            db.add(Category(**data))
            created["categories"] += 1
    for data in SAMPLE_CONTACTS:
        exists = (
            db.query(ContactInfo)
            .filter(ContactInfo.type == data["type"], ContactInfo.value == data["value"])
            .first()
        )
        if not exists:
            db.add(ContactInfo(**data))
            created["contacts"] += 1
    db.commit()
    ensure_admin_user(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
    return created


def main():
    logging.basicConfig(level=settings.LOG_LEVEL)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        created = seed(db)
    finally:
        db.close()
    logger.info(
        f"Seeded {created['categories']} categories and {created['contacts']} contact entries"
    )


if __name__ == "__main__":
    main()
