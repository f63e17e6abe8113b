import logging
from collections import defaultdict
from typing import Dict, List

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.models.contact import Company, ContactInfo
from app.schemas.contact import ContactEntry, ContactInfoGroups

logger = logging.getLogger(__name__)


class ContactService:
    def __init__(self, db: Session):
        self.db = db

    def get_contact_info(self) -> Dict[str, List[ContactEntry]]:
        rows = (
            self.db.execute(
                select(ContactInfo).order_by(
                    ContactInfo.created_at.asc(), ContactInfo.id.asc()
                )
            )
            .scalars()
            .all()
        )
        grouped: Dict[str, List[ContactEntry]] = defaultdict(list)
        for row in rows:
            grouped[row.type].append(ContactEntry.model_validate(row))
        return dict(grouped)

    def replace_contact_info(
        self, groups: ContactInfoGroups
    ) -> Dict[str, List[ContactEntry]]:
        self.db.execute(delete(ContactInfo))
        for contact_type, entries in groups.items():
            for entry in entries:
                self.db.add(ContactInfo(type=contact_type, **entry.model_dump()))
        self.db.commit()
        logger.info(f"Contact info replaced ({len(groups)} group(s))")
        return self.get_contact_info()

    def get_companies(self) -> List[Company]:
        return (
            self.db.execute(
                select(Company).order_by(Company.created_at.asc(), Company.id.asc())
            )
            .scalars()
            .all()
        )
