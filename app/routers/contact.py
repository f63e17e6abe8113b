from typing import Annotated, Dict, List

from fastapi import APIRouter, Depends
from starlette import status

from app.dependencies import db_dependency, require_permission, Permission
from app.schemas.contact import CompanyResponse, ContactEntry, ContactInfoGroups
from app.services.contact_service import ContactService

router = APIRouter(tags=["contact"])

admin_dependency = Annotated[
    dict, Depends(require_permission(Permission.MANAGE_CONTACT))
]


@router.get(
    "/contact",
    response_model=Dict[str, List[ContactEntry]],
    status_code=status.HTTP_200_OK,
)
def get_contact_info(db: db_dependency):
    return ContactService(db).get_contact_info()


@router.put(
    "/contact",
    response_model=Dict[str, List[ContactEntry]],
    status_code=status.HTTP_200_OK,
)
def replace_contact_info(
    db: db_dependency, current_user: admin_dependency, contact: ContactInfoGroups
):
    return ContactService(db).replace_contact_info(contact)


@router.get(
    "/companies", response_model=List[CompanyResponse], status_code=status.HTTP_200_OK
)
def get_companies(db: db_dependency):
    return ContactService(db).get_companies()
