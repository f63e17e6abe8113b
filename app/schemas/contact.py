from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional


class ContactEntry(BaseModel):
    value: str = Field(..., min_length=1, max_length=500)
    label_en: Optional[str] = Field(None, max_length=200)
    label_ar: Optional[str] = Field(None, max_length=200)

    model_config = ConfigDict(from_attributes=True)


# {"phone": [{"value": ..., "label_en": ..., "label_ar": ...}], "email": [...]}
ContactInfoGroups = Dict[str, List[ContactEntry]]


class CompanyResponse(BaseModel):
    name_en: str
    name_ar: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
