from typing import List, Optional
import datetime

from pydantic import Field

from app.schemas.base import CamelModel


class CompanyBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)


class CompanyCreate(CompanyBase):
    pass


class CompanyUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    active: Optional[bool] = None


class Company(CompanyBase):
    id: int
    active: bool
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


class CompanyList(CamelModel):
    companies: List[Company]


class CompanyResponse(CamelModel):
    company: Optional[Company] = None
