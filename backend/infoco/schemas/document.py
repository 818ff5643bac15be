from __future__ import annotations

from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, Field

from infoco.schemas.base import Record

DOCUMENT_FOLDERS = ("Contratos", "ARPs", "Minutas", "QDD", "TR", "DFDs")


class ManagedFile(Record):
    name: str
    type: str
    size: int = Field(ge=0)
    data_url: str


class ManagedFileCreate(BaseModel):
    name: str = Field(min_length=1)
    type: str = "application/octet-stream"
    size: int = Field(ge=0)
    data_url: str = Field(min_length=1)


class PaymentNote(Record):
    reference_month: str = Field(pattern=r"^\d{4}-(0[1-9]|1[0-2])$")
    description: str
    file: ManagedFile
    upload_date: datetime


class PaymentNoteCreate(BaseModel):
    reference_month: str = Field(pattern=r"^\d{4}-(0[1-9]|1[0-2])$")
    description: str = ""
    file: ManagedFileCreate


class MunicipalityFolders(BaseModel):
    municipality: str
    folders: Dict[str, List[ManagedFile]]
