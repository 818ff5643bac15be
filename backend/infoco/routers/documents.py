from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from infoco.core.deps import get_entity_store, require_capability
from infoco.core.errors import ValidationError
from infoco.core.settings import settings
from infoco.models.enums import Capability
from infoco.schemas.document import (
    ManagedFile,
    ManagedFileCreate,
    MunicipalityFolders,
    PaymentNote,
    PaymentNoteCreate,
)
from infoco.schemas.user import Principal
from infoco.services import documents as document_service
from infoco.shared.contracts import API_PREFIXES
from infoco.shared.http import validation_failed
from infoco.store.entities import EntityStore

router = APIRouter(prefix=API_PREFIXES["documents"], tags=["documents"])
notes_router = APIRouter(prefix=API_PREFIXES["payment_notes"], tags=["payment-notes"])

_require_documents = require_capability(Capability.MANAGE_DOCUMENTS)
_require_notes = require_capability(Capability.MANAGE_NOTES)


def _check_size(file: ManagedFileCreate) -> None:
    if len(file.data_url) > settings.max_image_size_bytes * 5:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Arquivo muito grande")


@router.get("/{municipality}", response_model=MunicipalityFolders)
def read_folders(
    municipality: str,
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(_require_documents),
) -> MunicipalityFolders:
    return MunicipalityFolders(
        municipality=municipality,
        folders=document_service.municipality_folders(store, municipality),
    )


@router.get("/{municipality}/{folder}", response_model=List[ManagedFile])
def list_files(
    municipality: str,
    folder: str,
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(_require_documents),
) -> List[ManagedFile]:
    try:
        return document_service.list_files(store, municipality, folder)
    except ValidationError as exc:
        raise validation_failed(exc) from exc


@router.post("/{municipality}/{folder}", response_model=ManagedFile, status_code=status.HTTP_201_CREATED)
def upload_file(
    municipality: str,
    folder: str,
    payload: ManagedFileCreate,
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(_require_documents),
) -> ManagedFile:
    _check_size(payload)
    try:
        return document_service.add_file(store, municipality, folder, payload.model_dump())
    except ValidationError as exc:
        raise validation_failed(exc) from exc


@router.delete("/{municipality}/{folder}/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(
    municipality: str,
    folder: str,
    file_id: int,
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(_require_documents),
) -> Response:
    try:
        document_service.delete_file(store, municipality, folder, file_id)
    except ValidationError as exc:
        raise validation_failed(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@notes_router.get("/{municipality}", response_model=List[PaymentNote])
def list_payment_notes(
    municipality: str,
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(_require_notes),
) -> List[PaymentNote]:
    return document_service.list_payment_notes(store, municipality)


@notes_router.post("/{municipality}", response_model=PaymentNote, status_code=status.HTTP_201_CREATED)
def create_payment_note(
    municipality: str,
    payload: PaymentNoteCreate,
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(_require_notes),
) -> PaymentNote:
    _check_size(payload.file)
    return document_service.add_payment_note(store, municipality, payload.model_dump())


@notes_router.delete("/{municipality}/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment_note(
    municipality: str,
    note_id: int,
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(_require_notes),
) -> Response:
    document_service.delete_payment_note(store, municipality, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
