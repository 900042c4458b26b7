from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from vitrine.dependencies import get_background_service, require_session
from vitrine.repositories.json_storage import StorageIOError
from vitrine.services.background_service import BackgroundService, FondIn
from vitrine.services.blob_service import PayloadTooLarge, UnsupportedMediaType

logger = logging.getLogger(__name__)

router = APIRouter(tags=["fond"], dependencies=[Depends(require_session)])


@router.get("/fond")
def read_fond(svc: BackgroundService = Depends(get_background_service)):
    return svc.current()


@router.post("/fond")
def write_fond(payload: FondIn, svc: BackgroundService = Depends(get_background_service)):
    try:
        svc.replace(payload)
    except StorageIOError as exc:
        logger.error("Erreur sauvegarde fond: %s", exc)
        raise HTTPException(500, "Erreur sauvegarde fond")
    return {"message": "Fond mis à jour"}


@router.post("/upload-fond")
def upload_fond(
    fond: Optional[UploadFile] = File(None),
    svc: BackgroundService = Depends(get_background_service),
):
    if fond is None:
        raise HTTPException(400, "Fichier manquant")
    try:
        ref = svc.upload(fond.file, fond.content_type)
    except UnsupportedMediaType as exc:
        raise HTTPException(415, str(exc))
    except PayloadTooLarge as exc:
        raise HTTPException(413, str(exc))
    except StorageIOError as exc:
        logger.error("Erreur upload fond: %s", exc)
        raise HTTPException(500, "Erreur upload fond")
    finally:
        if fond is not None:
            fond.file.close()
    return {"message": "Fond uploadé", "path": ref.url_path}
