from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from vitrine.dependencies import get_article_service, require_session
from vitrine.repositories.json_storage import StorageCorrupt, StorageIOError
from vitrine.repositories.record_store import RecordNotFound
from vitrine.services.article_service import ArticleIn, ArticleService, generate_description

logger = logging.getLogger(__name__)

router = APIRouter(tags=["articles"], dependencies=[Depends(require_session)])


def _storage_failure(exc: Exception, action: str) -> HTTPException:
    logger.error("Erreur %s article: %s", action, exc)
    if isinstance(exc, StorageCorrupt):
        return HTTPException(500, "Erreur lecture articles")
    return HTTPException(500, f"Erreur {action} article")


@router.get("/articles.json")
def list_articles(svc: ArticleService = Depends(get_article_service)):
    return svc.list_articles()


@router.post("/articles", status_code=201)
def create_article(payload: ArticleIn, svc: ArticleService = Depends(get_article_service)):
    try:
        article = svc.create_article(payload)
    except (StorageCorrupt, StorageIOError) as exc:
        raise _storage_failure(exc, "sauvegarde")
    return {"message": "Article ajouté", "id": article["id"], "article": article}


@router.put("/articles/{article_id}")
def update_article(article_id: int, payload: ArticleIn, svc: ArticleService = Depends(get_article_service)):
    try:
        article = svc.update_article(article_id, payload)
    except RecordNotFound:
        raise HTTPException(404, "Article introuvable")
    except (StorageCorrupt, StorageIOError) as exc:
        raise _storage_failure(exc, "modification")
    return {"message": "Article modifié avec succès", "article": article}


@router.delete("/articles/{article_id}")
def delete_article(article_id: int, svc: ArticleService = Depends(get_article_service)):
    try:
        svc.delete_article(article_id)
    except RecordNotFound:
        raise HTTPException(404, "Article introuvable")
    except (StorageCorrupt, StorageIOError) as exc:
        raise _storage_failure(exc, "suppression")
    return {"message": "Article supprimé avec succès"}


@router.get("/generate-description")
def describe(nom: str = ""):
    nom = nom.strip()
    if not nom:
        raise HTTPException(400, "Nom du produit requis")
    return {"description": generate_description(nom)}
