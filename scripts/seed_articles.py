#!/usr/bin/env python3
"""
Add an article straight into the JSON catalog (same lock as the server).

Usage:
  python scripts/seed_articles.py --name "Tee" --price 10 --category Shirts [--description "..."]
"""
from __future__ import annotations

import argparse
import sys

from pydantic import ValidationError

from vitrine.core.config import get_settings
from vitrine.repositories.record_store import RecordStore
from vitrine.services.article_service import ArticleIn, ArticleService, generate_description


def main() -> None:
    ap = argparse.ArgumentParser(description="Add an article to articles.json")
    ap.add_argument("--name", required=True)
    ap.add_argument("--price", required=True, type=float)
    ap.add_argument("--category", required=True)
    ap.add_argument("--description", help="Default: generated from the name")
    args = ap.parse_args()

    try:
        payload = ArticleIn(
            name=args.name,
            price=args.price,
            category=args.category,
            description=args.description or generate_description(args.name),
        )
    except ValidationError as exc:
        raise SystemExit(f"Article invalide: {exc}")

    svc = ArticleService(RecordStore(get_settings().articles_file))
    article = svc.create_article(payload)
    print(f"OK: article {article['id']} ajouté")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Erreur: {exc}\n")
        raise SystemExit(1)
