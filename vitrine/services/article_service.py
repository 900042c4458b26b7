"""
Article use cases: validate the submitted attribute bag, then hand it to the
record store.
"""

from __future__ import annotations

import math
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from vitrine.repositories.record_store import Record, RecordStore


class ArticleIn(BaseModel):
    """Body accepted by POST /articles and PUT /articles/{id}."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, allow_inf_nan=False)

    name: str = Field(min_length=1, validation_alias=AliasChoices("name", "nom"))
    price: float = Field(gt=0, validation_alias=AliasChoices("price", "prix"))
    description: Optional[str] = None
    category: str = Field(min_length=1, validation_alias=AliasChoices("category", "categorie"))

    @field_validator("name", "category")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("ne doit pas être vide")
        return value

    @field_validator("price", mode="before")
    @classmethod
    def _price_not_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("prix invalide")
        return value

    @model_validator(mode="after")
    def _scalar_extras(self) -> "ArticleIn":
        for key, value in (self.model_extra or {}).items():
            if key == "id":
                continue
            if not isinstance(value, (str, int, float, bool)) and value is not None:
                raise ValueError(f"valeur non scalaire pour {key!r}")
            if isinstance(value, float) and not math.isfinite(value):
                raise ValueError(f"nombre invalide pour {key!r}")
        return self

    def to_attrs(self) -> Record:
        attrs: Record = {
            "name": self.name,
            "price": int(self.price) if float(self.price).is_integer() else self.price,
            "category": self.category,
        }
        if self.description is not None:
            attrs["description"] = self.description
        for key, value in (self.model_extra or {}).items():
            if key in ("id", "nom", "prix", "categorie"):
                continue
            attrs[key] = value
        return attrs


def generate_description(nom: str) -> str:
    return (
        f'Le produit "{nom}" allie style, originalité et confort. '
        "Un indispensable pour affirmer ton look."
    )


class ArticleService:
    """Thin orchestration between validated bodies and the record store."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def list_articles(self) -> list[Record]:
        return self.store.list()

    def create_article(self, payload: ArticleIn) -> Record:
        return self.store.create(payload.to_attrs())

    def update_article(self, article_id: int, payload: ArticleIn) -> Record:
        return self.store.update(article_id, payload.to_attrs())

    def delete_article(self, article_id: int) -> None:
        self.store.delete(article_id)
