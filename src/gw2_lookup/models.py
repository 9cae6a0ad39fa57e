"""Pydantic models for composite by-name lookup results."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Ingredient(BaseModel):
    item_id: int = Field(gt=0)
    count: int = Field(ge=1)
    name: str | None = None


class EnrichedRecipe(BaseModel):
    id: int = Field(gt=0)
    type: str
    output_item_id: int = Field(gt=0)
    output_item_count: int = Field(default=1, ge=1)
    output_item_name: str | None = None
    min_rating: int = Field(default=0, ge=0)
    disciplines: list[str] = Field(default_factory=list)
    ingredients: list[Ingredient] = Field(default_factory=list)
    flags: list[str] = Field(default_factory=list)


class ItemRecipes(BaseModel):
    item_name: str
    item_id: int | None = Field(default=None, ge=0)
    wiki_url: str | None = None
    recipes: list[EnrichedRecipe] = Field(default_factory=list)
