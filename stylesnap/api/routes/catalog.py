from typing import List, Optional

from fastapi import APIRouter, HTTPException

from stylesnap.core.config import get_settings
from stylesnap.schemas.catalog import (
    AudienceFilter,
    AudienceOption,
    Category,
    CollectionPage,
    HomePage,
    Item,
    ItemCard,
)
from stylesnap.schemas.tryon import DEFAULT_MODEL, TryOnPage
from stylesnap.services.catalog import find_item, items_by_category, list_items
from stylesnap.services.dispatch import MODEL_OPTIONS

router = APIRouter()

AUDIENCE_OPTIONS = [
    AudienceOption(id=AudienceFilter.MEN, label="For Men",
                   description="Explore styles curated for men.", url="/men"),
    AudienceOption(id=AudienceFilter.WOMEN, label="For Women",
                   description="Discover fashion trends for women.", url="/women"),
    AudienceOption(id=AudienceFilter.ALL, label="Discover All",
                   description="Browse our entire collection.", url="/all"),
]


def _audience(value: str) -> AudienceFilter:
    try:
        return AudienceFilter(value)
    except ValueError:
        raise HTTPException(404, f"Unknown collection: {value}")


def _item_or_404(item_id: str) -> Item:
    item = find_item(item_id)
    if item is None:
        raise HTTPException(404, "Product not found.")
    return item


def collection_title(audience: AudienceFilter) -> str:
    if audience is AudienceFilter.ALL:
        return "Our Collection"
    return f"{audience.value.capitalize()}'s Collection"


@router.get("/items", response_model=List[Item])
async def get_items(audience: Optional[AudienceFilter] = None):
    return list_items(audience)


@router.get("/items/{item_id}", response_model=Item)
async def get_item(item_id: str):
    return _item_or_404(item_id)


@router.get("/pages/home", response_model=HomePage)
async def home_page():
    return HomePage(
        title="Welcome to StyleSnap",
        tagline="Discover your next look with AI-powered virtual try-on. Select a category to begin.",
        options=AUDIENCE_OPTIONS,
    )


@router.get("/pages/{audience}", response_model=CollectionPage)
async def collection_page(audience: str):
    aud = _audience(audience)
    groups = items_by_category(list_items(aud))

    def cards(category: Category) -> List[ItemCard]:
        return [ItemCard(item=i, try_on_url=f"/{aud.value}/{i.id}") for i in groups[category]]

    who = "everyone" if aud is AudienceFilter.ALL else aud.value
    return CollectionPage(
        audience=aud,
        title=collection_title(aud),
        description=f"Browse our collection of clothing and jewelry for {who}.",
        clothing=cards(Category.CLOTHING),
        jewelry=cards(Category.JEWELRY),
    )


@router.get("/pages/{audience}/{item_id}", response_model=TryOnPage)
async def try_on_page(audience: str, item_id: str):
    aud = _audience(audience)
    item = _item_or_404(item_id)
    return TryOnPage(
        audience=aud,
        item=item,
        title=f"Try On {item.name}",
        models=MODEL_OPTIONS,
        default_model=DEFAULT_MODEL,
        max_upload_mb=get_settings().max_upload_mb,
    )
