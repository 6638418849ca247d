from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Audience(str, Enum):
    MEN = "men"
    WOMEN = "women"
    UNISEX = "unisex"


class AudienceFilter(str, Enum):
    MEN = "men"
    WOMEN = "women"
    ALL = "all"


class Category(str, Enum):
    CLOTHING = "clothing"
    JEWELRY = "jewelry"


class Item(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    gender: Audience
    type: Category
    image_url: str
    description: str
    price: str
    hint: str


class ItemCard(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    item: Item
    try_on_url: str


class AudienceOption(BaseModel):
    id: AudienceFilter
    label: str
    description: str
    url: str


class HomePage(BaseModel):
    title: str
    tagline: str
    options: List[AudienceOption]


class CollectionPage(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    audience: AudienceFilter
    title: str
    description: str
    clothing: List[ItemCard]
    jewelry: List[ItemCard]
