from typing import Dict, Iterable, List, Optional, Tuple, Union

from stylesnap.schemas.catalog import Audience, AudienceFilter, Category, Item

_PORTRAIT = "https://placehold.co/400x600.png"
_SQUARE = "https://placehold.co/400x400.png"


def _item(id, name, gender, type, image_url, description, price, hint) -> Item:
    return Item(
        id=id,
        name=name,
        gender=gender,
        type=type,
        image_url=image_url,
        description=description,
        price=price,
        hint=hint,
    )


ITEMS: Tuple[Item, ...] = (
    # men / clothing
    _item("m-cloth-1", "Classic Denim Jacket", Audience.MEN, Category.CLOTHING, _PORTRAIT,
          "A timeless denim jacket for a rugged look.", "$79.99", "denim jacket"),
    _item("m-cloth-2", "Tailored Chinos", Audience.MEN, Category.CLOTHING, _PORTRAIT,
          "Versatile chinos for smart-casual occasions.", "$59.99", "mens pants"),
    _item("m-cloth-3", "Graphic Print T-Shirt", Audience.MEN, Category.CLOTHING, _PORTRAIT,
          "Comfortable cotton t-shirt with a cool graphic.", "$29.99", "mens t-shirt"),
    # men / jewelry
    _item("m-jewel-1", "Silver Link Bracelet", Audience.MEN, Category.JEWELRY, _SQUARE,
          "Sleek silver bracelet to complement any outfit.", "$120.00", "mens bracelet"),
    _item("m-jewel-2", "Minimalist Steel Ring", Audience.MEN, Category.JEWELRY, _SQUARE,
          "A subtle yet stylish steel ring.", "$45.00", "mens ring"),
    # women / clothing
    _item("w-cloth-1", "Floral Maxi Dress", Audience.WOMEN, Category.CLOTHING, _PORTRAIT,
          "Elegant floral maxi dress for sunny days.", "$89.99", "womens dress"),
    _item("w-cloth-2", "High-Waisted Jeans", Audience.WOMEN, Category.CLOTHING, _PORTRAIT,
          "Flattering high-waisted jeans for a modern silhouette.", "$69.99", "womens jeans"),
    _item("w-cloth-3", "Silk Blouse", Audience.WOMEN, Category.CLOTHING, _PORTRAIT,
          "Luxurious silk blouse for a touch of sophistication.", "$99.99", "womens blouse"),
    # women / jewelry
    _item("w-jewel-1", "Pearl Drop Earrings", Audience.WOMEN, Category.JEWELRY, _SQUARE,
          "Classic pearl drop earrings for timeless elegance.", "$75.00", "earrings"),
    _item("w-jewel-2", "Gold Pendant Necklace", Audience.WOMEN, Category.JEWELRY, _SQUARE,
          "Delicate gold pendant necklace, perfect for layering.", "$150.00", "necklace"),
    # unisex
    _item("u-cloth-1", "Basic Hoodie", Audience.UNISEX, Category.CLOTHING, _PORTRAIT,
          "Comfortable and versatile basic hoodie.", "$49.99", "hoodie"),
    _item("u-jewel-1", "Leather Cord Necklace", Audience.UNISEX, Category.JEWELRY, _SQUARE,
          "Simple leather cord necklace for a casual style.", "$30.00", "pendant necklace"),
)

_BY_ID: Dict[str, Item] = {item.id: item for item in ITEMS}
if len(_BY_ID) != len(ITEMS):
    raise RuntimeError("catalog item ids must be unique")


def list_items(audience: Optional[Union[AudienceFilter, str]] = None) -> List[Item]:
    """Items for an audience plus the unisex ones, in catalog order.

    ``None`` and ``"all"`` return the whole catalog.
    """
    if audience is None:
        return list(ITEMS)
    audience = AudienceFilter(audience)
    if audience is AudienceFilter.ALL:
        return list(ITEMS)
    return [i for i in ITEMS if i.gender.value == audience.value or i.gender is Audience.UNISEX]


def find_item(item_id: str) -> Optional[Item]:
    return _BY_ID.get(item_id)


def items_by_category(items: Iterable[Item]) -> Dict[Category, List[Item]]:
    out: Dict[Category, List[Item]] = {c: [] for c in Category}
    for item in items:
        out[item.type].append(item)
    return out
