"""Entity: Product."""

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

NAME_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
IMAGE_URL_MAX_LENGTH = 500
PRICE_MAX_DIGITS = 10
PRICE_DECIMAL_PLACES = 2
# Primary key is a 32-bit INTEGER column
PRODUCT_ID_MAX = 2_147_483_647

# Stored as NUMERIC(10,2); clients expect a plain JSON number.
Price = Annotated[
    Decimal,
    Field(ge=0, max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_DECIMAL_PLACES),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class ProductFields(BaseModel):
    """Writable product attributes shared by the request and response models.

    Field names are camelCase on the wire (``imageUrl``); snake_case is
    accepted on input as well.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )

    name: str = Field(
        min_length=1, max_length=NAME_MAX_LENGTH, description="Display name"
    )
    description: str = Field(
        min_length=1, max_length=DESCRIPTION_MAX_LENGTH, description="Product description"
    )
    price: Price = Field(description="Unit price")
    image_url: str | None = Field(
        default=None, max_length=IMAGE_URL_MAX_LENGTH, description="Product image URL"
    )

    @field_validator("image_url")
    @classmethod
    def blank_image_url_is_none(cls, value: str | None) -> str | None:
        return value or None


class ProductCreate(ProductFields):
    """Payload for creating a product."""


class ProductUpdate(ProductFields):
    """Payload for replacing a product.

    Clients may echo the product id in the body; it must match the path.
    """

    id: int | None = Field(default=None, description="Must match the path id if given")


class Product(ProductFields):
    """Product entity as stored in the catalog."""

    id: int = Field(description="Database-generated identifier")

    def __eq__(self, other: Any) -> bool:
        """Compare products by id and every writable attribute."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.description == other.description
            and self.price == other.price
            and self.image_url == other.image_url
        )

    def __hash__(self) -> int:
        return hash((
            self.id,
            self.name,
            self.description,
            self.price,
            self.image_url,
        ))
