"""Product database table model."""

from decimal import Decimal

from sqlmodel import Field, SQLModel

from .entity import (
    DESCRIPTION_MAX_LENGTH,
    IMAGE_URL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PRICE_DECIMAL_PLACES,
    PRICE_MAX_DIGITS,
)


class ProductTable(SQLModel, table=True):
    """Row in the ``products`` table.

    Columns mirror the limits enforced by the API models in entity.py.
    """

    __tablename__ = "products"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=NAME_MAX_LENGTH, nullable=False)
    description: str = Field(max_length=DESCRIPTION_MAX_LENGTH, nullable=False)
    price: Decimal = Field(
        max_digits=PRICE_MAX_DIGITS,
        decimal_places=PRICE_DECIMAL_PLACES,
        nullable=False,
    )
    image_url: str | None = Field(default=None, max_length=IMAGE_URL_MAX_LENGTH)
