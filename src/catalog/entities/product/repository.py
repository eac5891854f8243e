"""Product repository."""

from sqlalchemy import or_
from sqlmodel import Session, col, select

from .entity import Product, ProductCreate, ProductUpdate
from .table import ProductTable


class ProductRepository:
    """Data-access layer for products.

    The repository flushes so generated ids are available, but never commits;
    the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, data: ProductCreate) -> Product:
        row = ProductTable(**data.model_dump(exclude={"id"}))
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Product.model_validate(row, from_attributes=True)

    def get(self, product_id: int) -> Product | None:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None
        return Product.model_validate(row, from_attributes=True)

    def list_all(self, search: str | None = None) -> list[Product]:
        """List products ordered by id, optionally filtered by a search term.

        The term matches case-insensitively anywhere in the name or the
        description. ``%`` and ``_`` in the term match literally.
        """
        statement = select(ProductTable)
        if search and search.strip():
            term = search.strip()
            statement = statement.where(
                or_(
                    col(ProductTable.name).icontains(term, autoescape=True),
                    col(ProductTable.description).icontains(term, autoescape=True),
                )
            )
        rows = self._session.exec(statement.order_by(col(ProductTable.id))).all()
        return [Product.model_validate(row, from_attributes=True) for row in rows]

    def update(self, product_id: int, data: ProductUpdate) -> Product | None:
        """Replace the writable fields of a product; ``None`` if it does not exist."""
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None

        for field_name, value in data.model_dump(exclude={"id"}).items():
            setattr(row, field_name, value)

        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Product.model_validate(row, from_attributes=True)

    def delete(self, product_id: int) -> bool:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True
