"""Product API router with CRUD operations."""

from typing import Annotated

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Path,
    Query,
    Request,
    Response,
    status,
)
from loguru import logger
from sqlmodel import Session

from src.catalog.api.http.deps import get_db_session, get_product_repository
from src.catalog.entities.product import (
    PRODUCT_ID_MAX,
    Product,
    ProductCreate,
    ProductRepository,
    ProductUpdate,
)

router = APIRouter(prefix="/api/products", tags=["products"])

PRODUCT_NOT_FOUND = "Product not found"

ProductId = Annotated[
    int, Path(ge=1, le=PRODUCT_ID_MAX, description="Product identifier")
]


@router.get("", response_model=list[Product])
def list_products(
    search: str | None = Query(
        default=None,
        max_length=200,
        description="Case-insensitive match against name or description",
    ),
    repository: ProductRepository = Depends(get_product_repository),
) -> list[Product]:
    """List all products."""
    return repository.list_all(search=search)


@router.get("/{product_id}", response_model=Product)
def get_product(
    product_id: ProductId,
    repository: ProductRepository = Depends(get_product_repository),
) -> Product:
    """Get a product by ID."""
    product = repository.get(product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)
    return product


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
def create_product(
    product: ProductCreate,
    request: Request,
    response: Response,
    repository: ProductRepository = Depends(get_product_repository),
    session: Session = Depends(get_db_session),
) -> Product:
    """Create a new product."""
    created_product = repository.create(product)
    session.commit()
    logger.info("Created product {}", created_product.id)

    response.headers["Location"] = str(
        request.url_for("get_product", product_id=created_product.id)
    )
    return created_product


@router.put("/{product_id}", response_model=Product)
def update_product(
    product_id: ProductId,
    product_update: ProductUpdate,
    repository: ProductRepository = Depends(get_product_repository),
    session: Session = Depends(get_db_session),
) -> Product:
    """Replace a product."""
    if product_update.id is not None and product_update.id != product_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Product id in the body does not match the URL",
        )

    updated_product = repository.update(product_id, product_update)
    if updated_product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)
    session.commit()
    logger.info("Updated product {}", product_id)
    return updated_product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: ProductId,
    repository: ProductRepository = Depends(get_product_repository),
    session: Session = Depends(get_db_session),
) -> Response:
    """Delete a product."""
    if not repository.delete(product_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)
    session.commit()
    logger.info("Deleted product {}", product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
