# product_api/routers/product.py
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Response, status

from product_api.models.product import Product
from product_api.repositories.base import NotFound, ProductRepository
from product_api.schemas.product import HealthStatus, ProductCreate, ProductRead, ProductUpdate

logger = logging.getLogger(__name__)

# Fields copied from an update payload onto the stored record; everything else is kept.
UPDATABLE_FIELDS = ("name", "description", "price", "quantity")


def _not_found() -> Response:
    return Response(status_code=status.HTTP_404_NOT_FOUND)


class ProductHandler:
    """
    Maps product requests onto repository calls and repository results onto
    HTTP responses. Holds nothing but the repository and the service name.
    """

    def __init__(self, repository: ProductRepository, service_name: str) -> None:
        self.repository = repository
        self.service_name = service_name

    def list_products(self) -> List[Product]:
        return list(self.repository.find_all())

    def get_product(self, product_id: int):
        found = self.repository.find_by_id(product_id)
        if isinstance(found, NotFound):
            logger.debug("Product %s not found", product_id)
            return _not_found()
        return found.value

    def create_product(self, payload: ProductCreate):
        obj = self.repository.save(Product(**payload.model_dump()))
        logger.info("Created product id=%s name=%r", obj.id, obj.name)
        return obj

    def update_product(self, product_id: int, payload: ProductUpdate):
        found = self.repository.find_by_id(product_id)
        if isinstance(found, NotFound):
            logger.debug("Product %s not found for update", product_id)
            return _not_found()

        obj = found.value
        data = payload.model_dump()
        for field in UPDATABLE_FIELDS:
            setattr(obj, field, data[field])
        obj = self.repository.save(obj)
        logger.info("Updated product id=%s", obj.id)
        return obj

    def delete_product(self, product_id: int) -> Response:
        if not self.repository.exists_by_id(product_id):
            logger.debug("Product %s not found for delete", product_id)
            return _not_found()
        self.repository.delete_by_id(product_id)
        logger.info("Deleted product id=%s", product_id)
        return Response(status_code=status.HTTP_200_OK)

    def health(self) -> HealthStatus:
        return HealthStatus(status="UP", service=self.service_name)


def build_router(handler: ProductHandler, prefix: str = "/api/products") -> APIRouter:
    """Register the product routes on a fresh router, bound to `handler`."""
    router = APIRouter(prefix=prefix, tags=["products"])

    # /health goes first so it is not captured by /{product_id}
    router.add_api_route(
        "/health",
        handler.health,
        methods=["GET"],
        response_model=HealthStatus,
        tags=["health"],
        summary="Service health",
    )
    router.add_api_route(
        "",
        handler.list_products,
        methods=["GET"],
        response_model=List[ProductRead],
        summary="List all products",
    )
    router.add_api_route(
        "/{product_id}",
        handler.get_product,
        methods=["GET"],
        response_model=ProductRead,
        responses={404: {"description": "Not found (empty body)"}},
        summary="Get a product by id",
    )
    router.add_api_route(
        "",
        handler.create_product,
        methods=["POST"],
        response_model=ProductRead,
        status_code=status.HTTP_201_CREATED,
        responses={400: {"description": "Validation failure"}},
        summary="Create a product",
    )
    router.add_api_route(
        "/{product_id}",
        handler.update_product,
        methods=["PUT"],
        response_model=ProductRead,
        responses={400: {"description": "Validation failure"}, 404: {"description": "Not found (empty body)"}},
        summary="Update a product",
    )
    router.add_api_route(
        "/{product_id}",
        handler.delete_product,
        methods=["DELETE"],
        response_class=Response,
        responses={404: {"description": "Not found (empty body)"}},
        summary="Delete a product",
    )
    return router
