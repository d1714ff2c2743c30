from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.core.dependencies import get_current_db_user, get_product_service
from app.database.models import User
from app.schemas.label import LabelResponse
from app.schemas.product import ProductResponse, ProductUpdate
from app.services.product_service import ProductService
from app.utils.responses import create_api_response

router = APIRouter()


@router.get(
    "",
    summary="List products",
    description="All products ordered by product name",
    operation_id="list_products",
)
async def list_products(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    product_service: Annotated[ProductService, Depends(get_product_service)],
):
    products = await product_service.list_products()
    return create_api_response(
        data=[ProductResponse.model_validate(product) for product in products],
        message="Products retrieved successfully",
        request=request,
    )


@router.get(
    "/{sku}",
    summary="Get product details",
    description="Product with its documents, newest first, and any digital signatures",
    operation_id="get_product",
)
async def get_product(
    request: Request,
    sku: str,
    current_user: Annotated[User, Depends(get_current_db_user)],
    product_service: Annotated[ProductService, Depends(get_product_service)],
):
    product = await product_service.get_product_detail(sku)
    return create_api_response(
        data=product,
        message="Product details retrieved successfully",
        request=request,
    )


@router.put(
    "/{sku}",
    summary="Update a product",
    operation_id="update_product",
)
async def update_product(
    request: Request,
    sku: str,
    payload: ProductUpdate,
    current_user: Annotated[User, Depends(get_current_db_user)],
    product_service: Annotated[ProductService, Depends(get_product_service)],
):
    product = await product_service.update_product(sku, payload)
    return create_api_response(
        data=ProductResponse.model_validate(product),
        message="Product updated successfully",
        request=request,
    )


@router.get(
    "/{sku}/labels",
    summary="List product labels",
    operation_id="list_product_labels",
)
async def list_product_labels(
    request: Request,
    sku: str,
    current_user: Annotated[User, Depends(get_current_db_user)],
    product_service: Annotated[ProductService, Depends(get_product_service)],
):
    labels = await product_service.list_labels(sku)
    return create_api_response(
        data=[LabelResponse.model_validate(label) for label in labels],
        message="Labels retrieved successfully",
        request=request,
    )
