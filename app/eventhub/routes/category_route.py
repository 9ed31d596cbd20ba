import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eventhub.controller.category_controller import (
    create_category,
    delete_category,
    get_all_categories,
    get_category_by_id,
    update_category,
)
from eventhub.database import get_db
from eventhub.response_model import result_to_response
from eventhub.routes.dependencies import CurrentUser, get_pagination, require_admin
from eventhub.schema.category_schema import CreateUpdateCategoryRequest
from eventhub.schema.pagination_schema import PaginationParameters

router = APIRouter()


# ----------------------- GET ALL Categories -----------------------
@router.get("", response_description="Retrieve all categories")
async def get_categories(
    pagination: PaginationParameters = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    result = await get_all_categories(db, pagination)
    return result_to_response(result, "Categories retrieved successfully")


@router.get("/{category_id}", response_description="Retrieve a category")
async def get_category(category_id: uuid.UUID, db: Session = Depends(get_db)):
    result = await get_category_by_id(db, category_id)
    return result_to_response(result, "Category retrieved successfully")


# ----------------------- ADD Category -----------------------
@router.post("", response_description="Create a new category")
async def add_category(
    request: CreateUpdateCategoryRequest,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    result = await create_category(db, request)
    return result_to_response(result, "Category created successfully", status.HTTP_201_CREATED)


# ------------------ Update Category ------------------
@router.put("/{category_id}", response_description="Update a category")
async def edit_category(
    category_id: uuid.UUID,
    request: CreateUpdateCategoryRequest,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    result = await update_category(db, category_id, request)
    return result_to_response(result, "Category updated successfully")


# ------------------ Delete Category ------------------
@router.delete("/{category_id}", response_description="Delete a category")
async def remove_category(
    category_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    result = await delete_category(db, category_id)
    return result_to_response(result, "Category deleted successfully")


__all__ = ["router"]
