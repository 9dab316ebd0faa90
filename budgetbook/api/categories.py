"""FastAPI endpoints for the category catalog of a workspace."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response

from budgetbook.api.dependencies import get_category_service, get_transaction_service, require_action
from budgetbook.core.models import (
    Category,
    CategoryInput,
    CategoryOrder,
    CategoryUpdate,
    Transaction,
    TransactionType,
    WorkspaceContext,
)
from budgetbook.core.permissions import Action
from budgetbook.services.category_service import CategoryService
from budgetbook.services.transaction_service import TransactionService

router = APIRouter(prefix="/workspaces/{workspace_id}/categories", tags=["categories"])


@router.get("", response_model=list[Category], summary="List categories")
def list_categories(
    type: TransactionType | None = None,  # noqa: A002
    context: WorkspaceContext = Depends(require_action(Action.VIEW)),
    categories: CategoryService = Depends(get_category_service),
) -> list[Category]:
    """Return the catalog in display order, optionally restricted to one type."""
    if type is not None:
        return categories.list_categories_by_type(context.workspace.id, type)
    return categories.list_categories(context.workspace.id)


@router.post("", status_code=201, summary="Create a category")
def create_category(
    payload: CategoryInput,
    context: WorkspaceContext = Depends(require_action(Action.CREATE)),
    categories: CategoryService = Depends(get_category_service),
) -> dict:
    """Create a category and return its id."""
    return {"id": categories.create_category(context.workspace.id, payload)}


@router.put(
    "/order",
    status_code=204,
    summary="Reorder categories",
    description="Write the display positions of several categories in one batch.",
)
def reorder_categories(
    payload: list[CategoryOrder],
    context: WorkspaceContext = Depends(require_action(Action.EDIT)),
    categories: CategoryService = Depends(get_category_service),
) -> Response:
    """Apply new display positions."""
    categories.reorder_categories(context.workspace.id, payload)
    return Response(status_code=204)


@router.get("/{category_id}", response_model=Category, summary="Get a category")
def get_category(
    category_id: str,
    context: WorkspaceContext = Depends(require_action(Action.VIEW)),
    categories: CategoryService = Depends(get_category_service),
) -> Category:
    """Return one category."""
    category = categories.get_category(context.workspace.id, category_id)
    if category is None:
        raise HTTPException(404, "Category not found")
    return category


@router.patch("/{category_id}", status_code=204, summary="Update a category")
def update_category(
    category_id: str,
    payload: CategoryUpdate,
    context: WorkspaceContext = Depends(require_action(Action.EDIT)),
    categories: CategoryService = Depends(get_category_service),
) -> Response:
    """Apply a partial update to a category."""
    if not categories.update_category(context.workspace.id, category_id, payload):
        raise HTTPException(404, "Category not found")
    return Response(status_code=204)


@router.delete(
    "/{category_id}",
    status_code=204,
    summary="Delete a category",
    description="Delete a category. Transactions that reference it are kept as they are.",
)
def delete_category(
    category_id: str,
    context: WorkspaceContext = Depends(require_action(Action.DELETE)),
    categories: CategoryService = Depends(get_category_service),
) -> Response:
    """Delete a category without touching its transactions."""
    if not categories.delete_category(context.workspace.id, category_id):
        raise HTTPException(404, "Category not found")
    return Response(status_code=204)


@router.get("/{category_id}/transactions", response_model=list[Transaction], summary="Transactions of a category")
def category_transactions(
    category_id: str,
    start_date: date | None = None,
    end_date: date | None = None,
    context: WorkspaceContext = Depends(require_action(Action.VIEW)),
    transactions: TransactionService = Depends(get_transaction_service),
) -> list[Transaction]:
    """Return the transactions filed under a category, newest first."""
    return transactions.list_by_category(context.workspace.id, category_id, start_date, end_date)
