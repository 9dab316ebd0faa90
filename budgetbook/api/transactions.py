"""FastAPI endpoints for the transactions of a workspace.

Listing fetches up to ``limit`` transactions of the requested date range from the store, newest first, and then
narrows them in memory with the filter engine.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel

from budgetbook.api.dependencies import (
    get_category_service,
    get_transaction_service,
    get_workspace_service,
    require_action,
)
from budgetbook.core.calculations import filter_transactions
from budgetbook.core.models import (
    Transaction,
    TransactionFilters,
    TransactionInput,
    TransactionQuery,
    TransactionUpdate,
    WorkspaceContext,
)
from budgetbook.core.permissions import Action
from budgetbook.core.settings import Settings, get_settings
from budgetbook.core.utils import get_logger
from budgetbook.services.category_service import CategoryService
from budgetbook.services.export_service import export_transactions_csv
from budgetbook.services.transaction_service import TransactionService
from budgetbook.services.workspace_service import WorkspaceService

router = APIRouter(prefix="/workspaces/{workspace_id}/transactions", tags=["transactions"])
logger = get_logger("budgetbook.api.transactions")


class TransactionIds(BaseModel):
    """Identifiers of transactions to delete together."""

    ids: list[str]


def _filtered_transactions(
    workspace_id: str,
    filters: TransactionFilters,
    limit: int | None,
    transactions: TransactionService,
    categories: CategoryService,
) -> list[Transaction]:
    fetched = transactions.list_transactions(workspace_id, filters.start_date, filters.end_date, limit)
    catalog = categories.list_categories(workspace_id)
    return filter_transactions(fetched, filters, catalog)


@router.get(
    "",
    response_model=list[Transaction],
    summary="List transactions",
    description=(
        "List transactions newest first. Every filter option is optional and the present ones are combined with AND:\n"
        "`type`, `category_id`, `category_group`, `start_date`, `end_date` (inclusive), `min_amount`, `max_amount` "
        "(inclusive), `search_text` (description or notes, case-insensitive) and repeated `tags` (any match). "
        "`limit` caps how many of the newest transactions in the date range are fetched before filtering."
    ),
)
def list_transactions(
    query: Annotated[TransactionQuery, Query()],
    context: WorkspaceContext = Depends(require_action(Action.VIEW)),
    transactions: TransactionService = Depends(get_transaction_service),
    categories: CategoryService = Depends(get_category_service),
    settings: Settings = Depends(get_settings),
) -> list[Transaction]:
    """Return the filtered transactions of the workspace."""
    return _filtered_transactions(
        context.workspace.id, query, query.limit or settings.transactions_limit, transactions, categories
    )


@router.post("", status_code=201, summary="Record a transaction")
def create_transaction(
    payload: TransactionInput,
    context: WorkspaceContext = Depends(require_action(Action.CREATE)),
    transactions: TransactionService = Depends(get_transaction_service),
) -> dict:
    """Record a transaction and return its id."""
    return {"id": transactions.create_transaction(context.workspace.id, context.user.uid, payload)}


@router.get("/recent", response_model=list[Transaction], summary="Most recently recorded transactions")
def recent_transactions(
    limit: Annotated[int | None, Query(ge=1)] = None,
    context: WorkspaceContext = Depends(require_action(Action.VIEW)),
    transactions: TransactionService = Depends(get_transaction_service),
    settings: Settings = Depends(get_settings),
) -> list[Transaction]:
    """Return the latest recorded transactions."""
    return transactions.recent_transactions(context.workspace.id, limit or settings.recent_transactions_limit)


@router.get("/search", response_model=list[Transaction], summary="Search all transactions")
def search_transactions(
    q: Annotated[str, Query(min_length=1)],
    context: WorkspaceContext = Depends(require_action(Action.VIEW)),
    transactions: TransactionService = Depends(get_transaction_service),
) -> list[Transaction]:
    """Search every transaction of the workspace by description or notes, ignoring case."""
    return transactions.search_transactions(context.workspace.id, q)


@router.get("/count", summary="Count transactions")
def count_transactions(
    context: WorkspaceContext = Depends(require_action(Action.VIEW)),
    transactions: TransactionService = Depends(get_transaction_service),
) -> dict:
    """Return the number of transactions in the workspace."""
    return {"count": transactions.count_transactions(context.workspace.id)}


@router.get(
    "/export",
    summary="Export transactions as CSV",
    description="Download the filtered transactions as CSV. Requires a plan that allows exports.",
    responses={
        200: {"description": "CSV file download.", "content": {"text/csv": {}}},
        403: {"description": "Export not available on this plan."},
    },
)
def export_transactions(
    filters: Annotated[TransactionFilters, Query()],
    context: WorkspaceContext = Depends(require_action(Action.VIEW)),
    transactions: TransactionService = Depends(get_transaction_service),
    categories: CategoryService = Depends(get_category_service),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> Response:
    """Render the filtered transactions of the workspace as a CSV attachment."""
    if not workspaces.plan_limits(context.workspace.owner_id).can_export:
        raise HTTPException(403, "Export is not available on this plan")
    workspace_id = context.workspace.id
    rows = _filtered_transactions(workspace_id, filters, None, transactions, categories)
    logger.info(f"Exporting {len(rows)} transactions from workspace {workspace_id}")
    return Response(
        content=export_transactions_csv(rows, categories.list_categories(workspace_id)),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=transactions_{workspace_id}.csv"},
    )


@router.post("/delete", summary="Delete several transactions")
def delete_transactions(
    payload: TransactionIds,
    context: WorkspaceContext = Depends(require_action(Action.DELETE)),
    transactions: TransactionService = Depends(get_transaction_service),
) -> dict:
    """Delete the given transactions in one batch and report how many were removed."""
    return {"deleted": transactions.delete_transactions(context.workspace.id, payload.ids)}


@router.get("/{transaction_id}", response_model=Transaction, summary="Get a transaction")
def get_transaction(
    transaction_id: str,
    context: WorkspaceContext = Depends(require_action(Action.VIEW)),
    transactions: TransactionService = Depends(get_transaction_service),
) -> Transaction:
    """Return one transaction."""
    transaction = transactions.get_transaction(context.workspace.id, transaction_id)
    if transaction is None:
        raise HTTPException(404, "Transaction not found")
    return transaction


@router.patch("/{transaction_id}", status_code=204, summary="Update a transaction")
def update_transaction(
    transaction_id: str,
    payload: TransactionUpdate,
    context: WorkspaceContext = Depends(require_action(Action.EDIT)),
    transactions: TransactionService = Depends(get_transaction_service),
) -> Response:
    """Apply a partial update to a transaction."""
    if not transactions.update_transaction(context.workspace.id, transaction_id, payload):
        raise HTTPException(404, "Transaction not found")
    return Response(status_code=204)


@router.delete("/{transaction_id}", status_code=204, summary="Delete a transaction")
def delete_transaction(
    transaction_id: str,
    context: WorkspaceContext = Depends(require_action(Action.DELETE)),
    transactions: TransactionService = Depends(get_transaction_service),
) -> Response:
    """Delete one transaction."""
    if not transactions.delete_transaction(context.workspace.id, transaction_id):
        raise HTTPException(404, "Transaction not found")
    return Response(status_code=204)
