"""FastAPI endpoints for monthly reports."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from budgetbook.api.dependencies import get_dashboard_service, require_action
from budgetbook.core.calculations import current_month_year
from budgetbook.core.models import MonthlyDashboard, WorkspaceContext
from budgetbook.core.permissions import Action
from budgetbook.services.dashboard_service import DashboardService

router = APIRouter(prefix="/workspaces/{workspace_id}", tags=["reports"])


@router.get(
    "/summary",
    response_model=MonthlyDashboard,
    response_model_exclude_none=True,
    summary="Monthly summary and category breakdowns",
    description=(
        "Totals, balance, savings rate and the fixed/variable expense split of one calendar month, with the income "
        "and expense category breakdowns sorted by total. Defaults to the current month.\n\n"
        "Breakdown percentages are shares of all transactions of the type, including transactions whose category "
        "no longer exists, so the listed category totals can add up to less than the type total."
    ),
    responses={
        200: {"description": "Monthly dashboard."},
        503: {"description": "The store could not be read. No partial or zeroed summary is returned."},
    },
)
def monthly_summary(
    year: Annotated[int | None, Query(ge=1970, le=9999)] = None,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
    context: WorkspaceContext = Depends(require_action(Action.VIEW)),
    dashboard: DashboardService = Depends(get_dashboard_service),
) -> MonthlyDashboard:
    """Return the monthly dashboard of the workspace."""
    current_year, current_month = current_month_year()
    return dashboard.monthly_dashboard(context.workspace.id, year or current_year, month or current_month)
