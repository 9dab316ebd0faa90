"""Pydantic models for Budgetbook.

This module defines the documents read from and written to the store (users, workspaces, members, categories,
transactions), the payloads accepted by the API, and the derived reporting values produced by the aggregation engine.
"""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from budgetbook.core.permissions import MemberRole


class TransactionType(str, Enum):
    """Direction of a transaction or category."""

    INCOME = "income"
    EXPENSE = "expense"


class CategoryGroup(str, Enum):
    """Fixed (committed) or variable (discretionary) category group."""

    FIXED = "fixed"
    VARIABLE = "variable"


class WorkspaceType(str, Enum):
    """Kind of workspace."""

    PERSONAL = "personal"
    BUSINESS = "business"


class SubscriptionPlan(str, Enum):
    """Subscription plan of a user."""

    FREE = "free"
    PRO = "pro"
    PRO_BUSINESS = "pro_business"


class PlanLimits(BaseModel):
    """Quotas and feature switches granted by a subscription plan."""

    model_config = ConfigDict(frozen=True)

    max_workspaces: int
    max_members: int
    can_use_business_workspace: bool
    has_advanced_reports: bool
    can_export: bool


PLAN_LIMITS: dict[SubscriptionPlan, PlanLimits] = {
    SubscriptionPlan.FREE: PlanLimits(
        max_workspaces=1,
        max_members=2,
        can_use_business_workspace=False,
        has_advanced_reports=False,
        can_export=False,
    ),
    SubscriptionPlan.PRO: PlanLimits(
        max_workspaces=3,
        max_members=5,
        can_use_business_workspace=False,
        has_advanced_reports=True,
        can_export=True,
    ),
    SubscriptionPlan.PRO_BUSINESS: PlanLimits(
        max_workspaces=10,
        max_members=10,
        can_use_business_workspace=True,
        has_advanced_reports=True,
        can_export=True,
    ),
}


class User(BaseModel):
    """Profile of an authenticated user."""

    model_config = ConfigDict(from_attributes=True)

    uid: str
    email: str
    display_name: str | None = None
    photo_url: str | None = None
    plan: SubscriptionPlan = SubscriptionPlan.FREE
    default_workspace_id: str | None = None
    created_at: dt.datetime


class UserUpdate(BaseModel):
    """Editable user profile fields."""

    display_name: str | None = None
    photo_url: str | None = None
    default_workspace_id: str | None = None


class Workspace(BaseModel):
    """An isolation boundary owning categories, transactions and members."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: WorkspaceType
    owner_id: str
    currency: str
    icon: str | None = None
    color: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime


class WorkspaceInput(BaseModel):
    """Payload for creating a workspace."""

    name: str = Field(min_length=1)
    type: WorkspaceType = WorkspaceType.PERSONAL
    icon: str | None = None
    color: str | None = None


class WorkspaceUpdate(BaseModel):
    """Partial update of a workspace."""

    name: str | None = Field(default=None, min_length=1)
    icon: str | None = None
    color: str | None = None


class WorkspaceMember(BaseModel):
    """A user's membership in a workspace."""

    uid: str
    email: str = ""
    display_name: str | None = None
    role: MemberRole
    added_at: dt.datetime


class MemberInput(BaseModel):
    """Payload for inviting a user into a workspace by email."""

    email: str
    role: MemberRole = MemberRole.MEMBER


class MemberRoleUpdate(BaseModel):
    """Payload for changing a member's role."""

    role: MemberRole


class Category(BaseModel):
    """A labeled bucket that transactions are classified into."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    type: TransactionType
    group: CategoryGroup
    label: str
    icon: str
    color: str
    order: int
    target_monthly: float | None = None
    is_default: bool = False


class CategoryInput(BaseModel):
    """Payload for creating a category."""

    type: TransactionType
    group: CategoryGroup
    label: str = Field(min_length=1)
    icon: str
    color: str
    order: int = 0
    target_monthly: float | None = Field(default=None, ge=0)
    is_default: bool = False


class CategoryUpdate(BaseModel):
    """Partial update of a category."""

    group: CategoryGroup | None = None
    label: str | None = Field(default=None, min_length=1)
    icon: str | None = None
    color: str | None = None
    order: int | None = None
    target_monthly: float | None = Field(default=None, ge=0)


class CategoryOrder(BaseModel):
    """New position of a single category."""

    id: str
    order: int


class Transaction(BaseModel):
    """A recorded income or expense event."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    workspace_id: str
    type: TransactionType
    amount: float = Field(ge=0)
    category_id: str
    description: str
    date: dt.date
    tags: list[str] = Field(default_factory=list)
    notes: str | None = None
    is_recurring: bool = False
    recurring_id: str | None = None
    created_by: str
    created_at: dt.datetime
    updated_at: dt.datetime


class TransactionInput(BaseModel):
    """Payload for recording a transaction."""

    type: TransactionType
    amount: float = Field(ge=0)
    category_id: str
    description: str
    date: dt.date
    tags: list[str] = Field(default_factory=list)
    notes: str | None = None
    is_recurring: bool = False
    recurring_id: str | None = None


class TransactionUpdate(BaseModel):
    """Partial update of a transaction."""

    type: TransactionType | None = None
    amount: float | None = Field(default=None, ge=0)
    category_id: str | None = None
    description: str | None = None
    date: dt.date | None = None
    tags: list[str] | None = None
    notes: str | None = None
    is_recurring: bool | None = None


class TransactionFilters(BaseModel):
    """Optional predicates narrowing a transaction list. Absent options impose no constraint."""

    type: TransactionType | None = None
    category_id: str | None = None
    category_group: CategoryGroup | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    min_amount: float | None = None
    max_amount: float | None = None
    search_text: str | None = None
    tags: list[str] | None = None


class TransactionQuery(TransactionFilters):
    """Query string of the transaction list: the filter options plus a fetch limit."""

    limit: int | None = Field(default=None, ge=1)


class MonthlySummary(BaseModel):
    """Totals for a set of transactions."""

    income: float = 0
    expenses: float = 0
    balance: float = 0
    savings_rate: float = 0
    fixed_expenses: float = 0
    variable_expenses: float = 0


class CategorySummary(BaseModel):
    """Per-category totals with display metadata copied from the category."""

    category_id: str
    category_label: str
    category_icon: str
    category_color: str
    total: float
    target: float | None = None
    percentage: float
    transaction_count: int


class MonthlyDashboard(BaseModel):
    """Summary and both category breakdowns for one calendar month."""

    year: int
    month: int
    summary: MonthlySummary
    income_breakdown: list[CategorySummary]
    expense_breakdown: list[CategorySummary]


class CurrentUser(BaseModel):
    """The identity of the caller, resolved once per request."""

    uid: str
    email: str = ""
    display_name: str | None = None


class WorkspaceContext(BaseModel):
    """The workspace selected by a request together with the caller's role in it."""

    user: CurrentUser
    workspace: Workspace
    role: MemberRole
