"""Exceptions raised by Budgetbook services."""


class BudgetbookError(Exception):
    """Base class for service-level failures."""


class StorageError(BudgetbookError):
    """A read or write against the store failed. No partial effects of the failed write are visible."""


class PlanLimitError(BudgetbookError):
    """The operation would exceed a quota or feature of the caller's subscription plan."""


class MemberNotFoundError(BudgetbookError):
    """No user with the given email is known."""


class OwnerRoleError(BudgetbookError):
    """The operation would change the role of the workspace owner or appoint a second owner."""
