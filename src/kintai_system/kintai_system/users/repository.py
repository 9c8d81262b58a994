from __future__ import annotations

from typing import Mapping, Protocol

from .model import Employee


class UserRepository(Protocol):
    """Employee directory per tenant.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def list_users(self, tenant_id: str) -> Mapping[str, Employee]:
        raise NotImplementedError

    def list_employee_codes(self, tenant_id: str) -> Mapping[str, str]:
        """Payroll-system employee codes keyed by e-mail address or display name."""

        raise NotImplementedError
