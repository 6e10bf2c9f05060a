"""Explicit tenant/user context passed to every service operation."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class TenantContext:
    """Who is acting, and on behalf of which school."""

    tenant_id: UUID
    acting_user_id: UUID
