from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import NewPermissionRequest, PermissionFilter, PermissionRequest


class PermissionRepository(Protocol):
    def create(self, new: NewPermissionRequest) -> PermissionRequest:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[PermissionRequest]:
        raise NotImplementedError

    def list_requests(self, criteria: PermissionFilter, *, limit: int) -> Sequence[PermissionRequest]:
        """Newest first."""
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        review_notes: Optional[str],
    ) -> bool:
        """Move a pending request to ``status``; False when it is no longer pending."""
        raise NotImplementedError

    def delete_pending(self, request_id: int) -> bool:
        raise NotImplementedError
