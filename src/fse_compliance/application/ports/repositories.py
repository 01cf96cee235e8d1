"""Port interfaces for repositories (Dependency Inversion Principle)."""

from abc import ABC, abstractmethod
from typing import List, Optional, TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from fse_compliance.application.services.assessment_service import AssessmentSession


class AssessmentSessionRepository(ABC):
    """Port interface for live assessment sessions."""

    @abstractmethod
    async def save(self, session: "AssessmentSession") -> "AssessmentSession":
        """Save a session."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, session_id: UUID) -> Optional["AssessmentSession"]:
        """Find session by ID."""
        raise NotImplementedError

    @abstractmethod
    async def find_all(self) -> List["AssessmentSession"]:
        """Find all sessions."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, session_id: UUID) -> bool:
        """Delete a session."""
        raise NotImplementedError
