"""In-memory repository implementations."""

from typing import Dict, List, Optional
from uuid import UUID

from fse_compliance.application.ports.repositories import AssessmentSessionRepository
from fse_compliance.application.services.assessment_service import AssessmentSession


class InMemoryAssessmentSessionRepository(AssessmentSessionRepository):
    """Process-local store of live assessment sessions."""

    def __init__(self):
        self._sessions: Dict[UUID, AssessmentSession] = {}

    async def save(self, session: AssessmentSession) -> AssessmentSession:
        """Save a session."""
        self._sessions[session.id] = session
        return session

    async def find_by_id(self, session_id: UUID) -> Optional[AssessmentSession]:
        """Find session by ID."""
        return self._sessions.get(session_id)

    async def find_all(self) -> List[AssessmentSession]:
        """Find all sessions, oldest first."""
        return sorted(self._sessions.values(), key=lambda session: session.created_at)

    async def delete(self, session_id: UUID) -> bool:
        """Delete a session."""
        return self._sessions.pop(session_id, None) is not None
