"""Signature handles value object."""

from dataclasses import dataclass, replace
from enum import Enum


class SignatureParty(Enum):
    """Parties that must sign an assessment."""
    INSPECTOR = "inspector"
    FACILITY_OWNER = "facility_owner"

    @classmethod
    def parse(cls, value: "SignatureParty | str") -> "SignatureParty":
        """Parse a party from its key."""
        if isinstance(value, SignatureParty):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown signature party '{value}'") from None


@dataclass(frozen=True)
class Signatures:
    """Immutable pair of opaque signature handles. Empty string means absent."""

    inspector: str = ""
    facility_owner: str = ""

    def __post_init__(self) -> None:
        """Validate handle types."""
        if not isinstance(self.inspector, str) or not isinstance(self.facility_owner, str):
            raise ValueError("Signature handles must be strings")

    def get(self, party: SignatureParty) -> str:
        """Get the handle for a party."""
        return getattr(self, party.value)

    def with_signature(self, party: SignatureParty, handle: str) -> "Signatures":
        """Create a new Signatures with one handle replaced."""
        return replace(self, **{party.value: handle})

    def is_present(self, party: SignatureParty) -> bool:
        """Check if a party has signed."""
        return bool(self.get(party))

    @property
    def is_complete(self) -> bool:
        """Check if both parties have signed."""
        return bool(self.inspector) and bool(self.facility_owner)

    @property
    def missing_parties(self) -> list[SignatureParty]:
        """Get parties that have not signed yet."""
        return [party for party in SignatureParty if not self.is_present(party)]
