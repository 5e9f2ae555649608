"""The "current party" selection.

The selection is an explicit object handed to whoever needs it. It is only
persisted when ``save`` is called, as the party id in plain text under its
own local-storage key.
"""
import logging
from dataclasses import dataclass

from app.core.config import settings
from app.core.storage import LocalStorage
from app.models import Party
from app.planner.parties import PartyAccessor

logger = logging.getLogger(__name__)


@dataclass
class PartySession:
    current_party_id: int | None = None

    @classmethod
    def load(cls, storage: LocalStorage, key: str = settings.selected_party_key) -> "PartySession":
        """Restore the selection; unreadable values give an empty session."""
        try:
            raw = storage.get_item(key)
        except OSError as e:
            logger.warning(f"Failed to read selected party: {e}")
            return cls()
        if raw is None or not raw.strip():
            return cls()
        try:
            return cls(current_party_id=int(raw.strip()))
        except ValueError:
            logger.warning(f"Ignoring invalid selected party id: {raw!r}")
            return cls()

    def save(self, storage: LocalStorage, key: str = settings.selected_party_key) -> None:
        if self.current_party_id is None:
            storage.remove_item(key)
        else:
            storage.set_item(key, str(self.current_party_id))

    def select(self, party_id: int | None) -> None:
        self.current_party_id = party_id

    def current_party(self, parties: PartyAccessor) -> Party | None:
        """Resolve the selected party.

        A selection pointing at a deleted party is cleared.
        """
        if self.current_party_id is None:
            return None
        party = parties.get(self.current_party_id)
        if party is None:
            logger.info(f"Selected party {self.current_party_id} no longer exists")
            self.current_party_id = None
        return party
