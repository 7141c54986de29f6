"""JSON-file document store.

Holds firms, the talent and crew rosters, shoots (with their ledgers),
issued documents and the brand page to firm mapping in one JSON file.
Every write replaces the whole file through a temporary sibling and
``os.replace``, so a failed write leaves the previous state intact.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional

from prodflow import records
from prodflow.constants import INITIAL_FIRMS, PAGE_TO_FIRM_MAP
from prodflow.models import (
    CrewMember,
    Document,
    Firm,
    PersistenceFailure,
    Shoot,
    TalentMember,
)

logger = logging.getLogger(__name__)

COLLECTIONS = ("firms", "talent", "crew", "shoots", "documents")


def _empty_state() -> dict:
    state: dict = {name: {} for name in COLLECTIONS}
    state["page_firm_map"] = {}
    return state


def _seed_state() -> dict:
    state = _empty_state()
    state["firms"] = {f.id: records.firm_to_dict(f) for f in INITIAL_FIRMS}
    state["page_firm_map"] = dict(PAGE_TO_FIRM_MAP)
    return state


class JsonStore:
    """Document store backed by a single JSON file."""

    def __init__(self, path: str | Path, seed: bool = True):
        self.path = Path(path)
        self.seed = seed

    # --- Low-level I/O ---

    def _load(self) -> dict:
        if not self.path.exists():
            return _seed_state() if self.seed else _empty_state()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceFailure(f"Cannot read store {self.path}: {e}") from e
        state = _empty_state()
        state.update(data)
        return state

    def _write(self, state: dict) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent),
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(state, fh, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceFailure(f"Cannot write store {self.path}: {e}") from e

    def _update(self, mutate: Callable[[dict], None]) -> None:
        state = self._load()
        mutate(state)
        self._write(state)

    def _put(self, collection: str, key: str, value: dict) -> None:
        def mutate(state: dict) -> None:
            state[collection][key] = value
        self._update(mutate)

    # --- Reads ---

    def get_firms(self) -> list[Firm]:
        return [records.firm_from_dict(d) for d in self._load()["firms"].values()]

    def get_talent(self) -> list[TalentMember]:
        return [records.talent_from_dict(d) for d in self._load()["talent"].values()]

    def get_crew(self) -> list[CrewMember]:
        return [records.crew_from_dict(d) for d in self._load()["crew"].values()]

    def get_shoots(self) -> list[Shoot]:
        return [records.shoot_from_dict(d) for d in self._load()["shoots"].values()]

    def get_shoot(self, shoot_id: str) -> Optional[Shoot]:
        data = self._load()["shoots"].get(shoot_id)
        return records.shoot_from_dict(data) if data else None

    def get_documents(self) -> list[Document]:
        return [records.document_from_dict(d) for d in self._load()["documents"].values()]

    def get_document(self, document_id: str) -> Optional[Document]:
        data = self._load()["documents"].get(document_id)
        return records.document_from_dict(data) if data else None

    def get_page_firm_map(self) -> dict[str, str]:
        return dict(self._load()["page_firm_map"])

    # --- Writes ---

    def save_firm(self, firm: Firm) -> None:
        self._put("firms", firm.id, records.firm_to_dict(firm))

    def save_talent(self, member: TalentMember) -> None:
        self._put("talent", member.id, records.talent_to_dict(member))

    def save_crew(self, member: CrewMember) -> None:
        self._put("crew", member.id, records.crew_to_dict(member))

    def save_shoot(self, shoot: Shoot) -> None:
        """Full upsert keyed by shoot id; the ledger is replaced as a whole."""
        self._put("shoots", shoot.id, records.shoot_to_dict(shoot))
        logger.info("Saved shoot %s (%d ledger lines)", shoot.id, len(shoot.expenses))

    def delete_shoot(self, shoot_id: str) -> None:
        """Remove a shoot and its ledger. Issued documents are kept."""
        def mutate(state: dict) -> None:
            state["shoots"].pop(shoot_id, None)
        self._update(mutate)
        logger.info("Deleted shoot %s", shoot_id)

    def append_document(self, doc: Document) -> None:
        """Upsert keyed by document id. Callers supply a fresh id per append."""
        self._put("documents", doc.id, records.document_to_dict(doc))
        logger.info("Appended document %s (%s)", doc.number, doc.id)

    def update_page_mapping(self, page: str, firm_id: str) -> None:
        def mutate(state: dict) -> None:
            state["page_firm_map"][page] = firm_id
        self._update(mutate)
