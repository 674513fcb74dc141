# distroflow/repositories/store_repo.py
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from sqlmodel import Session

from distroflow.models.store import StoreState, StoredState


class StoreRepository:
    """
    Data access layer for the serialized POS state.

    - The whole StoreState lives under one key (no partial-field writes).
    - No FastAPI, no business logic.
    """

    def load(self, session: Session, key: str) -> StoreState:
        """
        Return the stored state, or the seeded initial state when the key
        has never been written.
        """
        row = session.get(StoredState, key)
        if row is None:
            return StoreState.initial()
        return StoreState.model_validate(row.payload)

    def save(self, session: Session, key: str, state: StoreState) -> None:
        payload = state.model_dump(mode="json")
        row = session.get(StoredState, key)
        if row is None:
            row = StoredState(key=key, payload=payload)
        else:
            row.payload = payload
            row.updated_at = datetime.now(timezone.utc)
        session.add(row)
        session.commit()

    @contextmanager
    def transaction(self, session: Session, key: str) -> Iterator[StoreState]:
        """
        Load the state, hand it to the caller and persist it on success.

        If the body raises, nothing is written and the stored state stays
        as it was.

        Usage:
            with repo.transaction(session, key) as state:
                sale_service.process_sale(state, "Dinheiro")
        """
        state = self.load(session, key)
        yield state
        self.save(session, key, state)
