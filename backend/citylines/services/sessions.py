"""
City Lines - Play Sessions

In-memory store of connectivity engines, one per running level.
Bounded: the oldest session is evicted when the store is full.
"""

import logging
import uuid
from collections import OrderedDict
from typing import Optional

from ..config import settings
from ..schemas import LevelRecord
from .connectivity import ConnectivityEngine

logger = logging.getLogger(__name__)


class Session:
    def __init__(self, session_id: str, level: int, record: LevelRecord, engine: ConnectivityEngine):
        self.session_id = session_id
        self.level = level
        self.record = record
        self.engine = engine


class SessionStore:
    def __init__(self, max_sessions: int):
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, Session]" = OrderedDict()

    def create(self, level: int, record: LevelRecord) -> Session:
        """Starts a session on a fresh grid built from `record`."""
        engine = ConnectivityEngine.from_record(record)
        session = Session(uuid.uuid4().hex, level, record, engine)

        self._sessions[session.session_id] = session
        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info("[Sessions] Evicted session %s", evicted_id)
        return session

    def get(self, session_id: str) -> Optional[Session]:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def __len__(self) -> int:
        return len(self._sessions)


sessions = SessionStore(settings.MAX_SESSIONS)
