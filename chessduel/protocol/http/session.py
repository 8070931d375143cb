from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from ...engine.game import Game


@dataclass
class Session:
    """One game plus its opponent settings.

    ``lock`` serializes every read and write of ``game``; the opponent search
    holds it for the whole computation so the position cannot change under it.
    """

    game: Game
    strength: int
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)


class InMemorySessionStore:
    """Thread-safe in-memory game session store.

    Responsibilities:
    - Create new sessions with unique `game_id`s
    - Retrieve existing sessions by `game_id`
    - Delete sessions
    """

    def __init__(self, default_strength: int = 5) -> None:
        self._lock = threading.RLock()
        self._sessions: Dict[str, Session] = {}
        self.default_strength = default_strength

    def create(self, game: Optional[Game] = None, strength: Optional[int] = None) -> str:
        """Create a new game session and return its `game_id`."""
        gid = str(uuid.uuid4())
        session = Session(
            game=game if game is not None else Game.new(),
            strength=strength if strength is not None else self.default_strength,
        )
        with self._lock:
            self._sessions[gid] = session
        return gid

    def get(self, game_id: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(game_id)

    def delete(self, game_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(game_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
