"""Player registry and per-question round tracking.

Both are plain in-memory containers owned by ``QuizSession``; neither does any
locking of its own.
"""
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Set


@dataclass
class Player:
    connection_id: str
    nickname: str
    score: int = 0

    def to_dict(self):
        return {'nickname': self.nickname, 'score': self.score}


@dataclass(frozen=True)
class JoinResult:
    player: Player
    is_host: bool
    rejoined: bool


class PlayerRegistry:
    """connection id -> Player, kept in join order.

    The first connection to join an empty registry is the host. When the host
    goes away the earliest remaining player takes over.
    """

    def __init__(self):
        self._players: Dict[str, Player] = {}
        self._host_id: Optional[str] = None

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, connection_id) -> bool:
        return connection_id in self._players

    def __iter__(self) -> Iterator[Player]:
        return iter(list(self._players.values()))

    @property
    def host_id(self) -> Optional[str]:
        return self._host_id

    @property
    def host(self) -> Optional[Player]:
        return self._players.get(self._host_id) if self._host_id else None

    def is_host(self, connection_id: str) -> bool:
        return connection_id is not None and connection_id == self._host_id

    def get(self, connection_id: str) -> Optional[Player]:
        return self._players.get(connection_id)

    def upsert(self, connection_id: str, nickname: str) -> JoinResult:
        # Re-joining on the same connection overwrites the entry with score 0,
        # but keeps its join-order position and host status
        player = self._players.get(connection_id)
        rejoined = player is not None
        if rejoined:
            player.nickname = nickname
            player.score = 0
        else:
            player = Player(connection_id=connection_id, nickname=nickname)
            self._players[connection_id] = player
        if self._host_id is None:
            self._host_id = connection_id
        return JoinResult(player=player, is_host=self._host_id == connection_id, rejoined=rejoined)

    def remove(self, connection_id: str) -> Optional[Player]:
        """Drop a player; returns it, or None if it was not registered.

        If the removed player was host, the next player in join order is promoted.
        """
        player = self._players.pop(connection_id, None)
        if player is not None and connection_id == self._host_id:
            self._host_id = next(iter(self._players), None)
        return player

    def award(self, connection_id: str, points: int) -> Optional[Player]:
        player = self._players.get(connection_id)
        if player is not None:
            player.score += points
        return player

    def reset_scores(self) -> None:
        for player in self._players.values():
            player.score = 0


class RoundTracker:
    """Connections that have answered the active question."""

    def __init__(self):
        self._answered: Set[str] = set()

    def __len__(self) -> int:
        return len(self._answered)

    def has_answered(self, connection_id: str) -> bool:
        return connection_id in self._answered

    def record(self, connection_id: str) -> bool:
        """Record an answer; False if this connection already answered."""
        if connection_id in self._answered:
            return False
        self._answered.add(connection_id)
        return True

    def answered_among(self, registry: PlayerRegistry) -> int:
        return sum(1 for cid in self._answered if cid in registry)

    def clear(self) -> None:
        self._answered = set()
