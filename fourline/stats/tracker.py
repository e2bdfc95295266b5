"""
tracker.py - Player statistics and Elo ratings for finished games

This module keeps a running record per player name: Elo rating, wins, losses
and draws split by seat, and win streaks. Records live in a StatisticsStore
owned by whoever creates the RatingTracker; the store's lock serializes every
update so concurrent games involving the same player cannot lose updates.
"""

import threading
from collections import abc
from dataclasses import asdict, dataclass, fields, replace
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from fourline.debug import debug
from fourline.utils import ELO_K_FACTOR, ELO_SCALE, INITIAL_ELO, GameResult


@dataclass
class Statistics:
    """
    Statistics for one named player.

    Seat counters are split by whether the player moved first (player_1_*)
    or second (player_2_*) in the game.
    """
    elo: float = INITIAL_ELO
    player_1_wins: int = 0
    player_1_losses: int = 0
    player_1_draws: int = 0
    player_2_wins: int = 0
    player_2_losses: int = 0
    player_2_draws: int = 0
    current_streak: int = 0
    longest_streak: int = 0

    @property
    def games_played(self) -> int:
        return (self.player_1_wins + self.player_1_losses + self.player_1_draws
                + self.player_2_wins + self.player_2_losses + self.player_2_draws)

    def to_dict(self) -> Dict[str, float]:
        """Flat mapping used on the wire and in snapshots."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping) -> 'Statistics':
        """
        Rebuild a record from its flat mapping. Missing fields take defaults.

        Raises:
            ValueError: on unknown fields or values of the wrong type
        """
        known = {field.name: field for field in fields(cls)}
        unknown = set(data) - set(known)
        if unknown:
            raise ValueError(f"Unknown statistics fields: {sorted(unknown)}")

        values = {}
        for name, value in data.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Statistics field {name} must be a number, got {value!r}")
            if name == "elo":
                values[name] = float(value)
            elif float(value).is_integer() and value >= 0:
                values[name] = int(value)
            else:
                raise ValueError(f"Statistics field {name} must be a non-negative integer")
        return cls(**values)


def expected_score(own_elo: float, opponent_elo: float) -> float:
    """Probability-like expected score of a player against an opponent."""
    return 1 / (1 + 10 ** ((opponent_elo - own_elo) / ELO_SCALE))


def update_elo(own_elo: float, opponent_elo: float, score: float,
               k_factor: float = ELO_K_FACTOR) -> float:
    """
    New rating after one game.

    Args:
        own_elo: Rating before the game
        opponent_elo: Opponent's rating before the game
        score: 1 for a win, 0.5 for a draw, 0 for a loss
        k_factor: Maximum rating change per game
    """
    return own_elo + k_factor * (score - expected_score(own_elo, opponent_elo))


# Scores for (player one, player two) by result
SCORES = {
    GameResult.DRAW: (0.5, 0.5),
    GameResult.PLAYER_ONE_WIN: (1.0, 0.0),
    GameResult.PLAYER_TWO_WIN: (0.0, 1.0),
}


def to_result(result) -> GameResult:
    """
    Coerce a result code (0, 1, 2) or finished GameResult.

    Raises:
        ValueError: for anything else, including GameResult.IN_PROGRESS
    """
    if isinstance(result, GameResult):
        parsed = result
    elif isinstance(result, int) and not isinstance(result, bool):
        try:
            parsed = GameResult(result)
        except ValueError:
            parsed = None
    else:
        parsed = None
    if parsed not in SCORES:
        raise ValueError(f"Result must be 0 (draw), 1 or 2 (winning player), got {result!r}")
    return parsed


class StatisticsStore:
    """
    Name-keyed statistics records with a lock guarding every access.

    Records are created only by writers; readers get copies.
    """

    def __init__(self, records: Optional[Mapping[str, Statistics]] = None):
        self._records: Dict[str, Statistics] = {
            name: replace(stats) for name, stats in (records or {}).items()
        }
        self._lock = threading.Lock()

    @property
    def lock(self) -> threading.Lock:
        return self._lock

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, name) -> bool:
        with self._lock:
            return name in self._records

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._records))

    def snapshot(self, names: Iterable[str]) -> Dict[str, Statistics]:
        """Copies of the requested records; unknown names get defaults."""
        with self._lock:
            return {name: replace(self._records.get(name) or Statistics()) for name in names}

    def snapshot_all(self) -> Dict[str, Statistics]:
        with self._lock:
            return {name: replace(stats) for name, stats in self._records.items()}

    def _get_or_create(self, name: str) -> Statistics:
        """Caller must hold the lock."""
        stats = self._records.get(name)
        if stats is None:
            debug.debug(f"Creating statistics for new player {name!r}", "stats")
            stats = self._records[name] = Statistics()
        return stats


def check_player_name(name) -> str:
    """
    Return name if it can identify a player.

    Raises:
        ValueError: if name is not a non-empty string
    """
    if not isinstance(name, str) or not name:
        raise ValueError(f"Player names must be non-empty strings, got {name!r}")
    return name


class RatingTracker:
    """
    Records finished games and maintains Elo ratings and streaks.

    Args:
        store: The statistics store to read and update. A fresh, empty store
            is created when omitted.
    """

    def __init__(self, store: Optional[StatisticsStore] = None, k_factor: float = ELO_K_FACTOR):
        self.store = store if store is not None else StatisticsStore()
        self.k_factor = k_factor

    def get_statistics(self, names: Iterable[str]) -> Dict[str, Statistics]:
        """
        Statistics for each requested name.

        Names that have never played get a default record, which is not
        stored.
        """
        if isinstance(names, str) or not isinstance(names, abc.Iterable):
            raise ValueError(f"get_statistics expects a list of names, got {names!r}")
        return self.store.snapshot([check_player_name(name) for name in names])

    def record_game(self, player_1: str, player_2: str, result) -> Dict[str, Statistics]:
        """
        Record the result of a game and return both players' updated statistics.

        Args:
            player_1: Name of the player who moved first
            player_2: Name of the player who moved second
            result: 0 for a draw, 1 or 2 for the winning seat (or a GameResult)

        Returns:
            Mapping of both names to copies of their updated statistics

        Raises:
            ValueError: for invalid names, identical names or an invalid result
        """
        check_player_name(player_1)
        check_player_name(player_2)
        if player_1 == player_2:
            raise ValueError(f"A player cannot play against themselves: {player_1!r}")
        outcome = to_result(result)
        score_1, score_2 = SCORES[outcome]

        with self.store.lock:
            stats_1 = self.store._get_or_create(player_1)
            stats_2 = self.store._get_or_create(player_2)

            # Both ratings move from the pre-game values
            new_elo_1 = update_elo(stats_1.elo, stats_2.elo, score_1, self.k_factor)
            new_elo_2 = update_elo(stats_2.elo, stats_1.elo, score_2, self.k_factor)

            if outcome == GameResult.DRAW:
                stats_1.player_1_draws += 1
                stats_2.player_2_draws += 1
                _end_streak(stats_1)
                _end_streak(stats_2)
            elif outcome == GameResult.PLAYER_ONE_WIN:
                stats_1.player_1_wins += 1
                stats_2.player_2_losses += 1
                _extend_streak(stats_1)
                _end_streak(stats_2)
            else:
                stats_1.player_1_losses += 1
                stats_2.player_2_wins += 1
                _end_streak(stats_1)
                _extend_streak(stats_2)

            stats_1.elo = new_elo_1
            stats_2.elo = new_elo_2
            updated = {player_1: replace(stats_1), player_2: replace(stats_2)}

        debug.info(
            f"Recorded {outcome.name} for {player_1!r} vs {player_2!r}: "
            f"elo {new_elo_1:.1f} / {new_elo_2:.1f}", "stats")
        return updated

    def leaderboard(self, limit: Optional[int] = None) -> Tuple[Tuple[str, Statistics], ...]:
        """Recorded players ordered by rating, highest first."""
        ranked = sorted(self.store.snapshot_all().items(),
                        key=lambda item: (-item[1].elo, item[0]))
        return tuple(ranked[:limit] if limit is not None else ranked)


def _extend_streak(stats: Statistics) -> None:
    stats.current_streak += 1
    if stats.current_streak > stats.longest_streak:
        stats.longest_streak = stats.current_streak


def _end_streak(stats: Statistics) -> None:
    stats.current_streak = 0


def statistics_to_json(statistics: Mapping[str, Statistics]) -> Dict[str, Dict[str, float]]:
    """Convert a name to Statistics mapping into plain dicts."""
    return {name: stats.to_dict() for name, stats in statistics.items()}
