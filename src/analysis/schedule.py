"""Head-to-head schedule generation and match scoring."""

import logging
from datetime import date, timedelta
from typing import Optional, Sequence

from ..models import H2HMatch, StatRecord


logger = logging.getLogger(__name__)

# Placeholder entity that pads an odd field; pairings with it are byes
BYE = None


def generate_round_robin(entity_ids: Sequence[str]) -> list[list[tuple[str, str]]]:
    """
    Pair every entity with every other entity once (circle method).

    An odd field is padded with a bye; pairings against the bye are left
    out. Each round keeps the first entity fixed and rotates the rest by
    moving the last entity to position one.

    Args:
        entity_ids: Team or participant IDs.

    Returns:
        Rounds, each a list of (side 1, side 2) pairs. Empty if there are
        fewer than two entities.
    """
    if len(entity_ids) < 2:
        return []

    entities: list[Optional[str]] = list(entity_ids)
    if len(entities) % 2 != 0:
        entities.append(BYE)

    count = len(entities)
    rounds: list[list[tuple[str, str]]] = []
    for _ in range(count - 1):
        pairs = []
        for i in range(count // 2):
            first = entities[i]
            second = entities[count - 1 - i]
            if first is BYE or second is BYE:
                continue
            pairs.append((first, second))
        if pairs:
            rounds.append(pairs)

        entities.insert(1, entities.pop())

    return rounds


def schedule_matches(
    game_id: str,
    entity_ids: Sequence[str],
    start: date,
    end: date,
    team_based: bool,
) -> list[H2HMatch]:
    """
    Lay out a round-robin schedule over the game's dates.

    One round is played per day starting on ``start``. Rounds that would
    fall after ``end`` are not scheduled.

    Args:
        game_id: Game the matches belong to.
        entity_ids: Teams (team-based games) or participants.
        start: First match day.
        end: Last match day.
        team_based: Whether the sides are teams rather than participants.

    Returns:
        Matches numbered from 1 in generation order.
    """
    rounds = generate_round_robin(entity_ids)
    if not rounds:
        logger.warning("Not enough entities to schedule matches for game %s", game_id)
        return []

    matches: list[H2HMatch] = []
    match_number = 0
    match_date = start
    for index, pairs in enumerate(rounds):
        if match_date > end:
            logger.warning(
                "Game %s ran out of dates: %d of %d rounds scheduled",
                game_id,
                index,
                len(rounds),
            )
            break
        for side1, side2 in pairs:
            match_number += 1
            if team_based:
                match = H2HMatch(
                    game_id=game_id,
                    match_number=match_number,
                    match_date=match_date,
                    team1_id=side1,
                    team2_id=side2,
                )
            else:
                match = H2HMatch(
                    game_id=game_id,
                    match_number=match_number,
                    match_date=match_date,
                    player1_id=side1,
                    player2_id=side2,
                )
            matches.append(match)
        match_date += timedelta(days=1)

    return matches


def side_total(stats: Sequence[StatRecord], side_id: Optional[str], team_based: bool) -> int:
    """Sum the raw stat values recorded for one side of a match."""
    if side_id is None:
        return 0
    if team_based:
        return sum(s.value for s in stats if s.team_id == side_id)
    return sum(s.value for s in stats if s.player_id == side_id)


def score_match(
    match: H2HMatch,
    stats: Sequence[StatRecord],
    same_day_only: bool = False,
) -> H2HMatch:
    """
    Score a match from recorded stats and mark it completed.

    Each side's score is the sum of its raw stat values. The higher total
    wins; a tie leaves both winner and loser unset.

    Args:
        match: Match to score. It is updated in place.
        stats: Stats recorded for the game.
        same_day_only: Only count stats recorded on the match date.

    Returns:
        The updated match.
    """
    if same_day_only and match.match_date is not None:
        day = match.match_date.isoformat()
        stats = [s for s in stats if s.date_recorded == day]

    side1, side2 = match.side_ids
    total1 = side_total(stats, side1, match.is_team_based)
    total2 = side_total(stats, side2, match.is_team_based)

    match.player1_score = total1
    match.player2_score = total2
    if total1 > total2:
        match.winner_id, match.loser_id = side1, side2
    elif total2 > total1:
        match.winner_id, match.loser_id = side2, side1
    else:
        match.winner_id = match.loser_id = None
    match.status = "completed"
    return match
