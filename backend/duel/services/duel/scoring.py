from duel import db
from duel.models import DuelPlayer, DuelRound


def _normalize(value):
    if isinstance(value, str):
        return value.strip().casefold()
    if isinstance(value, bool):
        # keep booleans distinct from 0/1
        return ('bool', value)
    if isinstance(value, dict):
        # option objects such as {"id": "A", "label": "..."} match on their id
        if 'id' in value:
            return _normalize(value['id'])
        return tuple(sorted((k, repr(v)) for k, v in value.items()))
    if isinstance(value, list):
        return tuple(_normalize(v) for v in value)
    return value


def grade_answer(correct_answer, answer) -> bool:
    """Compare a submitted answer with a question's correct answer.

    Strings match case-insensitively after trimming, lists match as unordered
    sets, and a scalar answer matches a one-element list.
    """
    if correct_answer is None:
        return False
    if isinstance(correct_answer, list):
        expected = {_normalize(v) for v in correct_answer}
        if isinstance(answer, list):
            given = {_normalize(v) for v in answer}
        elif answer is None:
            return False
        else:
            given = {_normalize(answer)}
        return expected == given
    if isinstance(answer, list):
        return len(answer) == 1 and _normalize(answer[0]) == _normalize(correct_answer)
    return _normalize(answer) == _normalize(correct_answer)


def award_points(duel_round: DuelRound, is_correct: bool) -> int:
    return int(duel_round.points or 0) if is_correct else 0


def apply_score(player: DuelPlayer, points: int) -> None:
    """Add awarded points to the player's running score (committed by the caller)."""
    if points:
        player.score = int(player.score or 0) + points
        db.session.add(player)
