from flask import current_app

from duel import db
from duel.models import DuelAnswer, DuelPlayer, DuelRound, utcnow
from duel.services.duel.scoring import grade_answer, award_points, apply_score
from duel.socketio_events import broadcast_match_update
from .errors import ActionError
from .validation import Field, parse_input
from . import require_user

ANSWER_FIELDS = {
    'round_id': Field('int', required=True),
    'player_id': Field('int', required=True),
    'answer': Field('any'),
    'is_correct': Field('bool'),
    'points_awarded': Field('int', nonnegative=True),
}


def submit_answer(data):
    user = require_user()
    values = parse_input(data, ANSWER_FIELDS)

    duel_round = db.session.get(DuelRound, values['round_id'])
    if not duel_round:
        current_app.logger.warning(f"[answer-submit] round={values['round_id']} not found")
        raise ActionError('NOT_FOUND', 'Round not found.')

    player = db.session.get(DuelPlayer, values['player_id'])
    if (
        not player
        or player.match_id != duel_round.match_id
        or (player.user_id is not None and player.user_id != user.id)
    ):
        current_app.logger.warning(
            f"[answer-submit] round={duel_round.id} player={values['player_id']} rejected for user={user.id}"
        )
        raise ActionError('NOT_FOUND', 'Player not found in this match.')

    # One answer per player per round
    if DuelAnswer.query.filter_by(round_id=duel_round.id, player_id=player.id).first():
        current_app.logger.warning(f"[answer-submit] round={duel_round.id} player={player.id} already answered")
        raise ActionError('CONFLICT', 'Answer already submitted for this round.')

    submitted = values.get('answer')
    if 'is_correct' in values:
        is_correct = values['is_correct']
    else:
        is_correct = grade_answer(duel_round.question.correct_answer if duel_round.question else None, submitted)
    points = values.get('points_awarded', award_points(duel_round, is_correct))

    answer = DuelAnswer(
        round_id=duel_round.id,
        player_id=player.id,
        answer=submitted,
        is_correct=is_correct,
        points_awarded=points,
        answered_at=utcnow(),
    )
    db.session.add(answer)
    apply_score(player, points)
    db.session.commit()
    current_app.logger.info(
        f"[answer-submit] round={duel_round.id} player={player.id} correct={is_correct} points={points}"
    )
    broadcast_match_update(duel_round.match_id, 'answer_submitted')
    return {'answer': answer.to_dict()}
