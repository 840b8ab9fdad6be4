from flask import current_app

from duel import db
from duel.models import DuelMatch, DuelRound, TriviaQuestion, utcnow
from duel.socketio_events import broadcast_match_update
from .errors import ActionError
from .validation import Field, parse_input
from . import require_user

ROUND_FIELDS = {
    'match_id': Field('int', required=True),
    'question_id': Field('int', required=True),
    'round_number': Field('int', positive=True),
    'points': Field('int', positive=True),
    'meta': Field('any'),
}


def _next_round_number(match_id: int) -> int:
    highest = db.session.query(db.func.max(DuelRound.round_number)).filter(DuelRound.match_id == match_id).scalar()
    return int(highest or 0) + 1


def add_round(data):
    user = require_user()
    values = parse_input(data, ROUND_FIELDS)

    match = DuelMatch.query.filter_by(id=values['match_id'], owner_id=user.id).first()
    if not match:
        current_app.logger.warning(f"[round-add] match={values['match_id']} not found for owner={user.id}")
        raise ActionError('NOT_FOUND', 'Match not found.')

    question = db.session.get(TriviaQuestion, values['question_id'])
    if not question or not question.is_active:
        current_app.logger.warning(f"[round-add] question={values['question_id']} not available for match={match.id}")
        raise ActionError('NOT_FOUND', 'Question not available.')

    duel_round = DuelRound(
        match_id=match.id,
        question_id=question.id,
        round_number=values.get('round_number') or _next_round_number(match.id),
        points=values.get('points', 1),
        meta=values.get('meta'),
        started_at=utcnow(),
    )
    db.session.add(duel_round)
    db.session.commit()
    current_app.logger.info(
        f"[round-add] match={match.id} round={duel_round.id} number={duel_round.round_number} question={question.id}"
    )
    broadcast_match_update(match.id, 'round_added')
    return {'round': duel_round.to_dict()}
