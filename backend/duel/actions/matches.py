from flask import current_app

from duel import db
from duel.models import (
    DuelMatch,
    DuelPlayer,
    MATCH_STATUSES,
    TERMINAL_STATUSES,
    VISIBILITIES,
    generate_join_code,
    utcnow,
)
from duel.socketio_events import broadcast_match_update
from .errors import ActionError
from .validation import Field, parse_input
from . import require_user

# Allowed status moves; re-setting the current status is always allowed.
STATUS_TRANSITIONS = {
    'waiting': {'in_progress', 'cancelled'},
    'in_progress': {'completed', 'cancelled'},
    'completed': set(),
    'cancelled': set(),
}

MATCH_FIELDS = {
    'title': Field('string'),
    'max_players': Field('int', positive=True),
    'total_rounds': Field('int', positive=True),
    'time_per_question_seconds': Field('int', positive=True),
    'visibility': Field('enum', choices=VISIBILITIES),
    'join_code': Field('string', min_length=1, strip=True),
}

MATCH_UPDATE_FIELDS = {
    'id': Field('int', required=True),
    **MATCH_FIELDS,
    'status': Field('enum', choices=MATCH_STATUSES),
    'started_at': Field('date'),
    'ended_at': Field('date'),
}

JOIN_FIELDS = {
    'match_id': Field('int'),
    'join_code': Field('string', min_length=1, strip=True),
    'display_name': Field('string', required=True, min_length=1, message='Display name is required'),
}


def create_match(data):
    user = require_user()
    values = parse_input(data, MATCH_FIELDS)

    join_code = values.get('join_code')
    if join_code is None:
        join_code = generate_join_code(int(current_app.config.get('JOIN_CODE_LENGTH', 6)))

    match = DuelMatch(
        owner_id=user.id,
        title=values.get('title'),
        max_players=values.get('max_players'),
        total_rounds=values.get('total_rounds'),
        time_per_question_seconds=values.get('time_per_question_seconds'),
        visibility=values.get('visibility', 'private'),
        join_code=join_code,
        status='waiting',
        created_at=utcnow(),
    )
    db.session.add(match)
    db.session.commit()
    current_app.logger.info(f"[match-create] match={match.id} owner={user.id} code={match.join_code}")
    return {'match': match.to_dict()}


def get_match(data):
    """Match with players and rounds, for the owner, seated players, or anyone when not private."""
    user = require_user()
    values = parse_input(data, {'id': Field('int', required=True)})

    match = db.session.get(DuelMatch, values['id'])
    if not match:
        current_app.logger.warning(f"[match-get] match={values['id']} not found")
        raise ActionError('NOT_FOUND', 'Match not found.')
    visible = (
        match.owner_id == user.id
        or match.visibility != 'private'
        or any(p.user_id == user.id for p in match.players)
    )
    if not visible:
        current_app.logger.warning(f"[match-get] match={match.id} hidden from user={user.id}")
        raise ActionError('NOT_FOUND', 'Match not found.')
    return {'match': match.to_dict(include_players=True, include_rounds=True)}


def update_match(data):
    user = require_user()
    values = parse_input(data, MATCH_UPDATE_FIELDS)
    match_id = values.pop('id')

    match = DuelMatch.query.filter_by(id=match_id, owner_id=user.id).first()
    if not match:
        current_app.logger.warning(f"[match-update] match={match_id} not found for owner={user.id}")
        raise ActionError('NOT_FOUND', 'Match not found.')

    if not values:
        return {'match': match.to_dict()}

    new_status = values.get('status')
    if new_status and new_status != match.status:
        if new_status not in STATUS_TRANSITIONS[match.status]:
            current_app.logger.warning(f"[match-update] match={match.id} rejected {match.status} -> {new_status}")
            raise ActionError('BAD_REQUEST', 'Invalid status transition.')
        if new_status == 'in_progress' and 'started_at' not in values:
            values['started_at'] = utcnow()
        if new_status in TERMINAL_STATUSES and 'ended_at' not in values:
            values['ended_at'] = utcnow()

    prev_status = match.status
    for key, value in values.items():
        setattr(match, key, value)
    db.session.add(match)
    db.session.commit()
    current_app.logger.info(
        f"[match-update] match={match.id} fields={sorted(values)} status {prev_status} -> {match.status}"
    )
    broadcast_match_update(match.id, 'match_updated')
    return {'match': match.to_dict()}


def join_match(data):
    user = require_user()
    values = parse_input(data, JOIN_FIELDS)

    match = None
    if 'match_id' in values:
        match = db.session.get(DuelMatch, values['match_id'])
    elif 'join_code' in values:
        match = (
            DuelMatch.query
            .filter(db.func.upper(DuelMatch.join_code) == values['join_code'].upper())
            .filter(DuelMatch.status.not_in(TERMINAL_STATUSES))
            .order_by(DuelMatch.id.desc())
            .first()
        )
    else:
        current_app.logger.warning(f"[match-join] no match_id or join_code from user={user.id}")
        raise ActionError('BAD_REQUEST', "'match_id' or 'join_code' is required.")

    if not match or not match.is_joinable:
        target = values.get('match_id', values.get('join_code'))
        current_app.logger.warning(f"[match-join] match={target} not available for user={user.id}")
        raise ActionError('NOT_FOUND', 'Match not available.')

    seated = match.seated_players()
    if any(p.user_id == user.id for p in seated):
        current_app.logger.warning(f"[match-join] match={match.id} user={user.id} already seated")
        raise ActionError('CONFLICT', 'You are already in this match.')
    if match.max_players and len(seated) >= match.max_players:
        current_app.logger.warning(f"[match-join] match={match.id} full ({len(seated)}/{match.max_players})")
        raise ActionError('CONFLICT', 'Match is full.')

    player = DuelPlayer(
        match_id=match.id,
        user_id=user.id,
        display_name=values['display_name'],
        joined_at=utcnow(),
    )
    db.session.add(player)
    db.session.commit()
    current_app.logger.info(f"[match-join] match={match.id} player={player.id} user={user.id}")
    broadcast_match_update(match.id, 'player_joined')
    return {'player': player.to_dict()}
