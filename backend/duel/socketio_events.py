from flask_socketio import join_room, leave_room, emit
from duel import socketio


def match_room(match_id) -> str:
    return f"match:{match_id}"


def broadcast_match_update(match_id: int, event: str) -> None:
    """Tell every client in the match room that the match changed."""
    socketio.emit('match_update', {'match_id': match_id, 'event': event}, to=match_room(match_id), namespace='/ws')


def _match_id_from(data):
    match_id = (data or {}).get('match_id')
    if isinstance(match_id, bool):
        return None
    try:
        return int(match_id)
    except (TypeError, ValueError):
        return None


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_match(data):
    match_id = _match_id_from(data)
    if match_id is None:
        emit('error', {'message': 'match_id is required'})
        return
    room = match_room(match_id)
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_match(data):
    match_id = _match_id_from(data)
    if match_id is None:
        emit('error', {'message': 'match_id is required'})
        return
    room = match_room(match_id)
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the '/ws' namespace."""
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_match', handle_join_match, namespace='/ws')
    socketio.on_event('leave_match', handle_leave_match, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')
