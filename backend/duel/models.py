from datetime import datetime, timezone
import random
import string

from flask_login import UserMixin

from duel import db, bcrypt

DIFFICULTIES = ('easy', 'medium', 'hard')
MATCH_STATUSES = ('waiting', 'in_progress', 'completed', 'cancelled')
TERMINAL_STATUSES = ('completed', 'cancelled')
VISIBILITIES = ('private', 'unlisted', 'public')


def utcnow():
    """Current time as a naive UTC datetime (what the DateTime columns store)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat() if value else None


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
        }


class TriviaQuestion(db.Model):
    """Question bank used for duels. Global when owner_id is null."""
    __tablename__ = 'trivia_question'
    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True, index=True)
    category = db.Column(db.String(128), nullable=True)
    subcategory = db.Column(db.String(128), nullable=True)
    difficulty = db.Column(db.String(16), nullable=False, default='easy')
    question = db.Column(db.Text, nullable=False)
    options = db.Column(db.JSON, nullable=True)  # e.g. [{"id": "A", "label": "..."}]
    correct_answer = db.Column(db.JSON, nullable=True)  # "A", ["A", "C"], true, ...
    explanation = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'category': self.category,
            'subcategory': self.subcategory,
            'difficulty': self.difficulty,
            'question': self.question,
            'options': self.options,
            'correct_answer': self.correct_answer,
            'explanation': self.explanation,
            'is_active': self.is_active,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


def generate_join_code(length=6):
    """Generate a unique, short join code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if not DuelMatch.query.filter_by(join_code=code).first():
            return code


class DuelMatch(db.Model):
    __tablename__ = 'duel_match'
    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=True)
    max_players = db.Column(db.Integer, nullable=True)
    total_rounds = db.Column(db.Integer, nullable=True)
    time_per_question_seconds = db.Column(db.Integer, nullable=True)
    status = db.Column(db.String(16), nullable=False, default='waiting')  # waiting, in_progress, completed, cancelled
    visibility = db.Column(db.String(16), nullable=False, default='private')  # private, unlisted, public
    join_code = db.Column(db.String(32), nullable=True, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    started_at = db.Column(db.DateTime, nullable=True)
    ended_at = db.Column(db.DateTime, nullable=True)

    players = db.relationship('DuelPlayer', back_populates='match', order_by='DuelPlayer.id')
    rounds = db.relationship('DuelRound', back_populates='match', order_by='DuelRound.round_number')

    @property
    def is_joinable(self):
        return self.status not in TERMINAL_STATUSES

    def seated_players(self):
        return [p for p in self.players if p.left_at is None]

    def to_dict(self, include_players=False, include_rounds=False):
        data = {
            'id': self.id,
            'owner_id': self.owner_id,
            'title': self.title,
            'max_players': self.max_players,
            'total_rounds': self.total_rounds,
            'time_per_question_seconds': self.time_per_question_seconds,
            'status': self.status,
            'visibility': self.visibility,
            'join_code': self.join_code,
            'created_at': _iso(self.created_at),
            'started_at': _iso(self.started_at),
            'ended_at': _iso(self.ended_at),
        }
        if include_players:
            data['players'] = [p.to_dict() for p in self.players]
        if include_rounds:
            data['rounds'] = [r.to_dict() for r in self.rounds]
        return data


class DuelPlayer(db.Model):
    __tablename__ = 'duel_player'
    id = db.Column(db.Integer, primary_key=True)
    match_id = db.Column(db.Integer, db.ForeignKey('duel_match.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)  # null for guests
    display_name = db.Column(db.String(64), nullable=False)
    score = db.Column(db.Integer, nullable=False, default=0)
    joined_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    left_at = db.Column(db.DateTime, nullable=True)
    meta = db.Column(db.JSON, nullable=True)

    match = db.relationship('DuelMatch', back_populates='players')

    def to_dict(self):
        return {
            'id': self.id,
            'match_id': self.match_id,
            'user_id': self.user_id,
            'display_name': self.display_name,
            'score': self.score,
            'joined_at': _iso(self.joined_at),
            'left_at': _iso(self.left_at),
            'meta': self.meta,
        }


class DuelRound(db.Model):
    __tablename__ = 'duel_round'
    id = db.Column(db.Integer, primary_key=True)
    match_id = db.Column(db.Integer, db.ForeignKey('duel_match.id'), nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey('trivia_question.id'), nullable=False)
    round_number = db.Column(db.Integer, nullable=False, default=1)
    started_at = db.Column(db.DateTime, nullable=True)
    ended_at = db.Column(db.DateTime, nullable=True)
    points = db.Column(db.Integer, nullable=False, default=1)
    meta = db.Column(db.JSON, nullable=True)

    match = db.relationship('DuelMatch', back_populates='rounds')
    question = db.relationship('TriviaQuestion')

    def to_dict(self):
        return {
            'id': self.id,
            'match_id': self.match_id,
            'question_id': self.question_id,
            'round_number': self.round_number,
            'started_at': _iso(self.started_at),
            'ended_at': _iso(self.ended_at),
            'points': self.points,
            'meta': self.meta,
        }


class DuelAnswer(db.Model):
    __tablename__ = 'duel_answer'
    id = db.Column(db.Integer, primary_key=True)
    round_id = db.Column(db.Integer, db.ForeignKey('duel_round.id'), nullable=False, index=True)
    player_id = db.Column(db.Integer, db.ForeignKey('duel_player.id'), nullable=False, index=True)
    answer = db.Column(db.JSON, nullable=True)
    is_correct = db.Column(db.Boolean, nullable=False, default=False)
    points_awarded = db.Column(db.Integer, nullable=False, default=0)
    answered_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    round = db.relationship('DuelRound')
    player = db.relationship('DuelPlayer')

    def to_dict(self):
        return {
            'id': self.id,
            'round_id': self.round_id,
            'player_id': self.player_id,
            'answer': self.answer,
            'is_correct': self.is_correct,
            'points_awarded': self.points_awarded,
            'answered_at': _iso(self.answered_at),
        }
