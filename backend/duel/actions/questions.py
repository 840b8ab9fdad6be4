from flask import current_app

from duel import db
from duel.models import TriviaQuestion, DIFFICULTIES, utcnow
from .errors import ActionError
from .validation import Field, parse_input
from . import require_user

QUESTION_FIELDS = {
    'category': Field('string'),
    'subcategory': Field('string'),
    'difficulty': Field('enum', choices=DIFFICULTIES),
    'question': Field('string', required=True, min_length=1, message='Question is required'),
    'options': Field('any'),
    'correct_answer': Field('any'),
    'explanation': Field('string'),
    'is_active': Field('bool'),
}

QUESTION_UPDATE_FIELDS = {
    'id': Field('int', required=True),
    'category': Field('string'),
    'subcategory': Field('string'),
    'difficulty': Field('enum', choices=DIFFICULTIES),
    'question': Field('string', min_length=1),
    'options': Field('any'),
    'correct_answer': Field('any'),
    'explanation': Field('string'),
    'is_active': Field('bool'),
}


def create_question(data):
    user = require_user()
    values = parse_input(data, QUESTION_FIELDS)

    now = utcnow()
    question = TriviaQuestion(
        owner_id=user.id,
        category=values.get('category'),
        subcategory=values.get('subcategory'),
        difficulty=values.get('difficulty', 'easy'),
        question=values['question'],
        options=values.get('options'),
        correct_answer=values.get('correct_answer'),
        explanation=values.get('explanation'),
        is_active=values.get('is_active', True),
        created_at=now,
        updated_at=now,
    )
    db.session.add(question)
    db.session.commit()
    current_app.logger.info(f"[question-create] question={question.id} owner={user.id}")
    return {'question': question.to_dict()}


def update_question(data):
    user = require_user()
    values = parse_input(data, QUESTION_UPDATE_FIELDS)
    question_id = values.pop('id')

    question = TriviaQuestion.query.filter_by(id=question_id, owner_id=user.id).first()
    if not question:
        current_app.logger.warning(f"[question-update] question={question_id} not found for owner={user.id}")
        raise ActionError('NOT_FOUND', 'Question not found.')

    if not values:
        return {'question': question.to_dict()}

    for key, value in values.items():
        setattr(question, key, value)
    question.updated_at = utcnow()
    db.session.add(question)
    db.session.commit()
    current_app.logger.info(f"[question-update] question={question.id} fields={sorted(values)}")
    return {'question': question.to_dict()}


def list_my_questions(data=None):
    user = require_user()
    values = parse_input(data, {'include_inactive': Field('bool')})
    include_inactive = values.get('include_inactive', False)

    query = TriviaQuestion.query.filter_by(owner_id=user.id)
    if not include_inactive:
        query = query.filter_by(is_active=True)
    questions = query.order_by(TriviaQuestion.id).all()
    return {'questions': [q.to_dict() for q in questions]}
