from flask import Blueprint, jsonify, request

from duel.actions import questions as actions
from duel.api import request_payload

questions = Blueprint('questions', __name__)


@questions.route('', methods=['POST'])
def create_question():
    return jsonify(actions.create_question(request_payload())), 201


@questions.route('/<int:question_id>', methods=['PATCH'])
def update_question(question_id):
    return jsonify(actions.update_question(request_payload(id=question_id)))


@questions.route('/mine', methods=['GET'])
def list_my_questions():
    include_inactive = request.args.get('include_inactive', '').lower() in ('1', 'true', 'yes')
    return jsonify(actions.list_my_questions({'include_inactive': include_inactive}))
