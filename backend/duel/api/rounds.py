from flask import Blueprint, jsonify

from duel.actions.answers import submit_answer as submit_answer_action
from duel.api import request_payload

rounds = Blueprint('rounds', __name__)


@rounds.route('/<int:round_id>/answers', methods=['POST'])
def submit_answer(round_id):
    return jsonify(submit_answer_action(request_payload(round_id=round_id))), 201
