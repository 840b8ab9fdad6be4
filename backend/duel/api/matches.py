from flask import Blueprint, jsonify

from duel.actions import matches as actions
from duel.actions.rounds import add_round as add_round_action
from duel.api import request_payload

matches = Blueprint('matches', __name__)


@matches.route('', methods=['POST'])
def create_match():
    return jsonify(actions.create_match(request_payload())), 201


@matches.route('/<int:match_id>', methods=['GET'])
def get_match(match_id):
    return jsonify(actions.get_match({'id': match_id}))


@matches.route('/<int:match_id>', methods=['PATCH'])
def update_match(match_id):
    return jsonify(actions.update_match(request_payload(id=match_id)))


@matches.route('/<int:match_id>/join', methods=['POST'])
def join_match(match_id):
    return jsonify(actions.join_match(request_payload(match_id=match_id))), 201


@matches.route('/join', methods=['POST'])
def join_match_by_code():
    return jsonify(actions.join_match(request_payload())), 201


@matches.route('/<int:match_id>/rounds', methods=['POST'])
def add_round(match_id):
    return jsonify(add_round_action(request_payload(match_id=match_id))), 201
