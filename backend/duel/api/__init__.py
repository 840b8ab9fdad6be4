from flask import request

from duel.actions.errors import ActionError


def request_payload(**path_values):
    """Decoded JSON body with path parameters taking precedence over body keys."""
    data = request.get_json(silent=True)
    if data is None:
        if request.get_data():
            raise ActionError('BAD_REQUEST', 'Malformed JSON body.')
        data = {}
    if not isinstance(data, dict):
        raise ActionError('BAD_REQUEST', 'Request body must be a JSON object.')
    data = dict(data)
    data.update(path_values)
    return data
