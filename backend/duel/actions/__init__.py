"""Server-side data actions for the duel app.

Each action takes the decoded JSON input, checks it, resolves the signed-in
user where needed and performs one lookup-then-authorize-then-mutate step.
Results are plain dicts keyed by resource name; failures raise ActionError.
"""
from flask_login import current_user

from .errors import ActionError


def require_user():
    if not current_user or not current_user.is_authenticated:
        raise ActionError('UNAUTHORIZED', 'You must be signed in to perform this action.')
    return current_user
