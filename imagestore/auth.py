"""Session-based caller identity for the blueprints."""
from functools import wraps
from flask import session

from imagestore.errors import Unauthenticated

SESSION_KEY = "user_id"


def current_user_id():
    """Id of the logged-in user, or None."""
    return session.get(SESSION_KEY)


def login_user(user):
    session.clear()
    session[SESSION_KEY] = user.id


def logout_user():
    session.clear()


def login_required(view):
    """Reject the request before the view runs when nobody is logged in."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        if current_user_id() is None:
            raise Unauthenticated()
        return view(*args, **kwargs)

    return wrapped
