from flask import Blueprint

auth_bp = Blueprint("auth", __name__)

from imagestore.blueprints.auth import views  # noqa: F401, E402
