from flask import Blueprint

images_bp = Blueprint("images", __name__)

from imagestore.blueprints.images import views  # noqa: F401, E402
