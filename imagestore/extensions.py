import logging
import os
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

logger = logging.getLogger(__name__)

db = SQLAlchemy()
migrate = Migrate()


def init_blob_root(app):
    """Make sure the private blob directory exists before serving requests."""
    images_dir = os.path.join(app.config["BLOB_ROOT"], "images")
    os.makedirs(images_dir, exist_ok=True)
    logger.debug("Blob root ready at %s", images_dir)
