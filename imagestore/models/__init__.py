from imagestore.models.user import User
from imagestore.models.image import Image

__all__ = ["User", "Image"]
