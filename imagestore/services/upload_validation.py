import os
import re
from PIL import Image as PILImage

from imagestore.errors import ValidationFailed
from imagestore.models.image import Image


# MPO is Pillow's name for multi-picture JPEGs from cameras and phones
ALLOWED_FORMATS = {"JPEG", "MPO", "PNG", "GIF", "BMP", "WEBP"}
EXTENSION_PATTERN = re.compile(r"[A-Za-z0-9]{1,10}")


def client_extension(filename):
    """Extension from the client's declared filename, without the dot."""
    base = os.path.basename(filename or "")
    if "." not in base:
        return ""
    return base.rsplit(".", 1)[1]


def _is_image(stream):
    """Check the upload is a real image via Pillow, then rewind it."""
    try:
        img = PILImage.open(stream)
        img.verify()
        return img.format in ALLOWED_FORMATS
    except Exception:
        return False
    finally:
        stream.seek(0)


def validate_upload(name, file):
    """Validate raw upload fields.

    Returns:
        (name, file) with the name trimmed

    Raises:
        ValidationFailed with per-field messages; nothing has been stored
    """
    errors = {}

    name = (name or "").strip()
    if not name:
        errors.setdefault("name", []).append("The name field is required.")
    elif len(name) > Image.NAME_MAX_LENGTH:
        errors.setdefault("name", []).append(
            f"The name may not be greater than {Image.NAME_MAX_LENGTH} characters."
        )

    if file is None or not file.filename:
        errors.setdefault("image", []).append("The image field is required.")
    else:
        if not _is_image(file.stream):
            errors.setdefault("image", []).append("The image must be an image.")
        if not EXTENSION_PATTERN.fullmatch(client_extension(file.filename)):
            errors.setdefault("image", []).append(
                "The image must have a file extension."
            )

    if errors:
        raise ValidationFailed(errors)
    return name, file
