"""Core image operations: upload, list, show and delete.

Every function takes the caller's user id explicitly. Upload and delete keep
the metadata record and the blob in step through run_atomic().
"""
import logging
import mimetypes
import uuid
from PIL import Image as PILImage

from imagestore.errors import Forbidden, NotFound, StorageInconsistency
from imagestore.extensions import db
from imagestore.models.image import Image
from imagestore.services import blob_store
from imagestore.services.unit_of_work import run_atomic
from imagestore.services.upload_validation import client_extension

logger = logging.getLogger(__name__)


def upload_image(owner_id, name, file):
    """Create one Image record and its blob, or neither.

    `name` and `file` must already have passed validate_upload().
    """
    image = Image(
        id=str(uuid.uuid4()),
        user_id=owner_id,
        name=name,
        extension=client_extension(file.filename),
    )

    run_atomic(
        record_step=lambda: db.session.add(image),
        blob_step=lambda: blob_store.write(image.blob_key, file.stream),
        undo_blob=lambda _: blob_store.delete(image.blob_key),
    )
    logger.info("User %s uploaded image %s", owner_id, image.id)
    return image


def list_images(owner_id):
    """All images owned by owner_id. Order is the store's natural order."""
    return Image.query.filter_by(user_id=owner_id).all()


def get_owned_image(owner_id, image_id):
    """Fetch an image for reading. Other users' images look missing."""
    image = db.session.get(Image, image_id)
    if not image or image.user_id != owner_id:
        raise NotFound()
    return image


def detect_mimetype(stream, storage_key):
    """Content type from the bytes themselves, falling back to the name."""
    try:
        fmt = PILImage.open(stream).format
    except Exception:
        fmt = None
    finally:
        stream.seek(0)

    if fmt == "MPO":
        return "image/jpeg"
    if fmt and fmt in PILImage.MIME:
        return PILImage.MIME[fmt]
    guessed, _ = mimetypes.guess_type(storage_key)
    return guessed or "application/octet-stream"


def open_image(owner_id, image_id):
    """Open an owned image's bytes for streaming.

    Returns:
        (image, stream, mimetype); the caller closes the stream
    """
    image = get_owned_image(owner_id, image_id)
    try:
        stream = blob_store.read_stream(image.blob_key)
    except FileNotFoundError:
        _raise_for_missing_blob(image)
    return image, stream, detect_mimetype(stream, image.blob_key)


def _raise_for_missing_blob(image):
    """Tell a delete in flight apart from a genuinely lost blob."""
    blob_key, image_id = image.blob_key, image.id
    db.session.expire(image)
    still_there = Image.query.filter_by(id=image_id).count() > 0
    if not still_there or blob_store.is_stashed(blob_key):
        raise NotFound()
    logger.error("Blob %s missing for existing record", blob_key)
    raise StorageInconsistency()


def delete_image(owner_id, image_id):
    """Delete an owned image record and its blob, or neither."""
    image = db.session.get(Image, image_id)
    if not image:
        raise NotFound()
    if image.user_id != owner_id:
        raise Forbidden()

    blob_key = image.blob_key
    run_atomic(
        record_step=lambda: db.session.delete(image),
        blob_step=lambda: blob_store.stash(blob_key),
        undo_blob=lambda tombstone: blob_store.restore(blob_key, tombstone),
        after_commit=lambda tombstone: _purge(blob_key, tombstone),
    )
    logger.info("User %s deleted image %s", owner_id, image_id)


def _purge(blob_key, tombstone):
    try:
        blob_store.purge(tombstone)
    except OSError:
        # Record is gone already; check-storage reports the leftover file.
        logger.exception("Could not purge tombstone for %s", blob_key)


def get_stats():
    """Image counts per owner email for the stats command."""
    from imagestore.models.user import User

    rows = (
        db.session.query(User.email, db.func.count(Image.id))
        .join(Image, Image.user_id == User.id)
        .group_by(User.email)
        .all()
    )
    return dict(rows)


def find_inconsistencies():
    """Compare records against blobs without changing either.

    Returns:
        (records missing their blob, blob files with no record)
    """
    keys = set(blob_store.list_keys())
    expected = {image.blob_key: image.id for image in Image.query.all()}
    missing_blobs = sorted(image_id for key, image_id in expected.items() if key not in keys)
    orphan_blobs = sorted(keys - set(expected))
    return missing_blobs, orphan_blobs
