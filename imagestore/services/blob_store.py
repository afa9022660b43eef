"""Private on-disk blob area for image bytes.

Every mutation goes through a temp file or a rename in the same directory so
a reader never sees a half-written blob.
"""
import logging
import os
import shutil
import tempfile
import uuid
from flask import current_app

logger = logging.getLogger(__name__)

TOMBSTONE_PREFIX = ".deleting-"


def _base_dir():
    return os.path.join(current_app.config["BLOB_ROOT"], "images")


def path_for(storage_key):
    """Absolute path of a blob. Rejects keys that are not a plain file name."""
    if (
        not storage_key
        or os.path.basename(storage_key) != storage_key
        or storage_key in (".", "..")
        or storage_key.startswith(TOMBSTONE_PREFIX)
    ):
        raise ValueError(f"Invalid storage key: {storage_key!r}")
    return os.path.join(_base_dir(), storage_key)


def exists(storage_key):
    return os.path.isfile(path_for(storage_key))


def write(storage_key, stream):
    """Copy a binary stream into the blob area under storage_key.

    Refuses to overwrite an existing blob.
    """
    target = path_for(storage_key)
    if os.path.exists(target):
        raise FileExistsError(f"Blob already exists: {storage_key}")

    directory = os.path.dirname(target)
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".upload-")
    try:
        with os.fdopen(fd, "wb") as tmp:
            shutil.copyfileobj(stream, tmp)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_path, target)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
    logger.debug("Wrote blob %s", storage_key)


def read_stream(storage_key):
    """Open a blob for streaming. Caller closes the returned file."""
    return open(path_for(storage_key), "rb")


def delete(storage_key):
    """Delete a blob immediately."""
    os.unlink(path_for(storage_key))


def stash(storage_key):
    """Move a blob aside so its deletion can still be undone.

    Returns the tombstone path to hand to restore() or purge().
    """
    source = path_for(storage_key)
    tombstone = os.path.join(
        os.path.dirname(source), f"{TOMBSTONE_PREFIX}{uuid.uuid4().hex}-{storage_key}"
    )
    os.rename(source, tombstone)
    return tombstone


def is_stashed(storage_key):
    """True while a delete holds this blob as a tombstone."""
    base = os.path.dirname(path_for(storage_key))
    suffix = f"-{storage_key}"
    if not os.path.isdir(base):
        return False
    return any(
        name.startswith(TOMBSTONE_PREFIX) and name.endswith(suffix)
        for name in os.listdir(base)
    )


def restore(storage_key, tombstone):
    os.replace(tombstone, path_for(storage_key))
    logger.info("Restored blob %s", storage_key)


def purge(tombstone):
    os.unlink(tombstone)


def list_keys():
    """All stored blob names, including leftover tombstones and temp files."""
    base = _base_dir()
    if not os.path.isdir(base):
        return []
    return sorted(
        name for name in os.listdir(base) if os.path.isfile(os.path.join(base, name))
    )


def total_size():
    base = _base_dir()
    return sum(os.path.getsize(os.path.join(base, name)) for name in list_keys())
