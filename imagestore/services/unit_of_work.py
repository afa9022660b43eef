"""Record + blob mutations as one all-or-nothing operation."""
import logging
from imagestore.errors import TransactionAborted
from imagestore.extensions import db

logger = logging.getLogger(__name__)


def run_atomic(record_step, blob_step, undo_blob=None, after_commit=None):
    """Run a metadata mutation and a blob mutation as one unit of work.

    The record step runs first and is flushed, so the blob step only happens
    once the database has accepted the change. Any failure before commit
    rolls the session back. If the commit itself fails the blob step has
    already happened, so undo_blob(blob_result) compensates for it.
    after_commit(blob_result) runs only once the record change is durable.

    Returns:
        whatever blob_step returned

    Raises:
        TransactionAborted, chained to the underlying failure
    """
    try:
        record_step()
        db.session.flush()
        blob_result = blob_step()
    except Exception as exc:
        db.session.rollback()
        logger.exception("Unit of work failed before commit, rolled back")
        raise TransactionAborted() from exc

    try:
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        logger.exception("Commit failed, compensating blob change")
        if undo_blob is not None:
            try:
                undo_blob(blob_result)
            except Exception:
                logger.exception("Blob compensation failed, store needs check-storage")
        raise TransactionAborted() from exc

    if after_commit is not None:
        after_commit(blob_result)
    return blob_result
