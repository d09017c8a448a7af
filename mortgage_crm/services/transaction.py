"""Transaction helper for multi-step writes.

Most service functions flush but do NOT commit — the caller commits.
The three writes that must be all-or-nothing (cascading lead delete,
checklist instantiation, template item replacement) run inside atomic()
instead, which commits on success and rolls the whole session back on
any error.
"""

import logging
from contextlib import contextmanager

from mortgage_crm.errors import CRMError, TransactionFailure
from mortgage_crm.extensions import db

logger = logging.getLogger(__name__)


@contextmanager
def atomic(operation):
    """Run the block as one unit of work.

    Domain errors (validation, not found...) are re-raised untouched after
    the rollback; anything else becomes a TransactionFailure.
    """
    try:
        yield db.session
        db.session.commit()
    except CRMError:
        db.session.rollback()
        raise
    except Exception as e:
        db.session.rollback()
        logger.exception(f"Rolled back {operation}: {e}")
        raise TransactionFailure(f"Failed to {operation}.") from e
