from typing import Callable, Optional, Tuple, Type, TypeVar

from flask import current_app
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm.exc import StaleDataError

from wager import db
from .errors import TransactionAborted

T = TypeVar('T')

# A concurrent writer got there first: stale version token, or the database
# refused the lock / serialization.
RETRYABLE = (StaleDataError, OperationalError)

# Writers that insert a row under a natural key (a ledger entry, the game
# singleton) may also lose an insert race to a concurrent writer. Any other
# integrity failure is a bug and is raised straight away.
INSERT_RACE_RETRYABLE = RETRYABLE + (IntegrityError,)


def run_transaction(work: Callable[..., T], attempts: Optional[int] = None,
                    retry_on: Tuple[Type[Exception], ...] = RETRYABLE) -> T:
    """Run ``work(session)`` as one all-or-nothing unit of work.

    ``work`` must do all of its reads through the session it is given, since
    it is called again from scratch after a conflict. Nothing is committed
    unless ``work`` returns normally; any exception rolls the session back.
    Only exceptions in ``retry_on`` are retried.
    """
    limit = attempts or int(current_app.config.get('MAX_TRANSACTION_ATTEMPTS', 5))
    last_exc = None
    for attempt in range(1, limit + 1):
        try:
            result = work(db.session)
            db.session.commit()
            return result
        except retry_on as exc:
            db.session.rollback()
            last_exc = exc
            current_app.logger.info(
                f"[tx-conflict] attempt={attempt}/{limit} error={exc.__class__.__name__}"
            )
        except Exception:
            db.session.rollback()
            raise
    raise TransactionAborted(f'Gave up after {limit} conflicting attempts, try again') from last_exc
