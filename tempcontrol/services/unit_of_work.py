# =====================================================
# tempcontrol/services/unit_of_work.py - Transaction Management
# =====================================================
from contextlib import contextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from tempcontrol.database.exceptions import handle_sqlalchemy_error
from .repository_factory import RepositoryFactory

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    Unit of Work pattern per transaction management.

    PATTERN: Gestisce transazioni e rollback automatico.
    I repository fanno solo flush, il commit avviene qui.

    Usage:
        with UnitOfWork(db).transaction() as uow:
            form = uow.repositories.forms.get_or_raise(form_id)
            form.complete()
    """

    def __init__(self, db: Session):
        self.db = db
        self.repositories = RepositoryFactory(db)

    def commit(self):
        """Commit transaction"""
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            handle_sqlalchemy_error(e, "commit", "Entity")

    def rollback(self):
        """Rollback transaction"""
        self.db.rollback()

    @contextmanager
    def transaction(self):
        """Context manager per transazioni automatiche"""
        try:
            yield self
            self.commit()
        except Exception:
            logger.debug("Rolling back unit of work")
            self.rollback()
            raise
