# =====================================================
# tempcontrol/repositories/base.py - Generic CRUD Repository
# =====================================================
from typing import Generic, Type, List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import func, select, Select
import math
import uuid

from tempcontrol.models.base import BaseModel, ModelType
from tempcontrol.database.exceptions import EntityNotFoundError, handle_database_errors

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def not_deleted(model: Type[BaseModel]):
    """Predicato soft-delete da applicare a ogni lettura"""
    return model.is_deleted.is_(False)


def normalize_paging(page: int, page_size: int) -> Tuple[int, int]:
    """page >= 1, page_size in 1..100"""
    page = max(1, page or 1)
    page_size = min(max(1, page_size or DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE)
    return page, page_size


def total_pages(total_count: int, page_size: int) -> int:
    return math.ceil(total_count / page_size) if page_size else 0


class BaseRepository(Generic[ModelType]):
    """
    Base repository con CRUD operations generiche.

    PATTERN: Repository centralizza data access logic
    - Evita query duplicate nel codebase
    - Single source of truth per data operations
    - Facilita testing e mocking

    I metodi fanno solo flush: commit e rollback sono del UnitOfWork.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db

    def query(self, include_deleted: bool = False) -> Select:
        """Select base sul model, senza righe soft-deleted salvo richiesta"""
        stmt = select(self.model)
        if not include_deleted:
            stmt = stmt.where(not_deleted(self.model))
        return stmt

    # ==========================================
    # BASIC CRUD OPERATIONS
    # ==========================================

    def add(self, db_obj: ModelType) -> ModelType:
        """Persiste una nuova entity"""
        self.db.add(db_obj)
        self._flush()
        return db_obj

    def get_by_id(self, id: uuid.UUID, include_deleted: bool = False) -> Optional[ModelType]:
        """Get record by ID"""
        stmt = self.query(include_deleted).where(self.model.id == id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_or_raise(self, id: uuid.UUID) -> ModelType:
        db_obj = self.get_by_id(id)
        if db_obj is None:
            raise EntityNotFoundError(f"{self.model.__name__} with id {id} not found")
        return db_obj

    def count(self) -> int:
        """Count non-deleted records"""
        stmt = select(func.count()).select_from(self.model).where(not_deleted(self.model))
        return self.db.execute(stmt).scalar_one()

    def exists(self, id: uuid.UUID) -> bool:
        """Check if record exists"""
        return self.get_by_id(id) is not None

    def paginate(self, stmt: Select, page: int, page_size: int) -> Tuple[List[ModelType], int]:
        """Esegue una select paginata, ritorna (items, total_count)"""
        page, page_size = normalize_paging(page, page_size)
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total_count = self.db.execute(count_stmt).scalar_one()
        items = self.db.execute(
            stmt.offset((page - 1) * page_size).limit(page_size)
        ).scalars().all()
        return list(items), total_count

    def update(self, db_obj: ModelType) -> ModelType:
        """Flush delle modifiche fatte sull'entity"""
        self._flush()
        return db_obj

    def soft_delete(self, db_obj: ModelType) -> None:
        db_obj.soft_delete()
        self._flush()

    def hard_delete(self, db_obj: ModelType) -> None:
        self.db.delete(db_obj)
        self._flush()

    def _flush(self) -> None:
        flush = handle_database_errors(self.model.__name__)(self.db.flush)
        flush()
