# =====================================================
# tempcontrol/services/repository_factory.py - Dependency Injection Helper
# =====================================================
from sqlalchemy.orm import Session

from ..repositories import UserRepository
from ..repositories import ProductRepository
from ..repositories import FormRepository
from ..repositories import RecordRepository
from ..repositories import AlertRepository
from ..repositories import AuditLogRepository


class RepositoryFactory:
    """
    Factory per creare repository con dependency injection.

    PATTERN: Centralizza creazione repository per easy testing e DI
    """

    def __init__(self, db: Session):
        self.db = db

    @property
    def users(self) -> UserRepository:
        return UserRepository(self.db)

    @property
    def products(self) -> ProductRepository:
        return ProductRepository(self.db)

    @property
    def forms(self) -> FormRepository:
        return FormRepository(self.db)

    @property
    def records(self) -> RecordRepository:
        return RecordRepository(self.db)

    @property
    def alerts(self) -> AlertRepository:
        return AlertRepository(self.db)

    @property
    def audit_logs(self) -> AuditLogRepository:
        return AuditLogRepository(self.db)
