# tempcontrol/database/exceptions.py
"""
Custom exceptions per database e business rules.

Queste eccezioni forniscono error handling più specifico
e messaggi di errore più informativi rispetto alle eccezioni standard.
Vengono tradotte in risposte HTTP dagli exception handler in main.py.
"""
import functools
from typing import Iterable, List, Optional


class DatabaseError(Exception):
    """
    Base exception per errori database generici.

    Usata per errori di connessione, transazioni fallite,
    constraint violations non specifiche, etc.
    """
    pass


class EntityNotFoundError(DatabaseError):
    """
    Exception per entity non trovate.

    Examples:
        - form con ID non esistente
        - prodotto con codice sconosciuto
        - alert già eliminato
    """
    pass


class DuplicateEntityError(DatabaseError):
    """
    Exception per violazioni di unique constraints.

    Examples:
        - Email già esistente
        - Codice prodotto già in uso
        - Numero form duplicato
    """
    pass


class ValidationError(DatabaseError):
    """
    Exception per errori di validazione dati.

    Porta una lista di messaggi leggibili, uno per regola violata.
    """

    def __init__(self, message: str, errors: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors: List[str] = list(errors) if errors else [message]


class InvalidStateError(DatabaseError):
    """
    Exception per violazioni del ciclo di vita del form.

    Sollevata quando un'operazione non è ammessa nello stato corrente
    (es. modifica di un form Completed, revisione di un form Draft).
    """

    def __init__(self, operation: str, current_status: str):
        super().__init__(
            f"Operation '{operation}' is not allowed on a form in status {current_status}"
        )
        self.operation = operation
        self.current_status = current_status


class AuthenticationError(DatabaseError):
    """
    Exception per credenziali mancanti o non valide.

    Examples:
        - password errata
        - refresh token scaduto
        - utente disattivato
    """
    pass


class AuthorizationError(DatabaseError):
    """
    Exception per errori di autorizzazione.

    Examples:
        - Operazione non autorizzata per il ruolo
        - Modifica di un form creato da un altro operatore
    """
    pass


class ConcurrencyError(DatabaseError):
    """
    Exception per conflitti di concorrenza.

    Examples:
        - Optimistic locking failures (version del form cambiata)
        - Transaction conflicts
    """
    pass


# ==========================================
# UTILITY FUNCTIONS
# ==========================================

def handle_integrity_error(error, entity_name: str = "Entity"):
    """
    Converte IntegrityError SQLAlchemy in exception custom più specifiche.

    Raises:
        DuplicateEntityError: Per unique constraint violations
        ValidationError: Per check/foreign key constraint violations
        DatabaseError: Per altri integrity errors
    """
    error_msg = str(getattr(error, "orig", error)).lower()

    # Unique constraint violations
    if any(keyword in error_msg for keyword in ['unique', 'duplicate', 'already exists']):
        if 'email' in error_msg:
            raise DuplicateEntityError(f"{entity_name} with this email already exists")
        elif 'product_code' in error_msg:
            raise DuplicateEntityError(f"{entity_name} with this code already exists")
        elif 'form_number' in error_msg:
            raise DuplicateEntityError(f"{entity_name} with this number already exists")
        else:
            raise DuplicateEntityError(f"Duplicate {entity_name.lower()} found")

    # Foreign key violations
    elif any(keyword in error_msg for keyword in ['foreign key', 'referenced', 'does not exist']):
        raise ValidationError(f"Referenced {entity_name.lower()} does not exist")

    # Check constraint violations
    elif any(keyword in error_msg for keyword in ['check', 'constraint', 'violates']):
        raise ValidationError(f"Data validation failed for {entity_name.lower()}: {error_msg}")

    # Generic integrity error
    else:
        raise DatabaseError(f"Database integrity error for {entity_name.lower()}: {error_msg}")


def handle_sqlalchemy_error(error, operation: str = "operation", entity_name: str = "entity"):
    """
    Converte errori SQLAlchemy generici in exception custom.

    Raises:
        ConcurrencyError: Per StaleDataError (version_id mismatch)
        DatabaseError: Con messaggio appropriato
    """
    from sqlalchemy.exc import IntegrityError, SQLAlchemyError
    from sqlalchemy.orm.exc import StaleDataError

    if isinstance(error, IntegrityError):
        handle_integrity_error(error, entity_name)
    elif isinstance(error, StaleDataError):
        raise ConcurrencyError(
            f"{entity_name} was modified by another request during {operation}"
        ) from error
    elif isinstance(error, SQLAlchemyError):
        raise DatabaseError(f"Database error during {operation} {entity_name.lower()}: {str(error)}") from error
    else:
        raise error


# ==========================================
# DECORATORS
# ==========================================

def handle_database_errors(entity_name: str = "Entity"):
    """
    Decorator per automatic error handling nei repository methods.

    Usage:
        @handle_database_errors("Product")
        def add(self, product):
            # method implementation
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DatabaseError:
                # Re-raise custom exceptions as-is
                raise
            except Exception as e:
                operation = func.__name__.replace('_', ' ')
                handle_sqlalchemy_error(e, operation, entity_name)

        return wrapper
    return decorator
