"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidSplitError(DomainException):
    """Debt total, installment count or frequency cannot form a plan"""

    pass


class InvalidRecurrenceError(DomainException):
    """Recurring template cannot be expanded"""

    pass


class CategoryMismatchError(DomainException):
    """Category type does not match the record it is attached to"""

    pass


class EntityNotFoundError(DomainException):
    """Referenced member, category, transaction, debt or installment does not exist"""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id
