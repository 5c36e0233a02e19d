"""Dependency injection and shared lookups for FastAPI endpoints"""

from typing import Optional
from fastapi import Request
from sqlalchemy.orm import Session
from finance_tracker.domain.exceptions import CategoryMismatchError, EntityNotFoundError
from finance_tracker.domain.models import TransactionType
from finance_tracker.infrastructure.database.models import CategoryRecord, MemberRecord
from finance_tracker.infrastructure.database.repositories import CategoryRepository, MemberRepository


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def load_member(db: Session, member_id: str) -> MemberRecord:
    member = MemberRepository(db).get_member(member_id)
    if member is None:
        raise EntityNotFoundError("Member", member_id)
    return member


def load_category(db: Session, category_id: Optional[str], expected: TransactionType) -> Optional[CategoryRecord]:
    """Fetch a category and check it belongs to the expected side of the ledger"""
    if category_id is None:
        return None

    category = CategoryRepository(db).get_category(category_id)
    if category is None:
        raise EntityNotFoundError("Category", category_id)
    if category.type != expected.value:
        raise CategoryMismatchError(
            f"Category {category.name} is a {category.type} category, expected {expected.value}"
        )
    return category
