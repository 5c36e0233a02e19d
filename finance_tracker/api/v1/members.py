"""Family member profiles and categories"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import CategoryResponse, MemberCreate, MemberResponse
from finance_tracker.domain.models import TransactionType
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.repositories import CategoryRepository, MemberRepository

router = APIRouter()


def _member_response(member) -> MemberResponse:
    return MemberResponse(member_id=member.id, name=member.name, email=member.email)


@router.post("/members", response_model=MemberResponse, status_code=201)
def create_member(request_body: MemberCreate, db: Session = Depends(get_db)):
    """Create a family member profile (email must be unique)"""
    member_repo = MemberRepository(db)
    if member_repo.get_member_by_email(request_body.email) is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    member = member_repo.create_member(request_body.name, request_body.email)
    db.commit()
    return _member_response(member)


@router.get("/members", response_model=List[MemberResponse])
def list_members(db: Session = Depends(get_db)):
    return [_member_response(m) for m in MemberRepository(db).list_members()]


@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(
    type: Optional[TransactionType] = Query(None, description="REVENUE or EXPENSE"),
    db: Session = Depends(get_db),
):
    return [
        CategoryResponse(category_id=c.id, name=c.name, type=c.type)
        for c in CategoryRepository(db).list_categories(type)
    ]
