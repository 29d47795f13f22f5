# app/routers/users.py
"""Staff directory: manage users and list faculty for the visitor entry form."""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.user import User
from app.schemas.user import UserCreate, UserOut, UserUpdate
from app.services.user_service import delete_user, email_taken, get_user, list_faculty, update_user

router = APIRouter()


@router.post("/users", response_model=UserOut, status_code=201, summary="Create a staff user")
def create_user(body: UserCreate, db: Session = Depends(get_db)):
    if email_taken(db, body.email):
        raise HTTPException(status_code=400, detail=f"User already exists with email {body.email}")
    user = User(
        name=body.name,
        email=body.email,
        role=body.role,
        department=body.department if body.role == "faculty" else None,
        created_at=datetime.utcnow(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.get("/users", response_model=list[UserOut], summary="List staff users")
def list_users(role: Optional[str] = None, db: Session = Depends(get_db)):
    q = db.query(User)
    if role:
        q = q.filter(User.role == role)
    return q.order_by(User.name).all()


@router.get("/users/{user_id}", response_model=UserOut, summary="Get a staff user")
def get_user_by_id(user_id: int, db: Session = Depends(get_db)):
    user = get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.put("/users/{user_id}", response_model=UserOut, summary="Update a staff user")
def update_user_by_id(user_id: int, body: UserUpdate, db: Session = Depends(get_db)):
    user = get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if body.email and email_taken(db, body.email, exclude_id=user_id):
        raise HTTPException(status_code=400, detail=f"User already exists with email {body.email}")
    return update_user(db, user, body.model_dump(exclude_unset=True))


@router.delete("/users/{user_id}", summary="Delete a staff user")
def delete_user_by_id(user_id: int, db: Session = Depends(get_db)):
    """Refused with 409 USER_IN_USE while entry records still point at the user."""
    user = get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    delete_user(db, user)
    return {"status": "deleted", "id": user_id}


@router.get("/faculty", response_model=list[UserOut], summary="List faculty members")
def get_faculty_members(db: Session = Depends(get_db)):
    return list_faculty(db)


@router.get("/faculty/department/{department}", response_model=list[UserOut],
            summary="List faculty members of a department")
def get_faculty_by_department(department: str, db: Session = Depends(get_db)):
    return list_faculty(db, department)
