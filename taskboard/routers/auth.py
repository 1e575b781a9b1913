import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskboard.database import get_db
from taskboard.errors import FieldValidationError
from taskboard.models.user import User
from taskboard.schemas.user import AuthOut, UserCreate, UserLogin, UserOut
from taskboard.utils.auth import create_user_token, get_current_user, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

EMAIL_TAKEN = "The email has already been taken."


def _email_taken(db: Session, email: str) -> bool:
    return db.query(User).filter(User.email == email).first() is not None


@router.post("/register", response_model=AuthOut, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, db: Session = Depends(get_db)):
    email = user.email.lower()
    if _email_taken(db, email):
        raise FieldValidationError("email", EMAIL_TAKEN)

    try:
        hashed = hash_password(user.password)
    except ValueError as e:
        raise FieldValidationError("password", str(e))

    new_user = User(name=user.name, email=email, password=hashed)
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent registration won the unique index on email
        db.rollback()
        raise FieldValidationError("email", EMAIL_TAKEN)
    db.refresh(new_user)
    logger.info("Registered user %s", new_user.id)
    return {"user": new_user, "token": create_user_token(new_user)}


@router.post("/login", response_model=AuthOut)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    db_user = db.query(User).filter(User.email == credentials.email.lower()).first()
    if not db_user or not verify_password(credentials.password, db_user.password):
        logger.warning("Failed login for %s", credentials.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    logger.info("User %s logged in", db_user.id)
    return {"user": db_user, "token": create_user_token(db_user)}


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    # tokens are stateless; the client drops its copy
    logger.info("User %s logged out", current_user.id)
    return {"message": "Logged out"}


@router.get("/user", response_model=UserOut)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user
