import logging
from typing import List, Optional

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from . import models, schemas
from .auth import hash_password, verify_password
from .db import Base
from .errors import Conflict, InternalError, Unauthenticated, ValidationFailed
from .utils import clean_text, normalise_email

logger = logging.getLogger(__name__)


def create_tables(db: Session) -> None:
    try:
        Base.metadata.create_all(bind=db.connection(), checkfirst=True)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError("could not create tables") from e
    logger.info("Reviews schema verified/created")


def drop_reviews_table(db: Session) -> None:
    # PostgreSQL refuses to drop a table other tables reference unless told to cascade
    cascade = " CASCADE" if db.get_bind().dialect.name == "postgresql" else ""
    try:
        db.execute(text(f"DROP TABLE IF EXISTS reviews{cascade}"))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError("could not drop table") from e
    logger.warning("Reviews table dropped")


def _new_user(db: Session, user: schemas.UserCreate, is_admin: bool, missing_message: str) -> models.User:
    name = clean_text(user.name)
    email = normalise_email(user.email)
    if not name or not email or not user.password:
        raise ValidationFailed(missing_message)
    if len(name) > models.NAME_MAX or len(email) > models.EMAIL_MAX:
        raise ValidationFailed("field too long")

    db_user = models.User(name=name, email=email, password_hash=hash_password(user.password), is_admin=is_admin)
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Registration rejected, email already registered: %s", email)
        raise Conflict("email already registered") from e
    db.refresh(db_user)
    logger.info("User %s created (admin=%s)", db_user.id, is_admin)
    return db_user


def create_user(db: Session, user: schemas.UserCreate) -> models.User:
    return _new_user(db, user, is_admin=False, missing_message="missing fields")


def create_admin(db: Session, user: schemas.UserCreate) -> models.User:
    return _new_user(db, user, is_admin=True, missing_message="missing data")


def admin_exists(db: Session) -> bool:
    return db.scalar(select(models.User.id).where(models.User.is_admin.is_(True)).limit(1)) is not None


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.scalars(select(models.User).where(models.User.email == normalise_email(email))).first()


def authenticate(db: Session, email: Optional[str], password: Optional[str]) -> models.User:
    user = get_user_by_email(db, email) if email else None
    if not user:
        raise ValidationFailed("user not found")
    if not password or not verify_password(password, user.password_hash):
        logger.warning("Login failed for user %s: incorrect password", user.id)
        raise Unauthenticated("incorrect password")
    return user


def create_review(db: Session, user_id: int, review: schemas.ReviewCreate) -> models.Review:
    content = clean_text(review.content)
    if not content:
        raise ValidationFailed("content required")

    db_review = models.Review(user_id=user_id, content=content)
    db.add(db_review)
    try:
        db.commit()
    except IntegrityError as e:
        # The token outlived its user
        db.rollback()
        raise Unauthenticated("unknown user") from e
    db.refresh(db_review)
    return db_review


def list_reviews(db: Session, limit: Optional[int] = None, offset: int = 0) -> List[dict]:
    stmt = (
        select(
            models.Review.id,
            models.Review.content,
            models.Review.created_at,
            models.User.name.label("user_name"),
        )
        .join(models.User, models.Review.user_id == models.User.id)
        .order_by(models.Review.created_at.desc(), models.Review.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return [dict(row) for row in db.execute(stmt).mappings()]


def delete_review(db: Session, review_id: int) -> bool:
    review = db.get(models.Review, review_id)
    if not review:
        return False
    db.delete(review)
    db.commit()
    return True
