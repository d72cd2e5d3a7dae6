import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import schemas
from .db import CommentsBase
from .errors import InternalError, NotFound, ValidationFailed
from .models import EMAIL_MAX, NAME_MAX, STATUS_MAX, Comment, Commenter
from .utils import clean_text, normalise_email

logger = logging.getLogger(__name__)

# Dialects with a native INSERT ... ON CONFLICT DO NOTHING
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def init_schema(db: Session) -> None:
    try:
        CommentsBase.metadata.create_all(bind=db.connection(), checkfirst=True)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError("could not create tables") from e
    logger.info("Comments schema verified/created")


def _commenter_id(db: Session, email: str) -> Optional[int]:
    return db.scalar(select(Commenter.id).where(Commenter.email == email))


def upsert_commenter(db: Session, name: str, email: str) -> int:
    """Return the id of the commenter with ``email``, creating it if absent.

    Runs inside the caller's transaction and does not commit. An existing
    commenter keeps the name it was first created with. Only PostgreSQL and
    SQLite are supported.
    """
    dialect_insert = _UPSERT_INSERTS[db.get_bind().dialect.name]
    stmt = dialect_insert(Commenter).values(name=name, email=email).on_conflict_do_nothing(index_elements=["email"])
    db.execute(stmt)
    return _commenter_id(db, email)


def create_comment(db: Session, comment: schemas.CommentCreate) -> Comment:
    name = clean_text(comment.name)
    email = normalise_email(comment.email)
    content = clean_text(comment.content)
    if not name or not email or not content:
        raise ValidationFailed("missing fields")
    if len(name) > NAME_MAX or len(email) > EMAIL_MAX:
        raise ValidationFailed("field too long")

    try:
        user_id = upsert_commenter(db, name, email)
        db_comment = Comment(user_id=user_id, content=content)
        db.add(db_comment)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError("could not save comment") from e
    db.refresh(db_comment)
    return db_comment


def list_comments(db: Session, limit: Optional[int] = None, offset: int = 0) -> List[dict]:
    stmt = (
        select(
            Comment.id,
            Comment.content,
            Comment.status,
            Comment.created_at,
            Commenter.name.label("user_name"),
            Commenter.email.label("user_email"),
        )
        .join(Commenter, Comment.user_id == Commenter.id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return [dict(row) for row in db.execute(stmt).mappings()]


def update_status(db: Session, comment_id: int, update: schemas.CommentStatusUpdate) -> Comment:
    # No fixed vocabulary: any non-empty status is stored
    status = clean_text(update.status)
    if not status:
        raise ValidationFailed("status required")
    if len(status) > STATUS_MAX:
        raise ValidationFailed("status too long")

    comment = db.get(Comment, comment_id)
    if not comment:
        raise NotFound("comment not found")
    comment.status = status
    db.commit()
    db.refresh(comment)
    logger.info("Comment %s moved to status %r", comment_id, status)
    return comment
