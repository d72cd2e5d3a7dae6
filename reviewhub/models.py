from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, false, func
from sqlalchemy.orm import relationship

from .db import Base, CommentsBase

NAME_MAX = 100
EMAIL_MAX = 100
STATUS_MAX = 50

# -------------------- Reviews service --------------------

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(NAME_MAX), nullable=False)
    email = Column(String(EMAIL_MAX), nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())

    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    user = relationship("User", back_populates="reviews")


class Rating(Base):
    """Declared in the schema; no route reads or writes it yet."""
    __tablename__ = "ratings"
    __table_args__ = (CheckConstraint("score BETWEEN 1 AND 5", name="ck_ratings_score"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    review_id = Column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False)
    score = Column(Integer)


# -------------------- Comments service --------------------

DEFAULT_COMMENT_STATUS = "pendiente"


class Commenter(CommentsBase):
    __tablename__ = "commenters"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(NAME_MAX), nullable=False)
    email = Column(String(EMAIL_MAX), nullable=False, unique=True, index=True)

    comments = relationship("Comment", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)


class Comment(CommentsBase):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("commenters.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    status = Column(String(STATUS_MAX), nullable=False, default=DEFAULT_COMMENT_STATUS, server_default=DEFAULT_COMMENT_STATUS)
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    user = relationship("Commenter", back_populates="comments")
