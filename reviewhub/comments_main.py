"""Comments service: anonymous comments keyed by email, with moderation status."""
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from . import comments_crud, schemas
from .config import settings
from .db import database_time, dispose_engine, get_db
from .errors import register_error_handlers
from .logging_config import configure_logging

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Comments service starting")
    yield
    dispose_engine()


app = FastAPI(title="Comments Service", lifespan=lifespan)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
register_error_handlers(app)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/test-db")
async def test_db(db: Session = Depends(get_db)):
    return {"now": database_time(db)}


@app.get("/init", response_model=schemas.Message)
async def init(db: Session = Depends(get_db)):
    comments_crud.init_schema(db)
    return {"message": "tables created"}


@app.post("/comments", response_model=schemas.CommentRead)
async def post_comment(comment: schemas.CommentCreate, db: Session = Depends(get_db)):
    return comments_crud.create_comment(db, comment)


@app.get("/comments", response_model=List[schemas.CommentListItem])
async def get_comments(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return comments_crud.list_comments(db, limit=limit, offset=offset)


@app.patch("/comments/{comment_id}", response_model=schemas.CommentRead)
async def moderate_comment(comment_id: int, update: schemas.CommentStatusUpdate, db: Session = Depends(get_db)):
    return comments_crud.update_status(db, comment_id, update)


def run():
    import uvicorn

    uvicorn.run("reviewhub.comments_main:app", host="0.0.0.0", port=settings.port)
