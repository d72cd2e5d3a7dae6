import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Header, Query
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from . import crud, schemas
from .auth import TokenClaims, create_access_token, require_admin, require_token
from .config import DEFAULT_SECRET, settings
from .db import database_time, dispose_engine, get_db
from .errors import register_error_handlers
from .logging_config import configure_logging

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.jwt_secret == DEFAULT_SECRET:
        logger.warning("JWT_SECRET is not set; tokens are signed with the development secret")
    logger.info("Reviews service starting")
    yield
    dispose_engine()


app = FastAPI(title="Reviews Service", lifespan=lifespan)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
register_error_handlers(app)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/test-db")
async def test_db(db: Session = Depends(get_db)):
    return {"now": database_time(db)}


# -------------------- Schema --------------------

@app.get("/create-tables", response_model=schemas.Message)
async def create_tables(db: Session = Depends(get_db)):
    crud.create_tables(db)
    return {"message": "tables created"}


@app.get("/drop-reviews", response_model=schemas.Message)
async def drop_reviews(db: Session = Depends(get_db), admin: TokenClaims = Depends(require_admin)):
    logger.warning("Admin %s is dropping the reviews table", admin.user_id)
    crud.drop_reviews_table(db)
    return {"message": "reviews table dropped"}


# -------------------- Accounts --------------------

@app.post("/register", response_model=schemas.UserRead, status_code=201)
async def register(user: schemas.UserCreate, db: Session = Depends(get_db)):
    return crud.create_user(db, user)


@app.post("/crear-admin", response_model=schemas.AdminRead, status_code=201)
async def create_admin(
    user: schemas.UserCreate,
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None),
):
    # Open only until the first admin exists; the header is ignored until then
    if crud.admin_exists(db):
        require_admin(require_token(authorization))
    return crud.create_admin(db, user)


@app.post("/login", response_model=schemas.LoginResponse)
async def login(payload: schemas.LoginRequest, db: Session = Depends(get_db)):
    user = crud.authenticate(db, payload.email, payload.password)
    token = create_access_token(user.id, user.is_admin)
    logger.info("Login successful for user %s", user.id)
    return {"token": token, "user": user}


# -------------------- Reviews --------------------

@app.post("/reviews", response_model=schemas.ReviewRead, status_code=201)
async def create_review(
    review: schemas.ReviewCreate,
    db: Session = Depends(get_db),
    claims: TokenClaims = Depends(require_token),
):
    return crud.create_review(db, claims.user_id, review)


@app.get("/reviews", response_model=List[schemas.ReviewListItem])
async def list_reviews(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return crud.list_reviews(db, limit=limit, offset=offset)


@app.delete("/reviews/{review_id}", response_model=schemas.Message)
async def delete_review(review_id: int, db: Session = Depends(get_db), admin: TokenClaims = Depends(require_admin)):
    if crud.delete_review(db, review_id):
        logger.info("Admin %s deleted review %s", admin.user_id, review_id)
    else:
        logger.info("Admin %s tried to delete missing review %s", admin.user_id, review_id)
    return {"message": "review deleted"}


def run():
    import uvicorn

    uvicorn.run("reviewhub.main:app", host="0.0.0.0", port=settings.port)
