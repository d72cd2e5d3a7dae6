from sqlalchemy import inspect


def test_create_tables_is_idempotent(bare_client):
    assert bare_client.get("/reviews").status_code == 500
    for _ in range(2):
        r = bare_client.get("/create-tables")
        assert r.status_code == 200
        assert r.json()["message"] == "tables created"
    assert bare_client.get("/reviews").json() == []


def test_create_tables_declares_all_review_tables(bare_client):
    from reviewhub.main import app
    from reviewhub.db import get_db

    bare_client.get("/create-tables")
    session = next(app.dependency_overrides[get_db]())
    tables = set(inspect(session.get_bind()).get_table_names())
    assert {"users", "reviews", "ratings"} <= tables


def test_comments_init_is_idempotent(bare_comments_client):
    for _ in range(2):
        assert bare_comments_client.get("/init").status_code == 200
    r = bare_comments_client.post("/comments", json={"name": "Ana", "email": "ana@example.com", "content": "hola"})
    assert r.status_code == 200
    assert bare_comments_client.get("/comments").json()[0]["content"] == "hola"


def test_both_services_share_one_store():
    from conftest import client_for, make_session
    from reviewhub.comments_main import app as comments_app
    from reviewhub.main import app as reviews_app

    db = make_session()
    try:
        with client_for(reviews_app, db) as reviews, client_for(comments_app, db) as comments:
            assert reviews.get("/create-tables").status_code == 200
            assert comments.get("/init").status_code == 200

            r = comments.post("/comments", json={"name": "Ana", "email": "ana@example.com", "content": "hola"})
            assert r.status_code == 200
            r = reviews.post("/register", json={"name": "Ana", "email": "ana@example.com", "password": "pw"})
            assert r.status_code == 201

            tables = set(inspect(db.get_bind()).get_table_names())
            assert {"users", "reviews", "ratings", "commenters", "comments"} <= tables
    finally:
        reviews_app.dependency_overrides.clear()
        comments_app.dependency_overrides.clear()
        db.close()
