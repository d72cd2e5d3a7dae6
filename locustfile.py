"""Load profiles for both services.

  locust -f locustfile.py ReviewsUser --host http://localhost:3000
  locust -f locustfile.py CommentsUser --host http://localhost:3001
"""
import random

from locust import HttpUser, between, task


class ReviewsUser(HttpUser):
    wait_time = between(0.1, 0.5)

    def on_start(self):
        # Register and log in a user for this simulated client
        n = random.randint(1, 1_000_000)
        email = f"load_{n}@example.com"
        self.client.post("/register", json={"name": f"user_{n}", "email": email, "password": "loadtest"})
        r = self.client.post("/login", json={"email": email, "password": "loadtest"})
        self.token = r.json().get("token") if r.status_code == 200 else None

    @task(3)
    def post_review(self):
        if not self.token:
            return
        self.client.post(
            "/reviews",
            json={"content": f"review {random.random():.6f}"},
            headers={"Authorization": f"Bearer {self.token}"},
        )

    @task(1)
    def list_reviews(self):
        self.client.get("/reviews", params={"limit": 50})


class CommentsUser(HttpUser):
    wait_time = between(0.1, 0.5)

    @task(3)
    def post_comment(self):
        # A small email pool keeps the commenter upsert under contention
        n = random.randint(1, 20)
        self.client.post(
            "/comments",
            json={"name": f"commenter {n}", "email": f"c{n}@example.com", "content": "load comment"},
        )

    @task(1)
    def list_comments(self):
        self.client.get("/comments", params={"limit": 50})
