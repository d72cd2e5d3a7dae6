import pytest

from reviewhub.errors import (
    STATUS_BY_KIND,
    Conflict,
    ErrorKind,
    Forbidden,
    InternalError,
    NotFound,
    Unauthenticated,
    ValidationFailed,
)


@pytest.mark.parametrize(
    "error_cls, status",
    [
        (ValidationFailed, 400),
        (Unauthenticated, 401),
        (Forbidden, 403),
        (NotFound, 404),
        (Conflict, 409),
        (InternalError, 500),
    ],
)
def test_each_kind_maps_to_one_status(error_cls, status):
    err = error_cls("boom")
    assert err.status_code == status
    assert err.message == "boom"


def test_every_kind_has_a_status():
    assert set(STATUS_BY_KIND) == set(ErrorKind)


def test_unauthenticated_response_advertises_bearer(client):
    r = client.post("/reviews", json={"content": "x"})
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"
