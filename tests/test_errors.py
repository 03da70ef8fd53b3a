"""
Tests for the error envelope: exception classes and the handlers wired into the app.
"""
from reclaim.core.errors import (
    CompletionNotFoundError,
    DuplicateCompletionError,
    HabitNotFoundError,
    HabitOwnershipError,
    InvalidDateRangeError,
    MissingUserError,
    ReclaimException,
)


class TestExceptionClasses:
    def test_status_and_code(self):
        cases = [
            (HabitNotFoundError("h1"), 404, "HABIT_NOT_FOUND"),
            (HabitOwnershipError("h1"), 403, "HABIT_FORBIDDEN"),
            (DuplicateCompletionError("h1", "2024-01-01"), 409, "DUPLICATE_COMPLETION"),
            (CompletionNotFoundError("h1", "2024-01-01"), 404, "COMPLETION_NOT_FOUND"),
            (MissingUserError(), 401, "USER_REQUIRED"),
        ]
        for exc, http_status, code in cases:
            assert isinstance(exc, ReclaimException)
            assert exc.http_status == http_status
            assert exc.code == code

    def test_to_dict_shape(self):
        body = DuplicateCompletionError("h1", "2024-01-01").to_dict()
        assert set(body) == {"code", "message", "details"}
        assert body["details"]["habit_id"] == "h1"
        assert body["details"]["date"] == "2024-01-01"


class TestEnvelope:
    def test_missing_user_header(self, client):
        r = client.get("/habits")
        assert r.status_code == 401
        assert r.json()["code"] == "USER_REQUIRED"

    def test_blank_user_header(self, client):
        r = client.get("/habits", headers={"X-User-Id": "   "})
        assert r.status_code == 401

    def test_blank_name_is_validation_error(self, client, headers):
        r = client.post("/habits", json={"name": "   "}, headers=headers)
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"]

    def test_unknown_habit(self, client, headers):
        r = client.get("/habits/does-not-exist/streak", headers=headers)
        assert r.status_code == 404
        assert r.json()["code"] == "HABIT_NOT_FOUND"

    def test_bad_date_in_body(self, client, headers):
        habit = client.post("/habits", json={"name": "Walk"}, headers=headers).json()
        r = client.post(
            f"/habits/{habit['id']}/complete", json={"date": "not-a-date"}, headers=headers
        )
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_range_too_large(self, client, headers):
        r = client.get(
            "/analytics/mood/trends",
            params={"start_date": "1990-01-01", "end_date": "2024-01-01"},
            headers=headers,
        )
        assert r.status_code == 422
        assert r.json()["code"] == "INVALID_DATE_RANGE"

    def test_month_out_of_bounds(self, client, headers):
        r = client.get("/analytics/habits/calendar?month=13&year=2024", headers=headers)
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"


class TestOpenApiEnvelope:
    def test_error_model_documented(self, client):
        doc = client.get("/openapi.json").json()
        assert "ErrorResponse" in doc["components"]["schemas"]
        complete = doc["paths"]["/habits/{habit_id}/complete"]["post"]["responses"]
        for code in ("401", "403", "404", "409"):
            ref = complete[code]["content"]["application/json"]["schema"]["$ref"]
            assert ref.endswith("/ErrorResponse")

    def test_validation_errors_list_fields(self, client, headers):
        r = client.post("/habits", json={}, headers=headers)
        errors = r.json()["details"]["errors"]
        assert errors[0]["field"] == "name"
        assert set(errors[0]) == {"field", "message", "type"}
