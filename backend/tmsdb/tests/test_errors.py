from __future__ import annotations

import json

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError

from tmsdb import errors


class _SessionStub:
    def __init__(self):
        self.rolled_back = False

    def rollback(self):
        self.rolled_back = True


def test_server_errors_lets_http_exceptions_through():
    db = _SessionStub()

    with pytest.raises(HTTPException) as exc:
        with errors.server_errors("should not be used", db):
            raise HTTPException(status_code=404, detail="Participant not found")

    assert exc.value.status_code == 404
    assert exc.value.detail == "Participant not found"
    assert db.rolled_back is False


def test_server_errors_turns_failures_into_500_and_rolls_back(caplog):
    db = _SessionStub()

    with pytest.raises(HTTPException) as exc:
        with errors.server_errors("An error occurred while creating the training", db, training_id=7):
            raise RuntimeError("connection reset")

    assert exc.value.status_code == 500
    assert exc.value.detail == "An error occurred while creating the training"
    assert db.rolled_back is True
    assert "An error occurred while creating the training" in caplog.text


def test_integrity_errors_map_to_requested_status():
    db = _SessionStub()

    with pytest.raises(HTTPException) as exc:
        with errors.integrity_errors(db, "A participant with this ID number already exists", 409):
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    assert exc.value.status_code == 409
    assert db.rolled_back is True


def test_http_handler_wraps_string_detail_as_message():
    response = errors._http_exception_handler(None, HTTPException(status_code=400, detail="Sponsor not found"))

    assert response.status_code == 400
    assert json.loads(response.body) == {"message": "Sponsor not found"}


def test_http_handler_keeps_structured_detail():
    detail = {"success": False, "message": "Invalid email or password"}
    response = errors._http_exception_handler(None, HTTPException(status_code=401, detail=detail))

    assert json.loads(response.body) == detail
