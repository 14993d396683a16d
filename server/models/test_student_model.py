import pytest
from bson import ObjectId

from errors import StoreFailure
from models.student import cast_new_student, cast_student_changes, serialize_student


class TestCastNewStudent:
    def test_keeps_only_given_fields(self):
        assert cast_new_student({"email": "a@x.edu", "year": 1}) == {"email": "a@x.edu", "year": 1}

    def test_numbers_become_text(self):
        assert cast_new_student({"email": "a@x.edu", "fullName": 42})["fullName"] == "42"

    def test_null_is_kept(self):
        assert cast_new_student({"email": "a@x.edu", "semester": None}) == {"email": "a@x.edu", "semester": None}

    def test_fractional_year_is_rejected(self):
        with pytest.raises(StoreFailure, match="year"):
            cast_new_student({"email": "a@x.edu", "year": 2.5})

    def test_email_is_required(self):
        with pytest.raises(StoreFailure, match="Path `email` is required"):
            cast_new_student({"fullName": "Ann"})


class TestCastStudentChanges:
    def test_only_present_fields(self):
        assert cast_student_changes({"semester": "2", "extra": True}) == {"semester": 2}

    def test_empty_body(self):
        assert cast_student_changes({}) == {}

    def test_not_an_object(self):
        with pytest.raises(StoreFailure):
            cast_student_changes("year=3")


def test_serialize_student_stringifies_id():
    oid = ObjectId()

    assert serialize_student({"_id": oid, "email": "a@x.edu"}) == {"_id": str(oid), "email": "a@x.edu"}
    assert serialize_student(None) is None
