from __future__ import annotations

import datetime as dt

import pytest
from pydantic import ValidationError

from fieldpilot_desktop.errors import ApiError, field_errors
from fieldpilot_desktop.schemas import (
    CreateEquipmentRequest,
    CreateLocationRequest,
    CreateTaskRequest,
    EquipmentRequest,
    InviteMemberRequest,
    RegisterRequest,
    TaskRequest,
)
from fieldpilot_desktop.validation import (
    error_message,
    field_error,
    map_api_errors_to_fields,
    password_strength,
    validate_email,
    validate_otp,
    validate_password,
    validate_password_confirm,
    validate_phone,
    validate_required,
    validate_zip_code,
)


@pytest.mark.parametrize(
    "password, expected",
    [
        ("", "Password is required"),
        ("Ab1", "Password must be at least 8 characters"),
        ("abcdefg1", "Password must contain at least one uppercase letter"),
        ("ABCDEFG1", "Password must contain at least one lowercase letter"),
        ("Abcdefgh", "Password must contain at least one number"),
        ("Abcdefg1", None),
    ],
)
def test_validate_password(password, expected):
    assert validate_password(password) == expected


def test_simple_validators():
    assert validate_required("  ", "Company name") == "Company name is required"
    assert validate_email("ops@acme") == "Please enter a valid email address"
    assert validate_email("ops@acme.test") is None
    assert validate_password_confirm("Secret123", "Secret124") == "Passwords do not match"
    assert validate_otp("12a456") == "Verification code must be 6 digits"
    assert validate_otp("123456") is None


def test_phone_is_optional_and_accepts_separators():
    assert validate_phone("") is None
    assert validate_phone("+1 555-123-4567") is None
    assert validate_phone("0123") is not None


def test_zip_code():
    assert validate_zip_code("SW1A 1AA") is None
    assert validate_zip_code("12") == "Please enter a valid zip/postal code"


@pytest.mark.parametrize(
    "password, label",
    [("abc", "Weak"), ("abcdefgh1", "Medium"), ("Abcdefgh1234!", "Strong")],
)
def test_password_strength(password, label):
    assert password_strength(password).label == label


def test_map_api_errors_to_fields_takes_first_message():
    error = ApiError("Validation failed", status=400,
                     details={"email": ["Already registered.", "Other"], "phone": "Invalid", "name": []})

    assert map_api_errors_to_fields(error) == {"email": "Already registered.", "phone": "Invalid"}


@pytest.mark.parametrize(
    "code, expected",
    [
        ("EMAIL_NOT_VERIFIED", "Please verify your email before logging in."),
        ("INVALID_CREDENTIALS", "Invalid email or password. Please try again."),
        (None, "Something broke"),
    ],
)
def test_error_message(code, expected):
    assert error_message(ApiError("Something broke", code=code)) == expected


def test_register_request_collects_field_errors():
    with pytest.raises(ValidationError) as excinfo:
        RegisterRequest(email="bad", password="weak", password_confirm="weak", first_name=" ", last_name="Owner")

    errors = field_errors(excinfo.value)
    assert errors["email"] == "Please enter a valid email address"
    assert errors["password"] == "Password must be at least 8 characters"
    assert errors["first_name"] == "First name is required"


def test_register_request_checks_confirmation():
    with pytest.raises(ValidationError) as excinfo:
        RegisterRequest(email="a@acme.test", password="Secret123", password_confirm="Secret124",
                        first_name="A", last_name="B")

    assert field_errors(excinfo.value) == {"__all__": "Passwords do not match"}


def test_invite_rejects_unknown_role():
    with pytest.raises(ValidationError):
        InviteMemberRequest(email="tech@acme.test", role="superuser")


def test_partial_update_sends_only_set_fields():
    assert EquipmentRequest(condition="fair", notes=None).payload() == {"condition": "fair", "notes": None}


def test_create_request_serializes_dates_and_defaults():
    request = CreateEquipmentRequest(building_id="b1", name="Chiller", purchase_date=dt.date(2023, 3, 1))

    assert request.payload() == {"building_id": "b1", "name": "Chiller", "equipment_type": "other",
                                 "purchase_date": "2023-03-01"}


def test_location_coordinates_are_bounded():
    with pytest.raises(ValidationError) as excinfo:
        CreateLocationRequest(entity_type="facility", entity_id="f1", name="Roof", latitude=91)

    assert "latitude" in field_errors(excinfo.value)


def test_task_schedule_must_be_ordered():
    start = dt.datetime(2024, 5, 1, 9, 0)
    with pytest.raises(ValidationError):
        TaskRequest(scheduled_start=start, scheduled_end=start - dt.timedelta(hours=1))


def test_create_task_defaults():
    payload = CreateTaskRequest(equipment_id="e1", title="Inspect").payload()

    assert payload == {"equipment_id": "e1", "title": "Inspect", "description": "", "priority": "medium"}


def test_field_error_reports_only_the_named_field():
    values = {"email": "bad", "password": "weak"}

    assert field_error(RegisterRequest, values, "email") == "Please enter a valid email address"
    assert field_error(RegisterRequest, values, "phone") is None


def test_field_error_clears_once_the_field_is_valid():
    values = {"equipment_id": "e1", "title": "Inspect"}

    assert field_error(CreateTaskRequest, values, "title") is None
    assert field_error(CreateTaskRequest, {"equipment_id": "e1", "title": " "}, "title") == "Title is required"
