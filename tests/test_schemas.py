import pytest
from pydantic import ValidationError

from portcullis.domain.schemas.auth import ForgotPasswordRequest, ProfileUpdate, SignupRequest
from portcullis.domain.schemas.invitation import InvitationCreate
from portcullis.domain.schemas.role import PrivilegeCreate
from portcullis.domain.schemas.user import UserCreate, UserUpdate


def _signup(**fields):
    data = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "password": "s3cret-pass",
        "confirm_password": "s3cret-pass",
    }
    data.update(fields)
    return SignupRequest(**data)


def test_emails_are_lowercased():
    assert _signup(email="Ada.King@Example.COM").email == "ada.king@example.com"
    assert InvitationCreate(email="Bob@X.com", role_id=2).email == "bob@x.com"
    assert ForgotPasswordRequest(email="ROOT@example.com").email == "root@example.com"
    assert UserUpdate(email="Eve@Example.com").email == "eve@example.com"


def test_names_are_stripped_before_length_checks():
    signup = _signup(first_name="  Ada ", last_name=" Lovelace")
    assert (signup.first_name, signup.last_name) == ("Ada", "Lovelace")

    with pytest.raises(ValidationError):
        _signup(first_name="   ")
    with pytest.raises(ValidationError):
        UserCreate(first_name="Ada", last_name="\t", email="ada@example.com", password="s3cret-pass", role_id=2)
    with pytest.raises(ValidationError):
        ProfileUpdate(last_name="  ")
    with pytest.raises(ValidationError):
        PrivilegeCreate(name="   ", category="System")


def test_passwords_keep_their_whitespace():
    signup = _signup(password=" s3cret-pass ", confirm_password=" s3cret-pass ")

    assert signup.password == " s3cret-pass "
