"""
Tests for generated credentials
"""
import pytest

from app.models.user import User
from app.services.password_service import (
    DIGITS,
    LOWERCASE,
    SPECIAL,
    UPPERCASE,
    generate_temporary_password,
    generate_username,
)


@pytest.mark.parametrize("length", [7, 12, 32])
def test_temporary_password_composition(length):
    password = generate_temporary_password(length)

    assert len(password) == length
    assert sum(c in UPPERCASE for c in password) >= 2
    assert sum(c in LOWERCASE for c in password) >= 2
    assert sum(c in DIGITS for c in password) >= 2
    assert sum(c in SPECIAL for c in password) >= 1


def test_temporary_password_default_length():
    from app.core.config import settings

    assert len(generate_temporary_password()) == settings.TEMP_PASSWORD_LENGTH


def test_temporary_password_too_short():
    with pytest.raises(ValueError):
        generate_temporary_password(6)


def test_temporary_passwords_differ():
    assert len({generate_temporary_password(12) for _ in range(20)}) == 20


def test_username_strips_accents(db):
    assert generate_username(db, "Zineb", "El Ouazzani") == "zineb.elouazzani"
    assert generate_username(db, "Hélène", "Müller") == "helene.muller"
    assert generate_username(db, "", "") == "user"


def test_username_gets_a_counter_when_taken(db):
    db.add(User(email="a@example.ma", username="karim.alami", password_hash="x"))
    db.commit()
    assert generate_username(db, "Karim", "Alami") == "karim.alami2"

    db.add(User(email="b@example.ma", username="karim.alami2", password_hash="x"))
    db.commit()
    assert generate_username(db, "Karim", "Alami") == "karim.alami3"
