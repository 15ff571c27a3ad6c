from flashcards.models.user import User
from flashcards.records import UserRecord
from flashcards.repositories import refresh_tokens as refresh_token_store
from flashcards.services import auth
from flashcards.services.auth import AuthResult, TokenPair
from flashcards.services.errors import ErrorKind, ServiceError
from flashcards.services.tokens import get_token_issuer

PASSWORD = "TestPass123!"


def _register(db, email="alpha@example.com", display_name="Alpha"):
    result = auth.register(db, email, PASSWORD, display_name)
    assert isinstance(result, AuthResult)
    return result


def test_register_then_login_yields_same_user(db):
    registered = _register(db)

    logged_in = auth.login(db, "ALPHA@example.com ", PASSWORD)

    assert isinstance(logged_in, AuthResult)
    assert logged_in.user.id == registered.user.id
    claims = get_token_issuer().validate_access_token(logged_in.tokens.access_token)
    assert claims.user_id == registered.user.id
    assert claims.email == "alpha@example.com"


def test_user_record_never_exposes_password_hash(db):
    result = _register(db)

    assert isinstance(result.user, UserRecord)
    assert "password_hash" not in result.user.model_dump()
    stored = db.query(User).filter(User.id == result.user.id).one()
    assert stored.password_hash != PASSWORD


def test_register_validation_runs_in_order(db):
    error = auth.register(db, "bad", "short", "A")

    assert isinstance(error, ServiceError)
    assert error.kind == ErrorKind.VALIDATION
    assert error.code == "INVALID_EMAIL"

    error = auth.register(db, "alpha@example.com", "short", "A")
    assert error.code == "INVALID_PASSWORD"

    error = auth.register(db, "alpha@example.com", PASSWORD, "A")
    assert error.code == "INVALID_DISPLAY_NAME"


def test_register_duplicate_email_is_conflict(db):
    _register(db)

    error = auth.register(db, "alpha@example.com", PASSWORD, "Someone")

    assert isinstance(error, ServiceError)
    assert error.kind == ErrorKind.CONFLICT
    assert error.kind.status_code == 409
    assert error.code == "EMAIL_ALREADY_EXISTS"


def test_register_race_on_unique_email_is_conflict(db, monkeypatch):
    _register(db)
    monkeypatch.setattr(auth.users, "exists_by_email", lambda db, email: False)

    error = auth.register(db, "alpha@example.com", PASSWORD, "Someone")

    assert isinstance(error, ServiceError)
    assert error.code == "EMAIL_ALREADY_EXISTS"
    assert db.query(User).count() == 1


def test_wrong_password_and_unknown_email_are_indistinguishable(db):
    _register(db)

    wrong_password = auth.login(db, "alpha@example.com", "WrongPass123!")
    unknown_email = auth.login(db, "nobody@example.com", PASSWORD)

    assert wrong_password == unknown_email
    assert wrong_password.kind == ErrorKind.AUTHENTICATION
    assert wrong_password.message == "Invalid email or password"


def test_login_with_blank_fields_is_missing_credentials(db):
    assert auth.login(db, "", PASSWORD).code == "MISSING_CREDENTIALS"
    assert auth.login(db, "alpha@example.com", "   ").code == "MISSING_CREDENTIALS"


def test_refresh_token_is_single_use(db):
    tokens = _register(db).tokens

    rotated = auth.refresh(db, tokens.refresh_token)
    assert isinstance(rotated, TokenPair)
    assert rotated.refresh_token != tokens.refresh_token

    replay = auth.refresh(db, tokens.refresh_token)
    assert isinstance(replay, ServiceError)
    assert replay.code == "INVALID_TOKEN"


def test_refresh_with_blank_token(db):
    error = auth.refresh(db, "  ")
    assert error.kind == ErrorKind.VALIDATION
    assert error.code == "MISSING_TOKEN"


def test_refresh_losing_rotation_race_is_invalid(db, monkeypatch):
    tokens = _register(db).tokens
    monkeypatch.setattr(auth.refresh_tokens, "revoke", lambda db, token: False)

    error = auth.refresh(db, tokens.refresh_token)

    assert isinstance(error, ServiceError)
    assert error.code == "INVALID_TOKEN"


def test_refresh_for_deleted_user_is_invalid(db, monkeypatch):
    tokens = _register(db).tokens
    monkeypatch.setattr(auth.users, "find_by_id", lambda db, user_id: None)

    error = auth.refresh(db, tokens.refresh_token)

    assert isinstance(error, ServiceError)
    assert error.code == "INVALID_TOKEN"
    assert refresh_token_store.find_active(db, tokens.refresh_token) is None


def test_logout_revokes_and_ignores_blank(db):
    tokens = _register(db).tokens

    assert auth.logout(db, "") is None
    assert auth.logout(db, None) is None
    auth.logout(db, tokens.refresh_token)

    assert refresh_token_store.find_active(db, tokens.refresh_token) is None
    assert auth.refresh(db, tokens.refresh_token).code == "INVALID_TOKEN"


def test_logout_all_returns_revoked_count(db):
    registered = _register(db)
    auth.login(db, "alpha@example.com", PASSWORD)

    assert auth.logout_all(db, registered.user.id) == 2
    assert auth.logout_all(db, registered.user.id) == 0


def test_overlong_password_message_names_the_byte_limit(db):
    # 37 characters, 74 bytes in UTF-8
    error = auth.register(db, "alpha@example.com", "é" * 37, "Alpha")

    assert isinstance(error, ServiceError)
    assert error.code == "INVALID_PASSWORD"
    assert error.message == "Password must not exceed 72 bytes"
