"""Tests for users and password hashing."""

import pytest

from ledgerbook.cli.main import cli
from ledgerbook.domain.errors import ConflictError, ValidationError
from ledgerbook.domain.user import hash_password, verify_password


def test_hash_and_verify_password():
    stored = hash_password("secreto", iterations=1000)

    assert stored.startswith("pbkdf2$1000$")
    assert verify_password("secreto", stored)
    assert not verify_password("otro", stored)


def test_hash_uses_random_salt():
    assert hash_password("secreto", iterations=1000) != hash_password("secreto", iterations=1000)


@pytest.mark.parametrize("stored", ["", "plain-text", "md5$1$a$b", "pbkdf2$x$a$b"])
def test_verify_rejects_malformed_hashes(stored):
    assert not verify_password("secreto", stored)


class TestUserService:
    """Tests for UserService."""

    def test_create_user(self, user_service):
        user_id = user_service.create_user(username=" contador ", password="secreto")
        user = user_service.get_user(user_id)

        assert user.username == "contador"
        assert user.password_hash != "secreto"
        assert user_service.get_user_by_username("contador").id == user_id

    def test_create_user_duplicate(self, user_service, sample_user):
        with pytest.raises(ConflictError, match="already exists"):
            user_service.create_user(username="admin", password="otra")

    @pytest.mark.parametrize("username,password", [("", "secreto"), ("   ", "secreto"), ("admin", "")])
    def test_create_user_blank(self, user_service, username, password):
        with pytest.raises(ValidationError):
            user_service.create_user(username=username, password=password)

    def test_list_users(self, user_service):
        user_service.create_user("zoe", "a")
        user_service.create_user("ana", "b")

        assert [u.username for u in user_service.list_users()] == ["ana", "zoe"]

    def test_authenticate(self, user_service, sample_user):
        assert user_service.authenticate("admin", "secreto").id == sample_user.id
        assert user_service.authenticate("admin", "wrong") is None
        assert user_service.authenticate("nobody", "secreto") is None


def test_user_create_and_verify_cli(cli_runner, temp_db):
    """Test creating and verifying a user from the CLI."""
    created = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "user", "create", "admin", "--password", "secreto"]
    )
    assert created.exit_code == 0
    assert "Created user 'admin'" in created.output

    ok = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "user", "verify", "admin", "--password", "secreto"]
    )
    assert ok.exit_code == 0
    assert "Credentials valid for 'admin'" in ok.output

    bad = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "user", "verify", "admin", "--password", "nope"]
    )
    assert bad.exit_code == 1
    assert "Invalid credentials" in bad.output


def test_user_list_cli(cli_runner, temp_db, sample_user):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "user", "list"])

    assert result.exit_code == 0
    assert "admin" in result.output
