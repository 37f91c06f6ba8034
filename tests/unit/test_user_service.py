from src.services.results import USER_NOT_FOUND
from src.services.users import UserService, parse_user_id


def test_parse_user_id():
    assert parse_user_id("42") == 42
    assert parse_user_id(7) == 7
    assert parse_user_id("abc") is None
    assert parse_user_id(None) is None


def test_parse_user_id_outside_column_range():
    assert parse_user_id(str(2**31 - 1)) == 2**31 - 1
    assert parse_user_id(str(2**31)) is None
    assert parse_user_id("99999999999999999999") is None


def test_out_of_range_id_is_not_found(database):
    result = UserService(database).get_user("99999999999999999999")

    assert not result.success
    assert result.error == USER_NOT_FOUND


def test_create_and_get_user(database):
    service = UserService(database)

    created = service.create_user("Jane Smith", "jane@example.com")
    assert created.success
    assert created.data.id is not None
    assert created.data.created_at is not None
    assert created.data.updated_at is not None

    fetched = service.get_user(str(created.data.id))
    assert fetched.success
    assert fetched.data.name == "Jane Smith"
    assert fetched.data.email == "jane@example.com"


def test_list_users_newest_first_with_count(database):
    service = UserService(database)
    ids = [service.create_user(f"user{i}", f"user{i}@example.com").data.id for i in range(3)]

    result = service.list_users()

    assert result.success
    assert result.count == len(result.data) == 3
    assert [user.id for user in result.data] == list(reversed(ids))


def test_get_missing_user_is_not_found(database):
    result = UserService(database).get_user(999)

    assert not result.success
    assert result.not_found
    assert result.error == USER_NOT_FOUND


def test_non_numeric_id_is_not_found(database):
    result = UserService(database).get_user("not-a-number")

    assert result.not_found


def test_update_user(database):
    service = UserService(database)
    user = service.create_user("Bob", "bob@example.com").data

    result = service.update_user(user.id, "Robert", "robert@example.com")

    assert result.success
    assert result.data.id == user.id
    assert result.data.name == "Robert"
    assert result.data.email == "robert@example.com"


def test_update_missing_user_is_not_found(database):
    result = UserService(database).update_user(12345, "Nobody", "nobody@example.com")

    assert not result.success
    assert result.error == "User not found"


def test_delete_user_returns_deleted_record(database):
    service = UserService(database)
    user = service.create_user("Temp", "temp@example.com").data

    deleted = service.delete_user(user.id)

    assert deleted.success
    assert deleted.data.id == user.id
    assert service.get_user(user.id).not_found
    assert service.delete_user(user.id).not_found


def test_database_errors_become_failures(settings):
    from src.db.interfaces.postgresql import PostgreSQLDatabase

    # No tables created, every query fails
    service = UserService(PostgreSQLDatabase(settings))

    result = service.list_users()

    assert not result.success
    assert not result.not_found
    assert "users" in result.error
    assert result.code
