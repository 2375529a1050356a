import pytest

from crm.messages import CreateUserRequest, GetUserRequest, GetUserResponse, User
from crm.server import UserServer, build_server
from crm.service import UserServiceClient


@pytest.fixture
def running_server():
    server, port = build_server("127.0.0.1:0")
    server.start()
    try:
        yield port
    finally:
        server.stop(None)


def test_get_user_returns_default_user():
    response = UserServer().get_user(GetUserRequest(id=7), None)
    assert response == GetUserResponse(user=User())


def test_get_user_prints_request(capsys):
    UserServer().get_user(GetUserRequest(id=7), None)
    out = capsys.readouterr().out
    assert out.startswith("get_user: ")
    assert "id=7" in out


def test_create_user_builds_user_with_id_one():
    request = CreateUserRequest(name="John Doe", email="john.doe@example.com")
    response = UserServer().create_user(request, None)
    assert response.user.id == 1
    assert response.user.name == "John Doe"
    assert response.user.email == "john.doe@example.com"
    assert response.user.created_at.seconds > 0


def test_create_user_prints_user(capsys):
    request = CreateUserRequest(name="Ann", email="ann@example.com")
    UserServer().create_user(request, None)
    out = capsys.readouterr().out
    assert out.startswith("create_user: ")
    assert "ann@example.com" in out


def test_build_server_binds_port():
    server, port = build_server("127.0.0.1:0")
    try:
        assert port > 0
    finally:
        server.stop(None)


def test_server_answers_over_grpc(running_server):
    with UserServiceClient.connect(f"127.0.0.1:{running_server}") as client:
        created = client.create_user(
            CreateUserRequest(name="Ann", email="ann@example.com")
        )
        fetched = client.get_user(GetUserRequest(id=3))
    assert created.user.id == 1
    assert created.user.name == "Ann"
    assert created.user.created_at is not None
    assert fetched == GetUserResponse(user=User())