from concurrent.futures import ThreadPoolExecutor

import grpc
import pytest

from crm.messages import (
    CreateUserRequest,
    CreateUserResponse,
    GetUserRequest,
    GetUserResponse,
    User,
)
from crm.service import (
    GET_USER_METHOD,
    UserService,
    UserServiceClient,
    add_user_service_to_server,
)


class _EchoService(UserService):
    def get_user(self, request, context):
        return GetUserResponse(user=User(id=request.id, name="found"))

    def create_user(self, request, context):
        return CreateUserResponse(
            user=User.create(7, request.name, request.email)
        )


def _serve(service):
    server = grpc.server(ThreadPoolExecutor(max_workers=2))
    add_user_service_to_server(service, server)
    port = server.add_insecure_port("127.0.0.1:0")
    server.start()
    return server, port


@pytest.fixture
def echo_port():
    server, port = _serve(_EchoService())
    yield port
    server.stop(None)


@pytest.fixture
def base_port():
    server, port = _serve(UserService())
    yield port
    server.stop(None)


def test_get_user_round_trip(echo_port):
    with UserServiceClient.connect(f"http://127.0.0.1:{echo_port}") as client:
        response = client.get_user(GetUserRequest(id=12))
    assert response.user == User(id=12, name="found")


def test_create_user_round_trip(echo_port):
    with UserServiceClient.connect(f"127.0.0.1:{echo_port}") as client:
        response = client.create_user(
            CreateUserRequest(name="John Doe", email="john.doe@example.com")
        )
    assert response.user.id == 7
    assert response.user.name == "John Doe"
    assert response.user.email == "john.doe@example.com"
    assert response.user.created_at.seconds > 0


def test_base_service_reports_unimplemented(base_port):
    with UserServiceClient.connect(f"127.0.0.1:{base_port}") as client:
        with pytest.raises(grpc.RpcError) as info:
            client.get_user(GetUserRequest(id=1))
    assert info.value.code() == grpc.StatusCode.UNIMPLEMENTED


def test_base_service_create_user_unimplemented(base_port):
    with UserServiceClient.connect(f"127.0.0.1:{base_port}") as client:
        with pytest.raises(grpc.RpcError) as info:
            client.create_user(CreateUserRequest(name="x"))
    assert info.value.code() == grpc.StatusCode.UNIMPLEMENTED


def test_unknown_method_is_unimplemented(echo_port):
    with grpc.insecure_channel(f"127.0.0.1:{echo_port}") as channel:
        call = channel.unary_unary("/crm.UserService/Missing")
        with pytest.raises(grpc.RpcError) as info:
            call(b"")
    assert info.value.code() == grpc.StatusCode.UNIMPLEMENTED


def test_server_decodes_raw_request_bytes(echo_port):
    with grpc.insecure_channel(f"127.0.0.1:{echo_port}") as channel:
        call = channel.unary_unary(GET_USER_METHOD)
        raw = call(GetUserRequest(id=33).to_bytes())
    assert GetUserResponse.from_bytes(raw).user.id == 33


def test_connect_rejects_unsupported_scheme():
    with pytest.raises(ValueError):
        UserServiceClient.connect("ftp://127.0.0.1:1")