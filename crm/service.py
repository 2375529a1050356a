"""gRPC plumbing for the crm.UserService service."""

from __future__ import annotations

import grpc

from crm.messages import (
    CreateUserRequest,
    CreateUserResponse,
    GetUserRequest,
    GetUserResponse,
)

SERVICE_NAME = "crm.UserService"
GET_USER_METHOD = f"/{SERVICE_NAME}/GetUser"
CREATE_USER_METHOD = f"/{SERVICE_NAME}/CreateUser"
CONNECT_TIMEOUT = 10.0


class UserService:
    """Base class for implementations of crm.UserService."""

    def get_user(self, request: GetUserRequest, context) -> GetUserResponse:
        context.abort(grpc.StatusCode.UNIMPLEMENTED, "GetUser is not implemented")

    def create_user(self, request: CreateUserRequest, context) -> CreateUserResponse:
        context.abort(grpc.StatusCode.UNIMPLEMENTED, "CreateUser is not implemented")


def add_user_service_to_server(service: UserService, server) -> None:
    """Register service's methods with a grpc server."""
    handlers = {
        "GetUser": grpc.unary_unary_rpc_method_handler(
            service.get_user,
            request_deserializer=GetUserRequest.from_bytes,
            response_serializer=GetUserResponse.to_bytes,
        ),
        "CreateUser": grpc.unary_unary_rpc_method_handler(
            service.create_user,
            request_deserializer=CreateUserRequest.from_bytes,
            response_serializer=CreateUserResponse.to_bytes,
        ),
    }
    server.add_generic_rpc_handlers(
        (grpc.method_handlers_generic_handler(SERVICE_NAME, handlers),)
    )


def _grpc_target(target: str) -> str:
    if "://" not in target:
        return target
    scheme, rest = target.split("://", 1)
    if scheme != "http":
        raise ValueError(f"unsupported scheme {scheme!r} in {target!r}")
    return rest.rstrip("/")


class UserServiceClient:
    """Client for crm.UserService over a grpc channel."""

    def __init__(self, channel) -> None:
        self._channel = channel
        self._get_user = channel.unary_unary(
            GET_USER_METHOD,
            request_serializer=GetUserRequest.to_bytes,
            response_deserializer=GetUserResponse.from_bytes,
        )
        self._create_user = channel.unary_unary(
            CREATE_USER_METHOD,
            request_serializer=CreateUserRequest.to_bytes,
            response_deserializer=CreateUserResponse.from_bytes,
        )

    @classmethod
    def connect(cls, target: str) -> UserServiceClient:
        """Open a channel to target and wait until it is ready."""
        channel = grpc.insecure_channel(_grpc_target(target))
        try:
            grpc.channel_ready_future(channel).result(timeout=CONNECT_TIMEOUT)
        except grpc.FutureTimeoutError:
            channel.close()
            raise ConnectionError(f"could not connect to {target}") from None
        return cls(channel)

    def get_user(self, request: GetUserRequest) -> GetUserResponse:
        return self._get_user(request)

    def create_user(self, request: CreateUserRequest) -> CreateUserResponse:
        return self._create_user(request)

    def close(self) -> None:
        self._channel.close()

    def __enter__(self) -> UserServiceClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()