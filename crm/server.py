"""A user service server that answers GetUser and CreateUser."""

from __future__ import annotations

import argparse
from concurrent import futures

import grpc

from crm.messages import (
    CreateUserRequest,
    CreateUserResponse,
    GetUserRequest,
    GetUserResponse,
    User,
)
from crm.service import UserService, add_user_service_to_server

DEFAULT_ADDRESS = "[::1]:50051"
_MAX_WORKERS = 10


class UserServer(UserService):
    """UserService that echoes created users and returns empty users on lookup."""

    def get_user(self, request: GetUserRequest, context) -> GetUserResponse:
        print(f"get_user: {request!r}")
        return GetUserResponse(user=User())

    def create_user(self, request: CreateUserRequest, context) -> CreateUserResponse:
        user = User.create(1, request.name, request.email)
        print(f"create_user: {user!r}")
        return CreateUserResponse(user=user)


def build_server(address: str) -> tuple[grpc.Server, int]:
    """Return a server bound to address, not yet started, and its bound port."""
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=_MAX_WORKERS))
    add_user_service_to_server(UserServer(), server)
    try:
        port = server.add_insecure_port(address)
    except RuntimeError as exc:
        raise OSError(f"could not bind to {address}") from exc
    if port == 0:
        raise OSError(f"could not bind to {address}")
    return server, port


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the crm user service.")
    parser.add_argument(
        "--address",
        default=DEFAULT_ADDRESS,
        help=f"address to listen on (default: {DEFAULT_ADDRESS})",
    )
    args = parser.parse_args(argv)

    server, _ = build_server(args.address)
    print(f"UserServer listening on {args.address}", flush=True)
    server.start()
    try:
        server.wait_for_termination()
    except KeyboardInterrupt:
        server.stop(None)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())