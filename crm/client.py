"""A client that creates one user and prints the response."""

from __future__ import annotations

import argparse
import sys

import grpc

from crm.messages import CreateUserRequest, CreateUserResponse
from crm.service import UserServiceClient

DEFAULT_TARGET = "http://[::1]:50051"


def run(target: str = DEFAULT_TARGET) -> CreateUserResponse:
    """Connect to target, create a sample user and print the response."""
    with UserServiceClient.connect(target) as client:
        request = CreateUserRequest(name="John Doe", email="john.doe@example.com")
        response = client.create_user(request)
    print(f"RESPONSE={response!r}")
    return response


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user on a crm server.")
    parser.add_argument(
        "--target",
        default=DEFAULT_TARGET,
        help=f"server to connect to (default: {DEFAULT_TARGET})",
    )
    args = parser.parse_args(argv)
    try:
        run(args.target)
    except (ConnectionError, ValueError, grpc.RpcError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())