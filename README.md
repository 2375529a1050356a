# crm

A small user service that speaks gRPC. It has two calls, `GetUser` and
`CreateUser`. It comes with a server and a client.

## Install

```
pip install .
```

## Running

Start the server. By default it listens on `[::1]:50051`:

```
crm-server
crm-server --address 127.0.0.1:50051
```

In another terminal, run the client. It sends one `CreateUser` request for
"John Doe" (`john.doe@example.com`) and prints `RESPONSE=` followed by the
response:

```
crm-client
crm-client --target http://127.0.0.1:50051
```

The default target is `http://[::1]:50051`. A target may be given as
`host:port` or as `http://host:port`. The client waits up to ten seconds for
the connection. If the connection or the call fails, it prints the error
to standard error and exits with status 1.

## What the server does

`crm.server.UserServer` keeps no storage:

- `CreateUser` answers with a user that has id 1, the requested name and
  e-mail, and `created_at` set to the current time.
- `GetUser` answers with an empty user (id 0, empty name and e-mail, no
  `created_at`), whatever id was asked for.

Both calls print the request or the user they built.

## Using it from Python

The messages are frozen dataclasses in `crm.messages`: `Timestamp`, `User`,
`GetUserRequest`, `CreateUserRequest`, `GetUserResponse` and
`CreateUserResponse`. Each one encodes to the protobuf wire format with
`to_bytes()` (or `bytes(message)`) and decodes from it with
`from_bytes(data)`:

```python
from crm.messages import CreateUserRequest, User

request = CreateUserRequest(name="Jane Doe", email="jane.doe@example.com")
data = request.to_bytes()
assert CreateUserRequest.from_bytes(data) == request

user = User.create(1, "Jane Doe", "jane.doe@example.com")  # created_at is Timestamp.now()
```

Malformed input makes `from_bytes` raise `crm.messages.DecodeError`, a
subclass of `ValueError`. Building a message with a field out of its range
(for example a negative `id`) raises `ValueError`.

To call a running server, use `crm.service.UserServiceClient`. `connect`
raises `ConnectionError` if the server cannot be reached within ten seconds.
The client is a context manager that closes its channel on exit:

```python
from crm.messages import CreateUserRequest, GetUserRequest
from crm.service import UserServiceClient

with UserServiceClient.connect("[::1]:50051") as client:
    created = client.create_user(
        CreateUserRequest(name="Jane Doe", email="jane.doe@example.com")
    )
    fetched = client.get_user(GetUserRequest(id=1))
```

`crm.client.run(target)` does what `crm-client` does and returns the
`CreateUserResponse`.

To serve your own implementation, subclass `crm.service.UserService` and
register it on a `grpc.Server` with
`crm.service.add_user_service_to_server(service, server)`. Methods that are
not overridden answer with `UNIMPLEMENTED`.

`crm.server.build_server(address)` returns a `(server, port)` pair: a server
running `UserServer`, bound to the address but not yet started, and the port
it is bound to. Call `start()` on the server to begin serving. It raises
`OSError` if the address cannot be bound.

## Tests

```
pip install .[test]
pytest
```