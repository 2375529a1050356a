"""Messages of the crm user service and their protobuf wire encoding."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator

_MASK32 = (1 << 32) - 1
_MASK64 = (1 << 64) - 1
_INT32_MIN, _INT32_MAX = -(1 << 31), (1 << 31) - 1
_INT64_MIN, _INT64_MAX = -(1 << 63), (1 << 63) - 1
_NANOS_PER_SECOND = 1_000_000_000


class DecodeError(ValueError):
    """Raised when bytes are not a valid encoding of a message."""


class _Wire(IntEnum):
    VARINT = 0
    FIXED64 = 1
    LENGTH_DELIMITED = 2
    FIXED32 = 5


def _varint(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _key(field: int, wire: _Wire) -> bytes:
    return _varint(field << 3 | wire)


def _uint_field(field: int, value: int) -> bytes:
    return _key(field, _Wire.VARINT) + _varint(value) if value else b""


def _int_field(field: int, value: int) -> bytes:
    return _key(field, _Wire.VARINT) + _varint(value & _MASK64) if value else b""


def _bytes_field(field: int, payload: bytes) -> bytes:
    return _key(field, _Wire.LENGTH_DELIMITED) + _varint(len(payload)) + payload


def _string_field(field: int, text: str) -> bytes:
    return _bytes_field(field, text.encode("utf-8")) if text else b""


def _message_field(field: int, message) -> bytes:
    return b"" if message is None else _bytes_field(field, message.to_bytes())


def _read_varint(data: bytes, pos: int) -> tuple[int, int]:
    result = 0
    for shift in range(0, 70, 7):
        if pos >= len(data):
            raise DecodeError("truncated varint")
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            if result > _MASK64:
                raise DecodeError("varint overflows 64 bits")
            return result, pos
    raise DecodeError("varint is longer than 10 bytes")


def _read_fixed(data: bytes, pos: int, size: int) -> tuple[int, int]:
    end = pos + size
    if end > len(data):
        raise DecodeError("truncated fixed-width field")
    return int.from_bytes(data[pos:end], "little"), end


def _fields(data: bytes) -> Iterator[tuple[int, _Wire, int | bytes]]:
    """Yield (field number, wire type, raw value) for each field in data."""
    data = bytes(data)
    pos = 0
    while pos < len(data):
        key, pos = _read_varint(data, pos)
        field, wire_value = key >> 3, key & 0x7
        if field == 0 or field > _MASK32 >> 3:
            raise DecodeError(f"invalid field number {field}")
        try:
            wire = _Wire(wire_value)
        except ValueError:
            raise DecodeError(f"unsupported wire type {wire_value}") from None
        value: int | bytes
        if wire is _Wire.VARINT:
            value, pos = _read_varint(data, pos)
        elif wire is _Wire.FIXED64:
            value, pos = _read_fixed(data, pos, 8)
        elif wire is _Wire.FIXED32:
            value, pos = _read_fixed(data, pos, 4)
        else:
            length, pos = _read_varint(data, pos)
            end = pos + length
            if end > len(data):
                raise DecodeError("truncated length-delimited field")
            value, pos = data[pos:end], end
        yield field, wire, value


def _expect(message: str, name: str, wire: _Wire, expected: _Wire) -> None:
    if wire is not expected:
        raise DecodeError(
            f"{message}.{name}: expected wire type {expected.name}, got {wire.name}"
        )


def _as_int64(value: int) -> int:
    return value - (1 << 64) if value & (1 << 63) else value


def _as_int32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & (1 << 31) else value


def _as_str(message: str, name: str, payload: bytes) -> str:
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"{message}.{name}: invalid UTF-8") from exc


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} out of range: {value}")


@dataclass(frozen=True)
class Timestamp:
    """A point in time as seconds and nanoseconds since the Unix epoch."""

    seconds: int = 0
    nanos: int = 0

    def __post_init__(self) -> None:
        _check_range("seconds", self.seconds, _INT64_MIN, _INT64_MAX)
        _check_range("nanos", self.nanos, _INT32_MIN, _INT32_MAX)

    @classmethod
    def now(cls) -> Timestamp:
        """Return the current system time."""
        seconds, nanos = divmod(time.time_ns(), _NANOS_PER_SECOND)
        return cls(seconds=seconds, nanos=nanos)

    def to_bytes(self) -> bytes:
        return _int_field(1, self.seconds) + _int_field(2, self.nanos)

    __bytes__ = to_bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> Timestamp:
        seconds = nanos = 0
        for field, wire, value in _fields(data):
            if field == 1:
                _expect("Timestamp", "seconds", wire, _Wire.VARINT)
                seconds = _as_int64(value)
            elif field == 2:
                _expect("Timestamp", "nanos", wire, _Wire.VARINT)
                nanos = _as_int32(value)
        return cls(seconds=seconds, nanos=nanos)


@dataclass(frozen=True)
class User:
    """A user record."""

    id: int = 0
    name: str = ""
    email: str = ""
    created_at: Timestamp | None = None

    def __post_init__(self) -> None:
        _check_range("id", self.id, 0, _MASK64)

    @classmethod
    def create(cls, id: int, name: str, email: str) -> User:
        """Return a user created now."""
        return cls(id=id, name=name, email=email, created_at=Timestamp.now())

    def to_bytes(self) -> bytes:
        return (
            _uint_field(1, self.id)
            + _string_field(2, self.name)
            + _string_field(3, self.email)
            + _message_field(4, self.created_at)
        )

    __bytes__ = to_bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> User:
        user_id = 0
        name = email = ""
        created_at: list[bytes] | None = None
        for field, wire, value in _fields(data):
            if field == 1:
                _expect("User", "id", wire, _Wire.VARINT)
                user_id = value
            elif field == 2:
                _expect("User", "name", wire, _Wire.LENGTH_DELIMITED)
                name = _as_str("User", "name", value)
            elif field == 3:
                _expect("User", "email", wire, _Wire.LENGTH_DELIMITED)
                email = _as_str("User", "email", value)
            elif field == 4:
                _expect("User", "created_at", wire, _Wire.LENGTH_DELIMITED)
                created_at = (created_at or []) + [value]
        return cls(
            id=user_id,
            name=name,
            email=email,
            created_at=(
                None if created_at is None else Timestamp.from_bytes(b"".join(created_at))
            ),
        )


@dataclass(frozen=True)
class GetUserRequest:
    """Request for a user by id."""

    id: int = 0

    def __post_init__(self) -> None:
        _check_range("id", self.id, 0, _MASK64)

    def to_bytes(self) -> bytes:
        return _uint_field(1, self.id)

    __bytes__ = to_bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> GetUserRequest:
        user_id = 0
        for field, wire, value in _fields(data):
            if field == 1:
                _expect("GetUserRequest", "id", wire, _Wire.VARINT)
                user_id = value
        return cls(id=user_id)


@dataclass(frozen=True)
class CreateUserRequest:
    """Request to create a user."""

    name: str = ""
    email: str = ""

    def to_bytes(self) -> bytes:
        return _string_field(1, self.name) + _string_field(2, self.email)

    __bytes__ = to_bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> CreateUserRequest:
        name = email = ""
        for field, wire, value in _fields(data):
            if field == 1:
                _expect("CreateUserRequest", "name", wire, _Wire.LENGTH_DELIMITED)
                name = _as_str("CreateUserRequest", "name", value)
            elif field == 2:
                _expect("CreateUserRequest", "email", wire, _Wire.LENGTH_DELIMITED)
                email = _as_str("CreateUserRequest", "email", value)
        return cls(name=name, email=email)


def _decode_user_holder(message: str, data: bytes) -> User | None:
    chunks: list[bytes] | None = None
    for field, wire, value in _fields(data):
        if field == 1:
            _expect(message, "user", wire, _Wire.LENGTH_DELIMITED)
            chunks = (chunks or []) + [value]
    return None if chunks is None else User.from_bytes(b"".join(chunks))


@dataclass(frozen=True)
class GetUserResponse:
    """Response carrying the requested user, if any."""

    user: User | None = None

    def to_bytes(self) -> bytes:
        return _message_field(1, self.user)

    __bytes__ = to_bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> GetUserResponse:
        return cls(user=_decode_user_holder("GetUserResponse", data))


@dataclass(frozen=True)
class CreateUserResponse:
    """Response carrying the created user, if any."""

    user: User | None = None

    def to_bytes(self) -> bytes:
        return _message_field(1, self.user)

    __bytes__ = to_bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> CreateUserResponse:
        return cls(user=_decode_user_holder("CreateUserResponse", data))