"""A gRPC user service: wire-format messages, service plumbing, a server and a client."""

__version__ = "0.1.0"