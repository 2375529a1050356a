[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "crm"
version = "0.1.0"
description = "A small gRPC user service with a server and a client"
requires-python = ">=3.10"
dependencies = [
    "grpcio",
]
keywords = ["grpc", "crm", "users", "protobuf", "rpc"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
crm-server = "crm.server:main"
crm-client = "crm.client:main"

[tool.hatch.build.targets.wheel]
packages = ["crm"]

[tool.pytest.ini_options]
addopts = "-ra"
