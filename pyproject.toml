[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "udpframe"
version = "0.1.0"
description = "Layered binary frame protocol over UDP with echo server and loopback throughput tools"
requires-python = ">=3.10"
dependencies = []
keywords = ["udp", "protocol", "framing", "checksum", "tlv", "loopback", "echo"]
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
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
udp-loop = "udpframe.loopclient:main"
udp-echo-server = "udpframe.echoserver:main"
udp-loop-mthread = "udpframe.loopthreads:main"

[tool.hatch.build.targets.wheel]
packages = ["udpframe"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
