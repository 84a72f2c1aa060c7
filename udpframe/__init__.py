"""Three-layer UDP frame protocol, UDP client and server, echo server and loopback testers."""

__version__ = "0.1.0"