"""User-space TCP/IP building blocks: checksums, buffers, packet formats, sockets, an event loop and datagram adapters."""

__version__ = "0.1.0"