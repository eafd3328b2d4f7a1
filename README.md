# sponge

Building blocks for a user-space TCP/IP stack, in plain Python with no
third-party dependencies. It runs on POSIX systems; the TUN/TAP support is
Linux only.

## What is inside

- `sponge.util`: `InternetChecksum` (compute or verify the Internet checksum),
  `timestamp_ms`, `random_generator` (a `random.Random` seeded from
  `os.urandom`), and `format_hexdump` / `hexdump` for looking at raw bytes.
- `sponge.parser`: `NetParser` reads big-endian integers (`u8`, `u16`, `u32`)
  from the front of a packet and records the first error; `check()` raises it.
  `ParseResult` lists the possible outcomes and `ParseError` carries one in its
  `result` attribute. `unparse_u8`, `unparse_u16` and `unparse_u32` write
  integers back out.
- `sponge.buffer`: `Buffer`, `BufferList` and `BufferViewList`, read-only byte
  buffers that can drop bytes from the front without copying.
- `sponge.address`: `Address`, an IPv4 address and port (or another socket
  address taken from the kernel), with `Address.resolve`,
  `Address.from_ipv4_numeric` and `Address.from_sockaddr`.
- Packet formats, each with a `parse` class method and `serialize`:
  - `sponge.ethernet_header.EthernetHeader` and
    `sponge.ethernet_frame.EthernetFrame`
  - `sponge.arp_message.ARPMessage` (Ethernet/IPv4 requests and replies)
  - `sponge.ipv4_header.IPv4Header` and `sponge.ipv4_datagram.IPv4Datagram`
  - `sponge.tcp_header.TCPHeader` and `sponge.tcp_segment.TCPSegment`
- `sponge.file_descriptor.FileDescriptor`: a shared descriptor handle that
  counts reads and writes and notices EOF.
- `sponge.sockets`: `UDPSocket`, `TCPSocket`, `LocalStreamSocket` and
  `local_stream_socket_pair`.
- `sponge.eventloop`: `EventLoop`, which polls descriptors and runs callbacks
  for `Direction.IN` / `Direction.OUT` rules, returning an `EventResult`.
- `sponge.tun`: `TunFD` and `TapFD`, handles on existing persistent TUN/TAP
  devices.
- `sponge.tcp_config`: `TCPConfig` and `FdAdapterConfig`.
- Adapters that carry TCP segments over a datagram transport:
  - `sponge.fd_adapter.TCPOverUDPSocketAdapter` (TCP inside UDP payloads)
  - `sponge.tcp_over_ip.TCPOverIPv4Adapter` and
    `TCPOverIPv4OverTunFdAdapter` (TCP inside IPv4 datagrams, over a TUN
    device)
  - `sponge.lossy_fd_adapter.LossyFdAdapter`, which wraps any of them and
    drops reads and writes at the configured loss rates (out of 65536).
- `sponge.tcp_state`: `TCPState`, built from an official `State` name or from
  a sender and receiver object, summarising each side as a
  `SenderStateSummary` / `ReceiverStateSummary`.

## Installing

```
pip install .
```

## Example

```python
from sponge.parser import ParseError, ParseResult
from sponge.tcp_segment import TCPSegment

seg = TCPSegment()
seg.header.syn = True
seg.header.seqno = 1000
wire = seg.serialize().concatenate()

parsed = TCPSegment.parse(wire)
assert parsed.header.syn
assert parsed.length_in_sequence_space() == 1

corrupted = wire[:-1] + bytes([wire[-1] ^ 0xFF])
try:
    TCPSegment.parse(corrupted)
except ParseError as exc:
    assert exc.result is ParseResult.BAD_CHECKSUM
```

Parsing a malformed packet raises `ParseError`; its `result` is the matching
`ParseResult`, such as `ParseResult.BAD_CHECKSUM` or
`ParseResult.PACKET_TOO_SHORT`.

## What it does not do

The package holds the parts around a TCP implementation, not the TCP
implementation itself. There is no byte stream, reassembler, TCP sender,
TCP receiver or connection state machine, and no socket-like object that
runs a connection in the background. `sponge.tcp_state` works on any sender
and receiver objects that provide the methods it calls, but the package does
not supply them. There is also no network interface with ARP resolution, and
no adapter that carries IPv4 over Ethernet on a TAP device; `TapFD` only opens
the device. The package has no command-line program.

## Running the tests

```
pip install ".[test]"
pytest
```

TUN/TAP devices need a persistent device created beforehand and suitable
permissions; they are only opened when you ask for them.