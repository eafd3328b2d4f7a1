import pytest

from sponge.address import Address
from sponge.fd_adapter import FdAdapterBase, TCPOverUDPSocketAdapter
from sponge.sockets import UDPSocket
from sponge.tcp_header import TCPHeader
from sponge.tcp_segment import TCPSegment


@pytest.fixture
def sockets():
    with UDPSocket() as ours, UDPSocket() as peer:
        ours.bind(Address("127.0.0.1", 0))
        peer.bind(Address("127.0.0.1", 0))
        yield ours, peer


def _send(peer, to, seg):
    peer.sendto(to.local_address(), seg.serialize())


def test_base_defaults():
    base = FdAdapterBase()
    assert base.listening is False
    assert base.config.destination.port() == 0


def test_listening_accepts_syn_and_records_peer(sockets):
    ours, peer = sockets
    adapter = TCPOverUDPSocketAdapter(ours)
    adapter.listening = True
    _send(peer, ours, TCPSegment(TCPHeader(syn=True, seqno=7), b"hi"))
    seg = adapter.read()
    assert seg.header.syn
    assert seg.header.seqno == 7
    assert seg.payload == b"hi"
    assert adapter.config.destination == peer.local_address()
    assert adapter.listening is False


def test_listening_ignores_non_syn(sockets):
    ours, peer = sockets
    adapter = TCPOverUDPSocketAdapter(ours)
    adapter.listening = True
    _send(peer, ours, TCPSegment(TCPHeader(ack=True), b"data"))
    assert adapter.read() is None
    assert adapter.listening is True


def test_listening_ignores_syn_with_rst(sockets):
    ours, peer = sockets
    adapter = TCPOverUDPSocketAdapter(ours)
    adapter.listening = True
    _send(peer, ours, TCPSegment(TCPHeader(syn=True, rst=True)))
    assert adapter.read() is None
    assert adapter.listening is True


def test_segment_from_other_source_is_ignored(sockets):
    ours, peer = sockets
    adapter = TCPOverUDPSocketAdapter(ours)
    adapter.config.destination = Address("127.0.0.1", 1)
    _send(peer, ours, TCPSegment(TCPHeader(ack=True)))
    assert adapter.read() is None


def test_invalid_payload_is_ignored_then_valid_accepted(sockets):
    ours, peer = sockets
    adapter = TCPOverUDPSocketAdapter(ours)
    adapter.config.destination = peer.local_address()
    peer.sendto(ours.local_address(), b"\x00\x01")
    assert adapter.read() is None
    _send(peer, ours, TCPSegment(TCPHeader(ack=True, ackno=99), b"ok"))
    seg = adapter.read()
    assert seg.header.ackno == 99
    assert seg.payload == b"ok"


def test_write_sets_ports_and_sends(sockets):
    ours, peer = sockets
    adapter = TCPOverUDPSocketAdapter(ours)
    adapter.config.source = ours.local_address()
    adapter.config.destination = peer.local_address()
    seg = TCPSegment(TCPHeader(seqno=5, fin=True), b"bye")
    adapter.write(seg)
    assert seg.header.sport == ours.local_address().port()
    received = peer.recv()
    assert received.source_address == ours.local_address()
    parsed = TCPSegment.parse(received.payload)
    assert parsed.header.sport == ours.local_address().port()
    assert parsed.header.dport == peer.local_address().port()
    assert parsed.header.fin
    assert parsed.payload == b"bye"


def test_fileno_is_socket_descriptor(sockets):
    ours, _peer = sockets
    adapter = TCPOverUDPSocketAdapter(ours)
    assert adapter.fileno() == ours.fileno()
    assert adapter.socket is ours