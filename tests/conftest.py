"""
pytest configuration and fixtures.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpreply import Reply, ReplyConfig, RequestContext, Transport, TransmissionError
from httpreply.http.response import OutgoingResponse


# 1000 bytes where every byte value is predictable: data[i] == i % 256
SAMPLE_SIZE = 1000
SAMPLE_DATA = bytes(i % 256 for i in range(SAMPLE_SIZE))


@dataclass
class Sent:
    """What a transport saw for one response."""
    status: int
    headers: Dict[str, str]
    body: bytes


@dataclass
class RecordingTransport(Transport):
    """Transport that drains the body into memory instead of a socket."""

    sent: List[Sent] = field(default_factory=list)
    streams: List[object] = field(default_factory=list)

    def send(self, response: OutgoingResponse) -> None:
        payload = response.body_bytes()
        if payload is None:
            self.streams.append(response.body)
            payload = response.body.read()
        self.sent.append(Sent(int(response.status), response.headers.to_dict(), payload))

    @property
    def last(self) -> Sent:
        return self.sent[-1]


@dataclass
class FailingTransport(Transport):
    """Transport whose peer is always gone."""

    attempts: int = 0
    streams: List[object] = field(default_factory=list)

    def send(self, response: OutgoingResponse) -> None:
        self.attempts += 1
        if response.is_stream:
            self.streams.append(response.body)
        raise TransmissionError("Send failed: [Errno 32] Broken pipe")


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """A 1000-byte file of known content."""
    path = tmp_path / "sample.bin"
    path.write_bytes(SAMPLE_DATA)
    return path


@pytest.fixture
def empty_file(tmp_path: Path) -> Path:
    path = tmp_path / "empty.bin"
    path.write_bytes(b"")
    return path


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /media/sample.bin?quality=high&tag=a&tag=b HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: */*\r\n"
        b"\r\n"
    )


def raw_get(path: str = "/media/sample.bin", range_header: Optional[str] = None) -> bytes:
    """Build raw GET request bytes, optionally with a Range header."""
    lines = [f"GET {path} HTTP/1.1", "Host: localhost:8080"]
    if range_header is not None:
        lines.append(f"Range: {range_header}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def make_reply(transport: RecordingTransport) -> Callable[..., Reply]:
    """Factory for replies answering a GET, recorded by `transport`."""

    def factory(
        range_header: Optional[str] = None,
        config: Optional[ReplyConfig] = None,
        transport_override: Optional[Transport] = None,
    ) -> Reply:
        context = RequestContext.from_bytes(raw_get(range_header=range_header))
        return Reply(context, transport_override or transport, config)

    return factory


@pytest.fixture
def sample_data() -> bytes:
    return SAMPLE_DATA


@pytest.fixture
def failing_transport() -> FailingTransport:
    return FailingTransport()
