"""Pass rendering diagnostics."""

from tilepass.diagnostics.event import DiagnosticEvent, utc_now_iso
from tilepass.diagnostics.hub import DiagnosticHub
from tilepass.diagnostics.json_codec import dumps_bytes, dumps_text
from tilepass.diagnostics.ring_buffer import RingBuffer

__all__ = [
    "DiagnosticEvent",
    "DiagnosticHub",
    "RingBuffer",
    "dumps_bytes",
    "dumps_text",
    "utc_now_iso",
]
