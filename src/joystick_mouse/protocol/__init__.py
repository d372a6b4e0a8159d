"""Protocol layer: record decoding and frame-to-command mapping."""

from .framing import Frame, Rejected, RejectReason, decode, build_record
from .commands import Click, MouseCommand, map_frame
