"""
RTSP Test Server - Pipeline catalog

Launch descriptions for the synthetic test streams. Each logical stream
(MountSpec) is offered in every Codec; the pattern name is substituted into
videotestsrc as-is and is not validated here.
"""

from enum import Enum
from typing import Dict, NamedTuple, Optional


class Codec(Enum):
    H264 = 'h264'
    VP8 = 'vp8'

    @property
    def path_suffix(self) -> str:
        return '' if self is Codec.H264 else f'-{self.value}'

    @property
    def label(self) -> str:
        return 'H.264' if self is Codec.H264 else self.value.upper()


class MountSpec(NamedTuple):
    name: str
    pattern: str


H264_PIPELINE_TEMPLATE = (
    "( videotestsrc pattern={pattern} ! "
    "timeoverlay ! "
    "x264enc ! video/x-h264, profile=baseline ! "
    "rtph264pay name=pay0 pt=96 config-interval=-1 "
    "audiotestsrc ! alawenc ! rtppcmapay name=pay1 pt=8 )"
)

VP8_PIPELINE_TEMPLATE = (
    "( videotestsrc pattern={pattern} ! "
    "timeoverlay ! "
    "vp8enc ! rtpvp8pay name=pay0 pt=96 "
    "audiotestsrc ! opusenc ! rtpopuspay name=pay1 pt=97 )"
)

DEFAULT_TEMPLATES = {
    Codec.H264: H264_PIPELINE_TEMPLATE,
    Codec.VP8: VP8_PIPELINE_TEMPLATE,
}

# Streams registered by default
MOUNT_SPECS = (
    MountSpec('test', 'smpte'),
)

# Full color catalog, not registered unless passed to the server explicitly
COLOR_MOUNT_SPECS = (
    MountSpec('bars', 'smpte100'),
    MountSpec('white', 'white'),
    MountSpec('black', 'black'),
    MountSpec('red', 'red'),
    MountSpec('green', 'green'),
    MountSpec('blue', 'blue'),
)


class PipelineCatalog:
    """Renders the launch description for a (codec, pattern) pair."""

    def __init__(self, templates: Optional[Dict[Codec, str]] = None):
        self.templates = dict(DEFAULT_TEMPLATES if templates is None else templates)

    @property
    def codecs(self):
        """Codecs in registration order (H.264 first)."""
        return [codec for codec in Codec if codec in self.templates]

    def render(self, codec: Codec, pattern: str) -> str:
        return self.templates[codec].format(pattern=pattern)
