"""
RTSP Test Server - Mount point registration

One shared, play-only media factory per (MountSpec x Codec):
    /<name>      H.264 + A-law
    /<name>-vp8  VP8 + Opus
"""

import logging
from typing import Iterable, List, Tuple

from rtsp_test_server.pipelines import Codec, MountSpec, PipelineCatalog

logger = logging.getLogger(__name__)


class MountRegistrationError(RuntimeError):
    """A media factory could not be created or added to the mount points."""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"Failed to register mount point {path}: {cause}")
        self.path = path
        self.cause = cause


def mount_path(spec: MountSpec, codec: Codec) -> str:
    return f"/{spec.name}{codec.path_suffix}"


def register_all(mount_points, mount_specs: Iterable[MountSpec], catalog: PipelineCatalog,
                 factory_class, transport_mode) -> List[str]:
    """Populate ``mount_points`` with a factory for every spec and codec.

    ``factory_class`` is ``GstRtspServer.RTSPMediaFactory`` and
    ``transport_mode`` is ``GstRtspServer.RTSPTransportMode.PLAY`` in
    production. The factories are handed over to the mount point table; no
    reference is kept here.

    Fails fast: the first error is logged with its path and raised as
    MountRegistrationError, leaving earlier registrations in place.
    """
    registered = []
    for spec in mount_specs:
        for codec in catalog.codecs:
            path = mount_path(spec, codec)
            try:
                launch = catalog.render(codec, spec.pattern)
                factory = factory_class()
                factory.set_transport_mode(transport_mode)
                factory.set_launch(launch)
                factory.set_shared(True)
                mount_points.add_factory(path, factory)
            except Exception as e:
                logger.error(f"Failed to register {path} ({codec.label}): {e}")
                raise MountRegistrationError(path, e) from e
            logger.debug(f"Registered {path}: {launch}")
            registered.append(path)
    return registered


def stream_urls(port: int, mount_specs: Iterable[MountSpec],
                host: str = 'localhost',
                codecs: Iterable[Codec] = tuple(Codec)) -> List[Tuple[str, str]]:
    """(url, codec label) for every registered stream, in registration order."""
    codecs = list(codecs)
    return [
        (f"rtsp://{host}:{port}{mount_path(spec, codec)}", codec.label)
        for spec in mount_specs
        for codec in codecs
    ]
