"""
RTSP Test Server - Server runtime

Owns the GstRtspServer instance: binds it to the configured port, fills the
mount point table with the test streams and runs the GLib main loop until a
shutdown signal quits it.
"""

import logging
import os
from typing import Iterable, Optional

from rtsp_test_server.config import Config
from rtsp_test_server.mounts import MountRegistrationError, register_all, stream_urls
from rtsp_test_server.pipelines import MOUNT_SPECS, MountSpec, PipelineCatalog
from rtsp_test_server.signals import LoopHandle

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STARTUP_FAILURE = 1


def disable_vaapi():
    """Keep libva from probing hardware drivers (only software encoders are used).

    Some drivers (nouveau, headless boxes) crash while being probed. An
    explicit LIBVA_DRIVER_NAME from the environment is left untouched.
    """
    os.environ.setdefault('LIBVA_DRIVER_NAME', 'null')


def _import_engine():
    import gi
    gi.require_version("Gst", "1.0")
    gi.require_version("GstRtspServer", "1.0")
    from gi.repository import Gst, GstRtspServer, GLib
    return Gst, GstRtspServer, GLib


class RtspTestServer:
    def __init__(self, config: Config, mount_specs: Iterable[MountSpec] = MOUNT_SPECS,
                 catalog: Optional[PipelineCatalog] = None,
                 loop_handle: Optional[LoopHandle] = None):
        self.config = config
        self.mount_specs = list(mount_specs)
        self.catalog = catalog or PipelineCatalog()
        self.loop_handle = loop_handle or LoopHandle()
        self.server = None
        self.mount_points = None

    def run(self) -> int:
        """Start serving and block until the main loop is stopped. Returns the exit code."""
        disable_vaapi()
        try:
            Gst, GstRtspServer, GLib = _import_engine()
        except (ImportError, ValueError) as e:
            logger.error(f"GStreamer python bindings not found ({e}). Please install python3-gi, "
                         "gir1.2-gstreamer-1.0, gir1.2-gst-rtsp-server-1.0")
            return EXIT_STARTUP_FAILURE

        Gst.init(None)

        try:
            self.server = GstRtspServer.RTSPServer()
        except Exception as e:
            logger.error(f"Fail to create rtsp server: {e}")
            return EXIT_STARTUP_FAILURE
        try:
            self.mount_points = GstRtspServer.RTSPMountPoints()
        except Exception as e:
            logger.error(f"Fail to create mount points: {e}")
            return EXIT_STARTUP_FAILURE

        self.server.set_mount_points(self.mount_points)
        self.server.set_service(str(self.config.port))

        try:
            register_all(self.mount_points, self.mount_specs, self.catalog,
                         GstRtspServer.RTSPMediaFactory,
                         GstRtspServer.RTSPTransportMode.PLAY)
        except MountRegistrationError as e:
            logger.error(f"Aborting startup: {e}")
            return EXIT_STARTUP_FAILURE

        main_loop = GLib.MainLoop()
        self.loop_handle.publish(main_loop)

        if not self.server.attach(None):
            logger.error(f"Fail to attach rtsp server on port {self.config.port}")
            return EXIT_STARTUP_FAILURE

        logger.info(f"Server started successfully on port {self.config.port}")
        logger.info("Available streams:")
        for url, label in stream_urls(self.config.port, self.mount_specs, codecs=self.catalog.codecs):
            logger.info(f"  {url} ({label})")

        # A stop requested before the loop is running would be lost by
        # quit(); re-check it from inside the loop once it dispatches.
        GLib.idle_add(self._quit_if_stop_requested, main_loop)
        main_loop.run()

        logger.info("=== RTSP Test Server exiting normally ===")
        return EXIT_OK

    def _quit_if_stop_requested(self, main_loop):
        if self.loop_handle.stop_requested:
            main_loop.quit()
        return False
