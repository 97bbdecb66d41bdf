#!/usr/bin/env python3
"""
rtsp-test-server

Reference RTSP server with synthetic test streams:
    rtsp://<host>:9554/test      H.264 + A-law
    rtsp://<host>:9554/test-vp8  VP8 + Opus

The port can be overridden with `port = N;` in rtsp-test-server.conf found in
the XDG config directories. Stop with SIGINT/SIGTERM.
"""

import logging
import sys

from rtsp_test_server import VERSION
from rtsp_test_server.config import config_dirs, load_config
from rtsp_test_server.log import setup_logging
from rtsp_test_server.server import RtspTestServer
from rtsp_test_server.signals import LoopHandle, SignalGovernor

logger = logging.getLogger('rtsp_test_server')


def _search_path():
    try:
        return config_dirs()
    except (ImportError, ValueError) as e:
        logger.error(f"Cannot determine config directories ({e}), using defaults")
        return []


def main() -> int:
    setup_logging()

    loop_handle = LoopHandle()
    governor = SignalGovernor(loop_handle)
    governor.install()

    logger.info(f"=== RTSP Test Server starting (version {VERSION}) ===")

    config = load_config(_search_path())

    try:
        return RtspTestServer(config, loop_handle=loop_handle).run()
    finally:
        governor.uninstall()


if __name__ == "__main__":
    sys.exit(main())
