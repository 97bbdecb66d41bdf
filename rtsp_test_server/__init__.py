"""
RTSP Test Server
Reference RTSP server publishing synthetic test streams (GStreamer).

Version: 1.0.0
"""

VERSION = '1.0.0'
