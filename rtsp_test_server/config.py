"""
RTSP Test Server - Configuration
Layered lookup of rtsp-test-server.conf (libconfig syntax).

Only one key is understood:

    port = 8554;

The first existing file in the search path wins. If that file cannot be
parsed, the defaults are kept and later directories are NOT consulted.
"""

import logging
import os
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

import libconf

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = 'rtsp-test-server.conf'
DEFAULT_PORT = 9554


@dataclass(frozen=True)
class Config:
    port: int = DEFAULT_PORT


def config_dirs() -> List[str]:
    """Default search path: XDG user config dir, then system config dirs."""
    from gi.repository import GLib

    dirs = [GLib.get_user_config_dir()]
    dirs.extend(GLib.get_system_config_dirs())
    return [d for d in dirs if d]


def _valid_port(value) -> bool:
    # libconf parses `true` as bool, which is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return 0 < value < 65535


def load_config(search_path: Iterable[str], config: Optional[Config] = None) -> Config:
    """Resolve the configuration from the first config file found.

    Never raises on bad input: every problem is logged and the starting
    configuration (``Config()`` when not given) is returned instead.
    """
    if config is None:
        config = Config()

    dirs = list(search_path or [])
    if not dirs:
        return config

    for config_dir in dirs:
        config_file = os.path.join(config_dir, CONFIG_FILE_NAME)
        if not os.path.isfile(config_file):
            continue

        logger.info(f"Loading config \"{config_file}\"")
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = libconf.load(f, filename=config_file)
        except libconf.ConfigParseError as e:
            logger.error(f"Fail load config. {e}. {config_file}")
            return config
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Fail read config. {e}. {config_file}")
            return config

        if 'port' in data:
            port = data['port']
            if _valid_port(port):
                config = replace(config, port=int(port))
            else:
                logger.error(f"Invalid port value: {port!r}")
        return config

    return config
