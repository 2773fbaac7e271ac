"""
global_config.py
Central configuration for the tgzfs library: debug level, temp directory
allocation and copy buffering.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import os


def _env_debug_level():
    value = os.environ.get('TGZFS_DEBUG_LEVEL')
    if value is None:
        return 0
    try:
        return int(value)
    except ValueError:
        return 0


class GlobalConfig:
    _defaults = {
        "debug_level": _env_debug_level(),
        "temp_dir": None,  # None means: pick per backend root
        "temp_prefix": "tmp-tgz-",
        "copy_buffer_size": 64 * 1024,
    }
    _settings = _defaults.copy()

    @classmethod
    def set(cls, key, value):
        cls._settings[key] = value

    @classmethod
    def get(cls, key):
        return cls._settings.get(key, cls._defaults.get(key))

    @classmethod
    def reset(cls, key=None):
        if key is None:
            cls._settings = cls._defaults.copy()
        else:
            if key in cls._defaults:
                cls._settings[key] = cls._defaults[key]
            else:
                cls._settings.pop(key, None)

    @classmethod
    def keys(cls):
        return sorted(set(cls._defaults) | set(cls._settings))

    @classmethod
    def set_debug_level(cls, value: int):
        cls.set("debug_level", int(value))

    @classmethod
    def get_debug_level(cls) -> int:
        return cls.get("debug_level")

    @classmethod
    def get_temp_dir(cls):
        return cls.get("temp_dir")

    @classmethod
    def set_temp_dir(cls, value):
        cls.set("temp_dir", value)

    @classmethod
    def get_temp_prefix(cls) -> str:
        return cls.get("temp_prefix")

    @classmethod
    def set_temp_prefix(cls, value: str):
        if not value or '/' in value:
            raise ValueError(f"Invalid temp prefix: {value!r}")
        cls.set("temp_prefix", value)

    @classmethod
    def get_copy_buffer_size(cls) -> int:
        return cls.get("copy_buffer_size")

    @classmethod
    def set_copy_buffer_size(cls, value: int):
        value = int(value)
        if value <= 0:
            raise ValueError("copy_buffer_size must be positive")
        cls.set("copy_buffer_size", value)
