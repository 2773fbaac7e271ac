"""
Configuration operations for tgzfs.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from tgzfs.core.global_config import GlobalConfig

_SETTERS = {
    'debug_level': GlobalConfig.set_debug_level,
    'temp_dir': GlobalConfig.set_temp_dir,
    'temp_prefix': GlobalConfig.set_temp_prefix,
    'copy_buffer_size': GlobalConfig.set_copy_buffer_size,
}


class ConfigAPI:
    """
    tgzfs Public API: Configuration Operations

    Provides unified access to the global tgzfs configuration (debug level,
    temp directory location and prefix, copy buffer size).

    Examples:
        config = ConfigAPI()
        config.debug_level = 2
        config['temp_prefix'] = 'unpack-'
        x = config.copy_buffer_size
        config.reset('temp_prefix')
    """

    def set(self, key, value):
        """
        Set a global config value by key. Known keys are validated.
        """
        setter = _SETTERS.get(key)
        if setter is not None:
            setter(value)
        elif key in GlobalConfig.keys():
            GlobalConfig.set(key, value)
        else:
            raise KeyError(f"No config for key '{key}'")

    def get(self, key):
        if key not in GlobalConfig.keys():
            raise KeyError(f"No config for key '{key}'")
        return GlobalConfig.get(key)

    def reset(self, key=None):
        """
        Reset all global config, or just a single key if provided.
        """
        GlobalConfig.reset(key)

    def get_debug_level(self) -> int:
        return GlobalConfig.get_debug_level()

    def set_debug_level(self, value: int):
        GlobalConfig.set_debug_level(value)

    def __getattr__(self, key):
        if key.startswith('_'):
            raise AttributeError(key)
        try:
            return self.get(key)
        except KeyError:
            raise AttributeError(f"No config for key '{key}'") from None

    def __setattr__(self, key, value):
        try:
            self.set(key, value)
        except KeyError:
            raise AttributeError(f"No config for key '{key}'") from None

    def __getitem__(self, key):
        return self.get(key)

    def __setitem__(self, key, value):
        self.set(key, value)

    def __iter__(self):
        return iter(GlobalConfig.keys())

    def __len__(self):
        return len(GlobalConfig.keys())
