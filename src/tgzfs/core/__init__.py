"""
tgzfs core: backend contract, capabilities, paths, errors, config and logging.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""
