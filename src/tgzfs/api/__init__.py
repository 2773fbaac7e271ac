"""
tgzfs public API namespaces.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""
