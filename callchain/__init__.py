"""
callchain - static call chain analyzer for controller actions
"""

__version__ = "0.1.0"
