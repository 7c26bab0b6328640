"""
ezluks - Open, close and format LUKS encrypted volumes

This package drives cryptsetup and the mount utilities through the
three operations needed to use an encrypted drive from the command line.
"""

__version__ = "0.1.0"
