"""feedscout - syndication feed discovery.

Finds the RSS, Atom and JSON feeds a web page advertises in its head section,
optionally falling back to probing well-known feed paths on the same origin.
"""

__version__ = "1.0.0"
__author__ = "feedscout contributors"

DEFAULT_USER_AGENT = f"feedscout/{__version__}"
