# ============================================================================
# VERSION - LINKER SERVER
# ============================================================================
"""
Release version of the Linker Server, bumped by hand on each release.

USER_AGENT is sent on every outbound request to the Catalyst and the
authorizations source.
"""
__version__ = "1.0.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

BUILD_DATE = "2026-10-19"

CODENAME = "Linker Server"
USER_AGENT = f"linker-server/{__version__}"
