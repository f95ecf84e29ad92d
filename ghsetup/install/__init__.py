"""
Installation of gh release assets.

This package provides:
- Asset download, extraction and tool cache registration
- Post-install verification
- The end-to-end setup orchestrator
"""

from ghsetup.install.installer import Installer, locate_tool_root
from ghsetup.install.orchestrator import SetupOrchestrator
from ghsetup.install.verifier import verify_installation

__all__ = [
    "Installer",
    "locate_tool_root",
    "SetupOrchestrator",
    "verify_installation",
]
