"""
Shared Config Module
====================

Configuration settings used by the VirtuoHub client.

Structure:
- settings/: YAML system defaults (user overrides live in ./config/user.yaml)
"""

from pathlib import Path

SETTINGS_DIR = Path(__file__).resolve().parent / "settings"

__all__ = ["SETTINGS_DIR"]
