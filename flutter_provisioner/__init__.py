"""Flutter / Android workstation provisioner for Linux.

Core design goals:
- Linear, fail-fast step pipeline
- Distribution-aware package installation
- Idempotent steps (skip what is already there)
- Pinnable SDK downloads, page scraping only as a fallback
- Centralized logging
"""

__all__ = []
