"""Release pipeline.

- tags: tag matrix derivation
- deployer: per-channel build/publish
- driver: sequential iteration over channels
- workspace: checkout handle and reset between channels
"""

from __future__ import annotations
