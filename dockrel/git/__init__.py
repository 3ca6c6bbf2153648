"""Git operations used while publishing a channel.

Usage:
    from dockrel.git import Repository

    repo = Repository(executor)
    repo.tag_force("1.2.3-71")
"""

from dockrel.git.repository import Repository

__all__ = ["Repository"]
