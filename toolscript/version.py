"""Program version information."""

from __future__ import annotations

from dataclasses import dataclass

TAG = "v0.0.0-dev"
PROGRAM_NAME = "gptscript"

# Filled in at build time with the source revision.
COMMIT = ""
DIRTY = False


@dataclass(frozen=True)
class Version:
    """A release tag with optional source revision."""

    tag: str
    commit: str = ""
    dirty: bool = False

    def __str__(self) -> str:
        if len(self.commit) < 12:
            return self.tag
        if self.dirty:
            return f"{self.tag}-{self.commit[:8]}-dirty"
        return f"{self.tag}+{self.commit[:8]}"


def get() -> Version:
    """Return the version of this build."""
    return Version(TAG, COMMIT, DIRTY)