"""
Access Modes - Permissions granted through Web Access Control.
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class AccessModes:
    """Requested access for an agent on a resource."""
    read: bool = False
    write: bool = False
    append: bool = False

    def any(self) -> bool:
        """True if at least one mode is requested."""
        return self.read or self.write or self.append

    def names(self) -> List[str]:
        """ACL mode names (Read, Write, Append) in canonical order."""
        modes = []
        if self.read:
            modes.append("Read")
        if self.write:
            modes.append("Write")
        if self.append:
            modes.append("Append")
        return modes
