"""Options accepted by the uninstall entry points."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UninstallOptions:
    """
    Attributes:
        force: Remove plugins even when other installed plugins still need them
        www_dir: Web asset directory; defaults to the platform's own
        is_top_level: Set for user requests, cleared for cascaded removals
    """

    force: bool = False
    www_dir: Optional[str] = None
    is_top_level: bool = True
