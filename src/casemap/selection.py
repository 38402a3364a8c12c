"""Active selection: which version and tester are shown, and edit mode."""

from dataclasses import dataclass

from .status import DEFAULT_USER


@dataclass
class Selection:
    """Current (version, user, edit_mode) tuple."""

    version: str
    user: str = DEFAULT_USER
    edit_mode: bool = False

    @property
    def interactive(self) -> bool:
        """Whether case nodes accept status clicks."""
        return self.edit_mode and self.user != DEFAULT_USER
