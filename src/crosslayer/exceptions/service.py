"""External service exceptions."""

from typing import Optional, Sequence

from .base import CrossLayerError


class ServiceError(CrossLayerError):
    """Raised when an external command (change lister, git) fails.

    Always fatal: the run stops without emitting partial output.
    """

    def __init__(
        self,
        command: Sequence[str],
        reason: str,
        identifier: Optional[str] = None,
        output: str = "",
    ):
        super().__init__(
            f"External command failed: {command[0]}",
            details={
                "command": " ".join(command),
                "reason": reason,
                "id": identifier or None,
                "output": output.strip()[:500] or None,
            },
        )
        self.command = list(command)
        self.reason = reason
        self.identifier = identifier
        self.output = output
