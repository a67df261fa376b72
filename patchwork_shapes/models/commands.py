"""
Named transform commands.
Maps textual commands such as "rotate 1.5708 10 10" onto the transform
methods shared by every shape and composite.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from patchwork_shapes.models.shape import Shape, ShapeError
from patchwork_shapes.utils.logger import get_logger

# Configure logger
logger = get_logger(__name__)


class TransformKind(Enum):
    """Enum for transform names."""
    ROTATE = "rotate"
    HOMOTHETY = "homothety"
    TRANSLATE = "translate"
    AXIAL_SYM = "axial_sym"
    CENTRAL_SYM = "central_sym"
    UNKNOWN = "unknown"

    @classmethod
    def from_name(cls, name: str) -> 'TransformKind':
        """Look up a transform by name, UNKNOWN when not recognised."""
        for kind in cls:
            if kind.value == name and kind is not cls.UNKNOWN:
                return kind
        return cls.UNKNOWN


# Accepted argument counts per transform
_ARITY = {
    TransformKind.ROTATE: (1, 3),
    TransformKind.HOMOTHETY: (1, 3),
    TransformKind.TRANSLATE: (2,),
    TransformKind.CENTRAL_SYM: (2,),
    TransformKind.AXIAL_SYM: (4,),
}


class CommandError(ShapeError):
    """Exception raised for malformed or unknown transform commands."""
    pass


@dataclass
class TransformCommand:
    """A parsed transform command."""
    kind: TransformKind
    args: List[float] = field(default_factory=list)

    def __str__(self) -> str:
        return " ".join([self.kind.value] + [f"{a:g}" for a in self.args])


def parse_command(text: str) -> TransformCommand:
    """
    Parse a textual transform command.

    Args:
        text: Command name followed by its numeric arguments, e.g.
            "translate 5 -2" or "axial_sym 0 0 1 0"

    Returns:
        Parsed command

    Raises:
        CommandError: If the name is unknown, an argument is not a finite
            number or the argument count does not match the command
    """
    tokens = text.split()
    if not tokens:
        raise CommandError("Empty transform command")

    kind = TransformKind.from_name(tokens[0])
    if kind is TransformKind.UNKNOWN:
        raise CommandError(f"Unknown transform: {tokens[0]!r}")

    args = []
    for token in tokens[1:]:
        try:
            value = float(token)
        except ValueError:
            raise CommandError(f"Invalid argument for {kind.value}: {token!r}")
        if not math.isfinite(value):
            raise CommandError(f"Invalid argument for {kind.value}: {token!r}")
        args.append(value)

    if len(args) not in _ARITY[kind]:
        expected = " or ".join(str(n) for n in _ARITY[kind])
        raise CommandError(
            f"{kind.value} takes {expected} arguments, got {len(args)}"
        )

    return TransformCommand(kind, args)


def apply_command(target: Shape, command) -> Shape:
    """
    Apply a transform command to a shape or composite.

    Args:
        target: Shape or Image to transform in place
        command: TransformCommand or command string

    Returns:
        The transformed target
    """
    if isinstance(command, str):
        command = parse_command(command)

    kind = command.kind
    args = command.args
    logger.debug(f"Applying '{command}' to {target.type.value}")

    if kind is TransformKind.TRANSLATE:
        return target.translate((args[0], args[1]))
    if kind is TransformKind.CENTRAL_SYM:
        return target.central_sym((args[0], args[1]))
    if kind is TransformKind.AXIAL_SYM:
        return target.axial_sym((args[0], args[1]), (args[2], args[3]))

    center = (args[1], args[2]) if len(args) == 3 else None
    if kind is TransformKind.ROTATE:
        return target.rotate(args[0], center)
    if kind is TransformKind.HOMOTHETY:
        return target.homothety(args[0], center)

    raise CommandError(f"Cannot apply transform: {kind.value}")
