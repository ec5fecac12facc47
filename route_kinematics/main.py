"""Package entry point: ``python -m route_kinematics``."""

from typing import Optional, Sequence

from .tools.export_route import main as export_main


def main(argv: Optional[Sequence[str]] = None) -> int:
    return export_main(argv)
