"""
Annotation span resolution.

Maps an offset/length span of one named version onto the set of versions
whose text shares that span.
"""

from typing import Any

from src.core.merge.base import MergeEngine
from src.utils.exceptions import NotFoundError, ValidationError
from src.utils.keys import join_vpath


class RangeResolver:
    """Asks the merge engine which versions cover a span of a base version."""

    def __init__(self, engine: MergeEngine):
        self.engine = engine

    def resolve(
        self, handle: Any, group_path: str, short_name: str, offset: int, length: int
    ) -> list[str]:
        """
        Resolve a span to the versions sharing it.

        Args:
            handle: Loaded multi-version document
            group_path: Group path of the base version
            short_name: Short name of the base version
            offset: Start of the span in the base version
            length: Length of the span

        Returns:
            Version paths in the order the engine reports them

        Raises:
            NotFoundError: If the base version isn't in the document
            ValidationError: If offset or length is negative
        """
        if offset < 0 or length < 0:
            raise ValidationError(
                f"Invalid span offset={offset} length={length}",
                context={"offset": offset, "length": length},
            )

        base = self.engine.find_version(handle, group_path, short_name)
        if base is None:
            vpath = join_vpath(group_path, short_name)
            raise NotFoundError(f"Version {vpath} not found", context={"vpath": vpath})

        return list(self.engine.versions_overlapping(handle, base, offset, length))
