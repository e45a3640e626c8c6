"""Comment buffering shared by rule, ruleset and file scope."""

from dataclasses import dataclass, field

from dqdlpy.ast import Comment, CommentGroup
from dqdlpy.text import Pos


@dataclass(slots=True)
class CommentBuffer:
    """Pending run of comments on consecutive lines.

    A run becomes the description of the node starting on the line right after its
    last comment. Runs that are broken by a gap, or that do not precede a node, are
    filed into `floating`, the free-floating groups of the enclosing container.
    """

    floating: list[CommentGroup]
    _run: list[Comment] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self._run

    def add(self, comment: Comment) -> None:
        if self._run and self._run[-1].pos.line + 1 != comment.pos.line:
            self.spill()
        self._run.append(comment)

    def take_description(self, node_pos: Pos) -> CommentGroup | None:
        """Hand the run over as description of the node at `node_pos`, or spill it."""
        if self._run and self._run[-1].pos.line + 1 == node_pos.line:
            description = CommentGroup.of(self._run)
            self._run = []
            return description
        self.spill()
        return None

    def spill(self) -> None:
        group = CommentGroup.of(self._run)
        if group is not None:
            self.floating.append(group)
        self._run = []

    def child(self) -> "CommentBuffer":
        """Fresh buffer filing into the same container."""
        return CommentBuffer(self.floating)
