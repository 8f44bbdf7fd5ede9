"""Cycle detection across nested renderer invocations.

Renderers may compile markup themselves, re-entering the transformer. The
guard tracks which renderers are currently running; entering one that is
already on the stack is a cycle in the renderer call graph. Deep but acyclic
nesting is not an error here.
"""

from dataclasses import dataclass
from typing import List, Optional, Type

from render_markup.shared.errors import InfiniteRecursionError


@dataclass(frozen=True)
class GuardFrame:
    identity: str
    component: bool = True


class GuardToken:
    """Scoped acquisition of a guard frame.

    Use as a context manager so the frame is released on every exit path.
    """

    def __init__(self, guard: "RecursionGuard", frame: GuardFrame) -> None:
        self._guard = guard
        self.frame = frame
        self.released = False

    def release(self) -> None:
        """Pop the frame. Releasing twice is a no-op."""
        if self.released:
            return
        self._guard._pop(self.frame)
        self.released = True

    def __enter__(self) -> "GuardToken":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: object,
    ) -> None:
        self.release()


class RecursionGuard:
    """Stack of in-flight renderer identities for one compilation."""

    def __init__(self) -> None:
        self._frames: List[GuardFrame] = []

    def enter(self, identity: str, component: bool = True) -> GuardToken:
        """Push a frame for a renderer about to run.

        Args:
            identity: Identity of the renderer
            component: Whether the frame belongs to a component renderer;
                only component frames are reported in recursion chains

        Returns:
            Token releasing the frame

        Raises:
            InfiniteRecursionError: If ``identity`` is already active
        """
        if self.is_active(identity):
            chain = [frame.identity for frame in self._frames if frame.component]
            chain.append(identity)
            raise InfiniteRecursionError(chain)
        frame = GuardFrame(identity, component)
        self._frames.append(frame)
        return GuardToken(self, frame)

    def is_active(self, identity: str) -> bool:
        return any(frame.identity == identity for frame in self._frames)

    @property
    def depth(self) -> int:
        return len(self._frames)

    @property
    def chain(self) -> List[str]:
        """Identities of active component frames, outermost first."""
        return [frame.identity for frame in self._frames if frame.component]

    def _pop(self, frame: GuardFrame) -> None:
        if not self._frames or self._frames[-1] is not frame:
            raise RuntimeError(f"Guard frame {frame.identity!r} released out of order")
        self._frames.pop()
