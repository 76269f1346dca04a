"""An error boundary around a unit of work.

The boundary is either ``OK`` or ``FAILED``. In ``OK`` it runs the work and
hands back its result. When the work raises, the error is logged, the
boundary moves to ``FAILED`` and the fallback is returned instead. While
failed the work is not attempted again until ``reset`` is called.
"""
import logging
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

log = logging.getLogger(__name__)

T = TypeVar('T')


class BoundaryState(str, Enum):
    OK = 'ok'
    FAILED = 'failed'


class ErrorBoundary(Generic[T]):
    def __init__(self, fallback: Callable[[Exception], T], name: str = 'boundary'):
        self.fallback = fallback
        self.name = name
        self.state = BoundaryState.OK
        self.error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.state == BoundaryState.FAILED

    def run(self, work: Callable[..., T], *args, **kwargs) -> T:
        if self.failed:
            return self.fallback(self.error)
        try:
            return work(*args, **kwargs)
        except Exception as ex:
            log.error("%s caught an error: %s", self.name, ex, exc_info=True)
            self.state = BoundaryState.FAILED
            self.error = ex
            return self.fallback(ex)

    def reset(self) -> None:
        self.state = BoundaryState.OK
        self.error = None
