"""Processor interface for transforming requests before they are sent."""

from abc import ABC, abstractmethod

from reqmd.request import Request


class Processor(ABC):
    """A transform from one request to another.

    Implementations must not modify the request they are given; they
    return a new one (or the same object when nothing changes). Failures
    are reported by raising `ProcessorError`.
    """

    name: str = "processor"

    @abstractmethod
    def apply(self, request: Request) -> Request:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
