"""In-memory fakes used by the test suite."""

from tests.fakes.collection import FakeCollection, FakeCursor

__all__ = ["FakeCollection", "FakeCursor"]
