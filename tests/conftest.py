import datetime

import pytest

from library_models import Book, Instructor, Student
from library_system import LibrarySystem

ANA_ID = "11.111.111-1"
MARIA_ID = "12.345.678-5"


class FakeClock:
    """Callable clock that tests can move forward."""

    def __init__(self, start: datetime.date):
        self.current = start

    def __call__(self) -> datetime.date:
        return self.current

    def advance(self, days: int) -> None:
        self.current += datetime.timedelta(days=days)


@pytest.fixture
def clock():
    return FakeClock(datetime.date(2026, 1, 10))


@pytest.fixture
def lib(clock):
    return LibrarySystem(clock=clock)


@pytest.fixture
def ana():
    return Student("Ana Rojas", ANA_ID, "F", "Computer Science")


@pytest.fixture
def maria():
    return Instructor("Maria Soto", MARIA_ID, "F", "Engineer", ["Master"])


@pytest.fixture
def stocked_lib(lib, ana, maria):
    """Library with one student, one instructor, a single-copy and a two-copy book."""
    lib.create_person(ana)
    lib.create_person(maria)
    lib.create_book(Book("B1", "Clean Code", "Robert C. Martin", 1, 1))
    lib.create_book(Book("B2", "Design Patterns", "Gamma et al.", 2, 2))
    return lib
