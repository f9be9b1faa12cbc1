"""
library_models.py

Catalog entities for the circulation workflow: people who borrow (instructors
and students), books with copy counts, and the loan records kept in the ledger.

Every constructor and setter validates its input and raises `ValidationError`
on bad values, so an entity is never left half-updated.
"""

from __future__ import annotations
import datetime
from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, List, Optional, Union

import identifier_validator

# Configuration
LATE_FEE_PER_DAY = 1000
INSTRUCTOR_MAX_LOAN_DAYS = 20
STUDENT_MAX_LOAN_DAYS = 10
RECEIPT_DATE_FORMAT = "%d/%m/%Y"


class ValidationError(ValueError):
    """A supplied value violates an entity invariant."""


class StateError(RuntimeError):
    """An operation is impossible in the entity's current state."""


class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"


def _require_text(value: Optional[str], label: str) -> str:
    """Return `value` stripped, raising ValidationError if it is None or blank."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{label} must not be empty")
    return str(value).strip()


def _require_int(value, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{label} must be an integer")
    return value


# ---------------- People ----------------
class Person(ABC):
    """
    A registered borrower.

    Holds at most one active loan at a time; `loan_isbn` is None while the
    person is free and the held book's ISBN otherwise. The loan state is
    changed only by `LibrarySystem` while issuing or returning a loan.
    """

    kind = "Person"

    def __init__(self, full_name: str, identifier: str, gender: Union[Gender, str]):
        self.full_name = full_name
        self.identifier = identifier
        self.gender = gender
        self._loan_isbn: Optional[str] = None

    @abstractmethod
    def max_loan_days(self) -> int:
        """Maximum loan period, in days, granted to this kind of person."""

    # -------- validated fields --------
    @property
    def full_name(self) -> str:
        return self._full_name

    @full_name.setter
    def full_name(self, value: str) -> None:
        self._full_name = _require_text(value, "Full name")

    @property
    def identifier(self) -> str:
        return self._identifier

    @identifier.setter
    def identifier(self, value: str) -> None:
        if not identifier_validator.validate_format(value):
            raise ValidationError(f"Invalid identifier format: {value!r} (expected XXXXXXXX-X)")
        if not identifier_validator.validate_check_digit(value):
            raise ValidationError(f"Invalid identifier check digit: {value!r}")
        self._identifier = value

    @property
    def gender(self) -> Gender:
        return self._gender

    @gender.setter
    def gender(self, value: Union[Gender, str]) -> None:
        try:
            self._gender = Gender(value)
        except ValueError:
            raise ValidationError(f"Gender must be 'M' or 'F', got {value!r}") from None

    # -------- loan state --------
    @property
    def loan_isbn(self) -> Optional[str]:
        return self._loan_isbn

    def has_active_loan(self) -> bool:
        return self._loan_isbn is not None

    def set_active_loan(self, isbn: str) -> None:
        self._loan_isbn = _require_text(isbn, "ISBN")

    def clear_active_loan(self) -> None:
        self._loan_isbn = None

    def __repr__(self) -> str:
        return (f"{self.kind}(full_name={self.full_name!r}, identifier={self.identifier!r}, "
                f"gender={self.gender.value!r}, loan_isbn={self.loan_isbn!r})")


class Instructor(Person):
    """Teaching staff; may borrow for up to 20 days."""

    kind = "Instructor"

    def __init__(self, full_name: str, identifier: str, gender: Union[Gender, str],
                 profession: str, degrees: Optional[Iterable[str]] = None):
        super().__init__(full_name, identifier, gender)
        self.profession = profession
        self.degrees = degrees or []

    def max_loan_days(self) -> int:
        return INSTRUCTOR_MAX_LOAN_DAYS

    @property
    def profession(self) -> str:
        return self._profession

    @profession.setter
    def profession(self, value: str) -> None:
        self._profession = _require_text(value, "Profession")

    @property
    def degrees(self) -> List[str]:
        return list(self._degrees)

    @degrees.setter
    def degrees(self, values: Iterable[str]) -> None:
        self._degrees: List[str] = []
        for degree in values:
            self.add_degree(degree)

    def add_degree(self, degree: Optional[str]) -> None:
        """
        Append an academic degree (e.g. "Master", "Doctor").

        Blank values and degrees already listed are ignored; insertion order is kept.
        """
        if degree is None:
            return
        name = degree.strip()
        if name and name not in self._degrees:
            self._degrees.append(name)

    def __repr__(self) -> str:
        return (f"Instructor(full_name={self.full_name!r}, identifier={self.identifier!r}, "
                f"gender={self.gender.value!r}, profession={self.profession!r}, "
                f"degrees={self.degrees!r}, loan_isbn={self.loan_isbn!r})")


class Student(Person):
    """Enrolled student; may borrow for up to 10 days."""

    kind = "Student"

    def __init__(self, full_name: str, identifier: str, gender: Union[Gender, str], program: str):
        super().__init__(full_name, identifier, gender)
        self.program = program

    def max_loan_days(self) -> int:
        return STUDENT_MAX_LOAN_DAYS

    @property
    def program(self) -> str:
        return self._program

    @program.setter
    def program(self, value: str) -> None:
        self._program = _require_text(value, "Program")

    def __repr__(self) -> str:
        return (f"Student(full_name={self.full_name!r}, identifier={self.identifier!r}, "
                f"gender={self.gender.value!r}, program={self.program!r}, "
                f"loan_isbn={self.loan_isbn!r})")


# ---------------- Books ----------------
class Book:
    """
    A catalogued title with a number of physical copies.

    Invariant: 0 <= available_copies <= total_copies after every mutation.
    A new book must start with at least one available copy.
    """

    def __init__(self, isbn: str, title: str, author: str, total_copies: int,
                 available_copies: int, image: Optional[str] = None):
        total_copies = _require_int(total_copies, "Total copies")
        available_copies = _require_int(available_copies, "Available copies")
        if total_copies <= 0:
            raise ValidationError("Total copies must be greater than zero")
        if available_copies <= 0:
            raise ValidationError("Available copies must be greater than zero")
        if available_copies > total_copies:
            raise ValidationError("Available copies cannot exceed total copies")

        self.isbn = isbn
        self.title = title
        self.author = author
        self._total_copies = total_copies
        self._available_copies = available_copies
        self.image = image

    @property
    def isbn(self) -> str:
        return self._isbn

    @isbn.setter
    def isbn(self, value: str) -> None:
        self._isbn = _require_text(value, "ISBN")

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        self._title = _require_text(value, "Title")

    @property
    def author(self) -> str:
        return self._author

    @author.setter
    def author(self, value: str) -> None:
        self._author = _require_text(value, "Author")

    @property
    def total_copies(self) -> int:
        return self._total_copies

    @total_copies.setter
    def total_copies(self, value: int) -> None:
        value = _require_int(value, "Total copies")
        if value <= 0:
            raise ValidationError("Total copies must be greater than zero")
        if value < self._available_copies:
            raise ValidationError("Total copies cannot be lower than available copies")
        self._total_copies = value

    @property
    def available_copies(self) -> int:
        return self._available_copies

    @available_copies.setter
    def available_copies(self, value: int) -> None:
        value = _require_int(value, "Available copies")
        if value < 0:
            raise ValidationError("Available copies cannot be negative")
        if value > self._total_copies:
            raise ValidationError("Available copies cannot exceed total copies")
        self._available_copies = value

    @property
    def image(self) -> str:
        return self._image

    @image.setter
    def image(self, value: Optional[str]) -> None:
        self._image = value.strip() if value is not None else ""

    def has_available(self) -> bool:
        return self._available_copies > 0

    def check_out(self) -> None:
        """Take one copy off the shelf. Raises StateError when none is left."""
        if not self.has_available():
            raise StateError(f"No copies of {self.isbn} available for loan")
        self._available_copies -= 1

    def check_in(self) -> None:
        """Put one copy back. Raises StateError when every copy is already on the shelf."""
        if self._available_copies >= self._total_copies:
            raise StateError(f"All copies of {self.isbn} are already available")
        self._available_copies += 1

    def __repr__(self) -> str:
        return (f"Book(isbn={self.isbn!r}, title={self.title!r}, author={self.author!r}, "
                f"total_copies={self.total_copies}, available_copies={self.available_copies}, "
                f"image={self.image!r})")


# ---------------- Ledger ----------------
class LoanRecord:
    """
    One issued loan, kept in the ledger after the book comes back.

    The record is immutable; `compute_fee` only reads it, so it can be asked
    about any hypothetical return date.
    """

    def __init__(self, isbn: str, person_id: str, days: int,
                 loan_date: Optional[datetime.date] = None):
        """
        Args:
            isbn: ISBN of the borrowed book.
            person_id: identifier of the borrower.
            days: loan duration, must be positive.
            loan_date: date the loan starts; today when omitted.
        """
        days = _require_int(days, "Loan days")
        if days <= 0:
            raise ValidationError("Loan days must be greater than zero")
        self._isbn = _require_text(isbn, "ISBN")
        self._person_id = _require_text(person_id, "Person identifier")
        self._days = days
        self._loan_date = _as_date(loan_date) if loan_date is not None else datetime.date.today()
        self._due_date = self._loan_date + datetime.timedelta(days=days)

    @property
    def isbn(self) -> str:
        return self._isbn

    @property
    def person_id(self) -> str:
        return self._person_id

    @property
    def days(self) -> int:
        return self._days

    @property
    def loan_date(self) -> datetime.date:
        return self._loan_date

    @property
    def due_date(self) -> datetime.date:
        return self._due_date

    def days_late(self, return_date: Optional[datetime.date] = None) -> int:
        """Whole days between the due date and `return_date` (negative if early)."""
        when = _as_date(return_date) if return_date is not None else datetime.date.today()
        return (when - self._due_date).days

    def compute_fee(self, return_date: Optional[datetime.date] = None,
                    fee_per_day: int = LATE_FEE_PER_DAY) -> int:
        """
        Late fee owed if the book were returned on `return_date` (today by default).

        Returns `days_late * fee_per_day` when the return is after the due date, else 0.
        """
        late = self.days_late(return_date)
        if late > 0:
            return late * fee_per_day
        return 0

    def format_receipt(self) -> str:
        """Printable loan card."""
        width = 39
        lines = [
            "╔" + "═" * width + "╗",
            "║" + "LOAN RECEIPT - LIBRARY".center(width) + "║",
            "╠" + "═" * width + "╣",
            f"║ {'ISBN: ' + self.isbn:<{width - 2}} ║",
            f"║ {'Borrower ID: ' + self.person_id:<{width - 2}} ║",
            f"║ {'Loan date: ' + self.loan_date.strftime(RECEIPT_DATE_FORMAT):<{width - 2}} ║",
            f"║ {'Days: ' + str(self.days):<{width - 2}} ║",
            f"║ {'Due date: ' + self.due_date.strftime(RECEIPT_DATE_FORMAT):<{width - 2}} ║",
            "╚" + "═" * width + "╝",
        ]
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format_receipt()

    def __repr__(self) -> str:
        return (f"LoanRecord(isbn={self.isbn!r}, person_id={self.person_id!r}, "
                f"loan_date={self.loan_date.isoformat()}, days={self.days}, "
                f"due_date={self.due_date.isoformat()})")


def _as_date(value: Union[datetime.date, datetime.datetime]) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    return value
