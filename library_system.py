"""
library_system.py

In-memory circulation engine: registers people and books, issues loans
against availability and entitlement rules, and processes returns with a
fixed per-day late fee.
"""

from __future__ import annotations
import datetime
import logging
from typing import Callable, Dict, List, Optional, Tuple

import pandas as pd

from library_models import (LATE_FEE_PER_DAY, Book, Instructor, LoanRecord, Person,
                            StateError, Student)

logger = logging.getLogger("LibrarySystem")

# Failure reasons reported by issue_loan / process_return
BOOK_NOT_FOUND = "book not found"
NO_COPIES_AVAILABLE = "no copies available"
PERSON_NOT_FOUND = "person not found"
ALREADY_HOLDS_LOAN = "person already holds a loan"
EXCEEDS_MAX_PERIOD = "exceeds maximum period"
NOT_HOLDING_BOOK = "not holding this book"
RECORD_MISSING = "record missing"
RECORD_INCONSISTENT = "record inconsistent"


class LibrarySystem:
    """
    LibrarySystem owns every person, book and loan record of one library.

    People and books are keyed by identifier and ISBN; the loan ledger is
    append-only and keeps records after the book is returned. Business-rule
    refusals are returned to the caller as values, while invalid entity data
    raises `ValidationError` from the entity constructors.
    """

    def __init__(self, clock: Optional[Callable[[], datetime.date]] = None,
                 late_fee_per_day: int = LATE_FEE_PER_DAY):
        """
        Initialize an empty LibrarySystem.

        Args:
            clock: callable returning the current date; `datetime.date.today` by default.
            late_fee_per_day: amount charged per day a book is returned late.
        """
        self.clock = clock or datetime.date.today
        self.late_fee_per_day = int(late_fee_per_day)

        self._persons: Dict[str, Person] = {}
        self._books: Dict[str, Book] = {}
        self._loans: List[LoanRecord] = []

    def today(self) -> datetime.date:
        return self.clock()

    # ---------------- People ----------------
    def create_person(self, person: Optional[Person]) -> bool:
        """
        Register a new person.

        Returns True on success, False if the identifier is already registered.
        """
        if person is None:
            return False
        if person.identifier in self._persons:
            logger.debug("Attempt to register existing person: %s", person.identifier)
            return False
        self._persons[person.identifier] = person
        logger.info("Registered %s %s", person.kind.lower(), person.identifier)
        return True

    def edit_person(self, current_id: str, new_data: Optional[Person]) -> bool:
        """
        Update a registered person with the values carried by `new_data`.

        Name, identifier and gender are always copied; profession/degrees or
        program are copied when both objects are the same kind of person.
        Returns False if the person is unknown, the new identifier belongs to
        someone else, or the identifier would change while a loan is active.
        """
        person = self._persons.get(current_id)
        if person is None or new_data is None:
            logger.warning("Person not found for edit: %s", current_id)
            return False

        new_id = new_data.identifier
        if new_id != current_id:
            if new_id in self._persons:
                logger.debug("Edit rejected, identifier already registered: %s", new_id)
                return False
            if person.has_active_loan():
                logger.warning("Edit rejected, %s holds %s", current_id, person.loan_isbn)
                return False

        person.full_name = new_data.full_name
        person.identifier = new_id
        person.gender = new_data.gender
        if isinstance(person, Instructor) and isinstance(new_data, Instructor):
            person.profession = new_data.profession
            person.degrees = new_data.degrees
        elif isinstance(person, Student) and isinstance(new_data, Student):
            person.program = new_data.program

        if new_id != current_id:
            del self._persons[current_id]
            self._persons[new_id] = person
        logger.info("Edited person %s", new_id)
        return True

    def delete_person(self, identifier: str) -> bool:
        """
        Remove a person. Ledger entries that reference them are kept.

        Returns True if the person existed.
        """
        if self._persons.pop(identifier, None) is None:
            logger.warning("Person not found: %s", identifier)
            return False
        logger.info("Deleted person %s", identifier)
        return True

    def find_person(self, identifier: Optional[str]) -> Optional[Person]:
        if identifier is None:
            return None
        return self._persons.get(identifier)

    def list_persons(self) -> List[Person]:
        return list(self._persons.values())

    # ---------------- Books ----------------
    def create_book(self, book: Optional[Book]) -> bool:
        """
        Add a new book to the catalog.

        Returns True on success, False if a book with the same ISBN already exists.
        """
        if book is None:
            return False
        if book.isbn in self._books:
            logger.debug("Attempt to add existing book: %s", book.isbn)
            return False
        self._books[book.isbn] = book
        logger.info("Added book %s (%d copies)", book.isbn, book.total_copies)
        return True

    def delete_book(self, isbn: str) -> bool:
        """Remove a book from the catalog. Returns True if it existed."""
        if self._books.pop(isbn, None) is None:
            logger.warning("Book not found: %s", isbn)
            return False
        logger.info("Deleted book %s", isbn)
        return True

    def find_book(self, isbn: Optional[str]) -> Optional[Book]:
        if isbn is None:
            return None
        return self._books.get(isbn)

    def list_books(self) -> List[Book]:
        return list(self._books.values())

    # ---------------- Loans ----------------
    def issue_loan(self, isbn: str, person_id: str, days: int) -> Tuple[Optional[LoanRecord], str]:
        """
        Lend one copy of a book to a person.

        Checks, in order: the book exists, it has a copy available, the person
        exists, the person holds no other loan, and `days` is within the
        person's entitlement. The first failing check aborts with no changes.

        Returns (record, message) on success and (None, reason) on failure,
        where reason is one of the module-level failure constants.
        Raises ValidationError if `days` is not a positive integer.
        """
        book = self._books.get(isbn)
        if book is None:
            logger.warning("Loan refused, book not found: %s", isbn)
            return None, BOOK_NOT_FOUND
        if not book.has_available():
            logger.warning("Loan refused, no copies of %s available", isbn)
            return None, NO_COPIES_AVAILABLE
        person = self._persons.get(person_id)
        if person is None:
            logger.warning("Loan refused, person not found: %s", person_id)
            return None, PERSON_NOT_FOUND
        if person.has_active_loan():
            logger.warning("Loan refused, %s already holds %s", person_id, person.loan_isbn)
            return None, ALREADY_HOLDS_LOAN
        if days > person.max_loan_days():
            logger.warning("Loan refused, %d days exceeds the %d-day maximum for %s",
                           days, person.max_loan_days(), person_id)
            return None, EXCEEDS_MAX_PERIOD

        # a bad duration raises here, before any mutation
        record = LoanRecord(isbn, person_id, days, loan_date=self.today())
        book.check_out()
        person.set_active_loan(isbn)
        self._loans.append(record)

        logger.info("Loaned %s to %s until %s", isbn, person_id, record.due_date.isoformat())
        return record, f"Book '{book.title}' issued to {person.full_name}. Due on {record.due_date.isoformat()}."

    def process_return(self, isbn: str, person_id: str) -> Tuple[Optional[int], str]:
        """
        Take a book back from a person and compute the late fee.

        Checks, in order: the book exists, the person exists, the person holds
        this ISBN, and the ledger has a matching record. The fee is computed
        against the current date from the most recent matching record, which
        stays in the ledger unchanged.

        Returns (fee, message) on success and (None, reason) on failure.
        """
        book = self._books.get(isbn)
        if book is None:
            logger.warning("Return refused, book not found: %s", isbn)
            return None, BOOK_NOT_FOUND
        person = self._persons.get(person_id)
        if person is None:
            logger.warning("Return refused, person not found: %s", person_id)
            return None, PERSON_NOT_FOUND
        if person.loan_isbn != isbn:
            logger.warning("Return refused, %s does not hold %s", person_id, isbn)
            return None, NOT_HOLDING_BOOK
        record = self.find_loan(isbn, person_id)
        if record is None:
            logger.warning("Return refused, no ledger record for %s / %s", isbn, person_id)
            return None, RECORD_MISSING

        fee = record.compute_fee(self.today(), fee_per_day=self.late_fee_per_day)
        try:
            book.check_in()
        except StateError as exc:
            logger.warning("Return refused for %s / %s: %s", isbn, person_id, exc)
            return None, RECORD_INCONSISTENT
        person.clear_active_loan()

        logger.info("Book %s returned by %s (fee %d)", isbn, person_id, fee)
        return fee, f"Book '{book.title}' returned by {person.full_name}. Fee: {fee}."

    def find_loan(self, isbn: str, person_id: str) -> Optional[LoanRecord]:
        """Most recent ledger record for the given book and person, or None."""
        for record in reversed(self._loans):
            if record.isbn == isbn and record.person_id == person_id:
                return record
        return None

    def list_loans(self) -> List[LoanRecord]:
        return list(self._loans)

    # ---------------- Reports / Queries ----------------
    def persons_with_active_loans(self) -> List[Dict]:
        """
        Return the people currently holding a book.

        Each entry contains the identifier, the name and the held ISBN.
        """
        return [{"Identifier": p.identifier, "Name": p.full_name, "ISBN": p.loan_isbn}
                for p in self._persons.values() if p.has_active_loan()]

    def export_report_books(self) -> pd.DataFrame:
        """
        Produce a DataFrame of the catalog with copy counts.

        Columns: ISBN, Title, Author, Total, Available, OnLoan.
        """
        rows = [{
            "ISBN": b.isbn,
            "Title": b.title,
            "Author": b.author,
            "Total": b.total_copies,
            "Available": b.available_copies,
            "OnLoan": b.total_copies - b.available_copies,
        } for b in self._books.values()]
        return pd.DataFrame(rows, columns=["ISBN", "Title", "Author", "Total", "Available", "OnLoan"])

    def export_report_persons(self) -> pd.DataFrame:
        """
        Build a DataFrame summarizing registered people and their loan state.

        Columns: Identifier, Name, Type, Gender, MaxLoanDays, ActiveLoan (ISBN or empty).
        """
        rows = [{
            "Identifier": p.identifier,
            "Name": p.full_name,
            "Type": p.kind,
            "Gender": p.gender.value,
            "MaxLoanDays": p.max_loan_days(),
            "ActiveLoan": p.loan_isbn or "",
        } for p in self._persons.values()]
        return pd.DataFrame(rows, columns=["Identifier", "Name", "Type", "Gender", "MaxLoanDays", "ActiveLoan"])

    def export_report_loans(self, as_of: Optional[datetime.date] = None) -> pd.DataFrame:
        """
        Build a DataFrame of the ledger, one row per issued loan.

        `Fee` is what a return on `as_of` (today by default) would cost for each
        record; it does not tell whether the loan has already been closed.
        """
        when = as_of or self.today()
        rows = [{
            "ISBN": r.isbn,
            "Identifier": r.person_id,
            "LoanDate": r.loan_date,
            "Days": r.days,
            "DueDate": r.due_date,
            "Fee": r.compute_fee(when, fee_per_day=self.late_fee_per_day),
        } for r in self._loans]
        out = pd.DataFrame(rows, columns=["ISBN", "Identifier", "LoanDate", "Days", "DueDate", "Fee"])
        out["LoanDate"] = pd.to_datetime(out["LoanDate"])
        out["DueDate"] = pd.to_datetime(out["DueDate"])
        return out
