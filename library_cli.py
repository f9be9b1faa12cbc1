#!/usr/bin/env python3
"""
library_cli.py

Interactive console for `LibrarySystem`.

Typical usage:
    python library_cli.py --log-level INFO
    python library_cli.py --no-demo
"""

from __future__ import annotations
import argparse
import logging
from typing import Callable, Optional

from library_models import Book, Instructor, Student, ValidationError
from library_system import LibrarySystem


# ---------------- Input helpers ----------------
def input_prompt(prompt: str) -> str:
    """
    Wrapper around built-in input() that returns a stripped string and handles interrupts.

    Returns an empty string on EOF/KeyboardInterrupt.
    """
    try:
        return input(prompt).strip()
    except (EOFError, KeyboardInterrupt):
        print()
        return ""


def input_int(prompt: str) -> Optional[int]:
    try:
        return int(input_prompt(prompt))
    except ValueError:
        return None


def print_menu():
    """Print the main menu to stdout."""
    print("\n--- Library Circulation (CLI) ---")
    print("1. Register instructor")
    print("2. Register student")
    print("3. Delete person")
    print("4. Add book")
    print("5. Delete book")
    print("6. Issue loan")
    print("7. Process return")
    print("8. List persons")
    print("9. List books")
    print("10. List loans")
    print("11. Show persons holding a book")
    print("12. Edit person")
    print("0. Exit")


def _register(lib: LibrarySystem, build: Callable[[], object]) -> None:
    try:
        person = build()
    except ValidationError as exc:
        print(f"Invalid data: {exc}")
        return
    ok = lib.create_person(person)
    print("Registered." if ok else "Failed (identifier may exist).")


def _edit(lib: LibrarySystem) -> None:
    current = lib.find_person(input_prompt("Identifier of the person to edit: "))
    if current is None:
        print("Person not found.")
        return
    print(f"Editing {current.kind.lower()} {current.full_name}. Enter the new values.")
    try:
        new_data = _build_instructor() if isinstance(current, Instructor) else _build_student()
    except ValidationError as exc:
        print(f"Invalid data: {exc}")
        return
    ok = lib.edit_person(current.identifier, new_data)
    print("Updated." if ok else "Failed (identifier taken, or person holds a loan).")


def _build_instructor() -> Instructor:
    name = input_prompt("Full name: ")
    identifier = input_prompt("Identifier (e.g. 12.345.678-5): ")
    gender = input_prompt("Gender (M/F): ").upper()
    profession = input_prompt("Profession: ")
    degrees = input_prompt("Degrees (comma separated, optional): ")
    return Instructor(name, identifier, gender, profession, degrees.split(","))


def _build_student() -> Student:
    name = input_prompt("Full name: ")
    identifier = input_prompt("Identifier (e.g. 12.345.678-5): ")
    gender = input_prompt("Gender (M/F): ").upper()
    program = input_prompt("Program: ")
    return Student(name, identifier, gender, program)


def cli_loop(lib: LibrarySystem):
    """
    Interactive command-loop for the library system.

    Presents a text menu, accepts user input and invokes `LibrarySystem` methods.
    """
    while True:
        print_menu()
        try:
            choice = input("Choose (0-12): ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if choice == "0":
            print("Exiting.")
            break
        elif choice == "1":
            _register(lib, _build_instructor)
        elif choice == "2":
            _register(lib, _build_student)
        elif choice == "3":
            ok = lib.delete_person(input_prompt("Identifier: "))
            print("Deleted." if ok else "Person not found.")
        elif choice == "4":
            isbn = input_prompt("ISBN: ")
            title = input_prompt("Title: ")
            author = input_prompt("Author: ")
            total = input_int("Total copies: ")
            available = input_int("Available copies: ")
            image = input_prompt("Image (optional): ")
            try:
                book = Book(isbn, title, author, total, available, image)
            except ValidationError as exc:
                print(f"Invalid data: {exc}")
                continue
            ok = lib.create_book(book)
            print("Added." if ok else "Failed (ISBN may exist).")
        elif choice == "5":
            ok = lib.delete_book(input_prompt("ISBN: "))
            print("Deleted." if ok else "Book not found.")
        elif choice == "6":
            isbn = input_prompt("ISBN: ")
            pid = input_prompt("Identifier: ")
            days = input_int("Loan days: ")
            try:
                record, msg = lib.issue_loan(isbn, pid, days if days is not None else 0)
            except ValidationError as exc:
                print(f"Invalid data: {exc}")
                continue
            print(msg)
            if record is not None:
                print(record.format_receipt())
        elif choice == "7":
            isbn = input_prompt("ISBN: ")
            pid = input_prompt("Identifier: ")
            fee, msg = lib.process_return(isbn, pid)
            print(msg if fee is not None else f"Return failed: {msg}")
        elif choice == "8":
            report = lib.export_report_persons()
            print(f"\nPersons ({len(report)}):")
            if not report.empty:
                print(report.to_string(index=False))
        elif choice == "9":
            report = lib.export_report_books()
            print(f"\nBooks ({len(report)}):")
            if not report.empty:
                print(report.to_string(index=False))
        elif choice == "10":
            report = lib.export_report_loans()
            print(f"\nLoans ({len(report)}):")
            if not report.empty:
                print(report.to_string(index=False))
        elif choice == "11":
            holders = lib.persons_with_active_loans()
            print(f"\nPersons holding a book: {len(holders)}")
            for h in holders:
                print(f"{h['Identifier']}: {h['Name']} -> {h['ISBN']}")
        elif choice == "12":
            _edit(lib)
        else:
            print("Unknown choice. Try again.")


def seed_demo_data(lib: LibrarySystem) -> None:
    """Register a couple of people and books so the menu has something to show."""
    lib.create_person(Instructor("Maria Soto", "12.345.678-5", "F", "Engineer", ["Master", "Doctor"]))
    lib.create_person(Student("Ana Rojas", "11.111.111-1", "F", "Computer Science"))
    lib.create_person(Student("Luis Perez", "1.000.005-K", "M", "Mathematics"))
    lib.create_book(Book("978-0132350884", "Clean Code", "Robert C. Martin", 3, 3))
    lib.create_book(Book("978-0201633610", "Design Patterns", "Gamma et al.", 2, 2))
    lib.create_book(Book("978-0262033848", "Introduction to Algorithms", "Cormen et al.", 1, 1))


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Library circulation console")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="logging verbosity")
    p.add_argument("--no-demo", action="store_true", help="start with an empty library")
    return p.parse_args(argv)


def demo_run(argv=None):
    """
    Start an interactive session, seeded with demo data unless --no-demo is given.
    """
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s: %(message)s")
    lib = LibrarySystem()
    if not args.no_demo:
        seed_demo_data(lib)
    print("Welcome to the library circulation console.")
    cli_loop(lib)
    print("Goodbye.")


if __name__ == "__main__":
    demo_run()
