# ABOUTME: Canned Goodreads library export rows for testing.
# ABOUTME: Mirrors the column layout of goodreads_library_export.csv.

import csv
from pathlib import Path

GOODREADS_HEADERS = [
    "Book Id",
    "Title",
    "Author",
    "Author l-f",
    "ISBN",
    "ISBN13",
    "My Rating",
    "Exclusive Shelf",
    "Date Read",
]

GOODREADS_ROWS = [
    {
        "Book Id": "7235533",
        "Title": "The Way of Kings",
        "Author": "Brandon Sanderson",
        "Author l-f": "Sanderson, Brandon",
        "ISBN": '="0765326353"',
        "ISBN13": '="9780765326355"',
        "My Rating": "5",
        "Exclusive Shelf": "read",
        "Date Read": "2021/03/14",
    },
    {
        "Book Id": "5907",
        "Title": "The Hobbit",
        "Author": "J.R.R. Tolkien",
        "Author l-f": "Tolkien, J.R.R.",
        "ISBN": '=""',
        "ISBN13": '=""',
        "My Rating": "4",
        "Exclusive Shelf": "read",
        "Date Read": "2019/07/01",
    },
    {
        "Book Id": "44767458",
        "Title": "Dune",
        "Author": "Frank Herbert",
        "Author l-f": "Herbert, Frank",
        "ISBN": '="0441013597"',
        "ISBN13": '="9780441013593"',
        "My Rating": "5",
        "Exclusive Shelf": "read",
        "Date Read": "",
    },
    {
        "Book Id": "11297",
        "Title": "Norwegian Wood",
        "Author": "Haruki Murakami",
        "Author l-f": "Murakami, Haruki",
        "ISBN": '="0375704027"',
        "ISBN13": '="9780375704024"',
        "My Rating": "4",
        "Exclusive Shelf": "read",
        "Date Read": "2020/01/05",
    },
    {
        "Book Id": "54493401",
        "Title": "Project Hail Mary",
        "Author": "Andy Weir",
        "Author l-f": "Weir, Andy",
        "ISBN": '="0593135202"',
        "ISBN13": '="9780593135204"',
        "My Rating": "0",
        "Exclusive Shelf": "to-read",
        "Date Read": "",
    },
    {
        "Book Id": "1",
        "Title": "",
        "Author": "Anonymous",
        "Author l-f": "Anonymous",
        "ISBN": '=""',
        "ISBN13": '=""',
        "My Rating": "0",
        "Exclusive Shelf": "read",
        "Date Read": "",
    },
]


def write_goodreads_csv(path: Path, rows: list[dict[str, str]]) -> Path:
    """Write rows in the Goodreads export layout."""
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=GOODREADS_HEADERS)
        writer.writeheader()
        writer.writerows(rows)
    return path
