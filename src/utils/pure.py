import csv
import io
from typing import Callable, List, Literal, Optional, Sequence, TypeVar, Union

T = TypeVar("T")

# attribute name, or a callable pulling the searchable text out of an item
SearchField = Union[str, Callable[[T], Optional[str]]]


def generate_markdown_table(
    headers: Optional[List[str]],
    rows: List[List[str]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Generate a Markdown table.

    Args:
        headers: List of column headers, or None to use first row as headers.
        rows: List of rows, each a list of strings.
        aligns: List of alignments ('l', 'c', 'r') for each column.
                Defaults to all center ('c').

    Returns:
        str: Markdown formatted table.
    """
    if not rows:
        return ""

    # If no headers, take the first row as header and remove it from rows
    if not headers:
        headers, rows = rows[0], rows[1:]

    headers = list(map(str, headers))
    # pipes inside values would break the table
    rows = [[str(cell).replace("|", "\\|") for cell in row] for row in rows]

    num_cols = len(headers)
    if aligns is None:
        aligns = ["c"] * num_cols
    elif len(aligns) != num_cols:
        raise ValueError("Length of aligns must match number of headers.")

    align_map = {
        "l": ":---",
        "c": ":---:",
        "r": "---:",
    }

    header_line = "| " + " | ".join(headers) + " |"
    align_line = "| " + " | ".join(align_map[a] for a in aligns) + " |"
    row_lines = ["| " + " | ".join(row) + " |" for row in rows]

    return "\n".join([header_line, align_line, *row_lines])


def _field_text(item, field) -> Optional[str]:
    value = field(item) if callable(field) else getattr(item, field, None)
    return None if value is None else str(value)


def matches_query(item, query: str, fields: Sequence[SearchField]) -> bool:
    """True if any of ``fields`` contains ``query``, ignoring case."""
    needle = query.lower()
    for field in fields:
        text = _field_text(item, field)
        if text is not None and needle in text.lower():
            return True
    return False


def filter_items(items: Sequence[T], query: str, fields: Sequence[SearchField]) -> List[T]:
    """
    Case-insensitive substring search over ``fields`` of each item.

    Keeps the order of ``items``. An empty query returns every item.
    """
    if not query:
        return list(items)
    return [item for item in items if matches_query(item, query, fields)]


def move_item(items: Sequence[T], index: int, offset: int) -> Optional[List[T]]:
    """
    Return a copy of ``items`` with the element at ``index`` moved by ``offset``.
    None when the move would leave the list bounds.
    """
    new_index = index + offset
    if not (0 <= index < len(items)) or not (0 <= new_index < len(items)):
        return None
    moved = list(items)
    moved.insert(new_index, moved.pop(index))
    return moved


def format_price(amount: float, currency: str = "USD") -> str:
    if currency == "AED":
        return f"AED {amount:,.2f}"
    return f"${amount:,.2f}"


def format_date(value: Optional[str]) -> str:
    """ISO timestamp from the backend -> YYYY-MM-DD, passthrough otherwise."""
    if not value:
        return "-"
    return value.split("T")[0]


def orders_to_csv(orders: Sequence) -> str:
    """CSV text for the orders export, one row per order."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(["Order Number", "Customer", "Email", "Total", "Status", "Date"])
    for o in orders:
        writer.writerow(
            [
                o.order_number,
                o.customer_name,
                o.customer_email,
                f"{o.total:.2f}",
                o.status,
                format_date(o.created_at),
            ]
        )
    return buf.getvalue()
