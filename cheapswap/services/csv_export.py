"""
CSV export of deck analysis results.

One line per (original, candidate) pair. Cards without candidates still
get one line with the candidate columns empty.
"""

import csv
from collections.abc import Iterable
from io import StringIO

from cheapswap.models.substitute import DeckAnalysisRow

CSV_HEADER = ("qty", "original", "orig_price", "candidate", "cand_price", "orig_url", "cand_url")

EXPORT_FILENAME = "cheap-swaps.csv"


def _price(value: float | None) -> str:
    return "" if value is None else f"{value:.2f}"


def analysis_to_csv(rows: Iterable[DeckAnalysisRow]) -> str:
    """
    Render analysis rows as CSV text.

    Args:
        rows: Rows from a DeckAnalysis

    Returns:
        CSV text with a header line
    """
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for row in rows:
        original = (row.quantity, row.name, _price(row.price))
        if not row.candidates:
            writer.writerow((*original, "", "", row.url or "", ""))
            continue

        for candidate in row.candidates:
            writer.writerow(
                (
                    *original,
                    candidate.card.name,
                    _price(candidate.price),
                    row.url or "",
                    candidate.card.scryfall_uri or "",
                )
            )

    return output.getvalue()
