"""
CSV storage for scraped headlines

Rows are written to a temp file and moved into place, so a failed write never leaves
a half-written CSV behind.
"""
import os
import csv
import sys
from typing import Dict, List

from headline_models import HeadlineRecord


# CSV header -> record field, in column order
COLUMNS: List[tuple] = [
    ("Section", "section"),
    ("Headline", "headline"),
    ("Link", "link"),
    ("Date", "date"),
]


def csv_header(include_date: bool) -> List[str]:
    cols = [title for title, _ in COLUMNS]
    return cols if include_date else cols[:3]


def _to_row(record: HeadlineRecord, header: List[str]) -> Dict[str, str]:
    fields = dict(COLUMNS)
    data = record.model_dump()
    return {title: (data.get(fields[title]) or "") for title in header}


def write_headlines_csv(records: List[HeadlineRecord], csv_path: str, include_date: bool = False) -> bool:
    """Overwrite ``csv_path`` with one row per record. Returns False when the write failed."""
    header = csv_header(include_date)
    tmp = csv_path + ".tmp"
    try:
        parent = os.path.dirname(csv_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(tmp, "w", encoding="utf-8", newline="") as f:
            w = csv.DictWriter(f, fieldnames=header)
            w.writeheader()
            for r in records:
                w.writerow(_to_row(r, header))
        os.replace(tmp, csv_path)
    except OSError as e:
        print(f"[ERROR] Error writing to CSV: {e}", file=sys.stderr)
        try:
            if os.path.exists(tmp):
                os.remove(tmp)
        except OSError:
            pass
        return False
    print(f"[csv] Data successfully written to {csv_path} (rows={len(records)})")
    return True


def read_headlines_csv(csv_path: str) -> List[HeadlineRecord]:
    """Read a CSV written by ``write_headlines_csv`` back into records."""
    fields = dict(COLUMNS)
    out: List[HeadlineRecord] = []
    with open(csv_path, "r", encoding="utf-8", newline="") as f:
        for row in csv.DictReader(f):
            data = {fields[k]: v for k, v in row.items() if k in fields}
            if not data.get("date"):
                data["date"] = None
            out.append(HeadlineRecord(**data))
    return out
