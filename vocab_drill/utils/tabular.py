import csv
import io


class TabularDecodeError(ValueError):
    pass


def decode_delimited(text: str, delimiter: str = ";") -> list[dict[str, str]]:
    """
    Decode delimited text with a header row into one mapping per line.

    Blank lines are skipped and a leading UTF-8 BOM is ignored. Missing
    cells come back as empty strings; extra cells are dropped.
    """
    if text is None:
        raise TabularDecodeError("No content to decode")
    if len(delimiter) != 1:
        raise TabularDecodeError(f"Delimiter must be a single character, got {delimiter!r}")

    body = text.lstrip("\ufeff")
    reader = csv.DictReader(io.StringIO(body), delimiter=delimiter, strict=True)
    try:
        header = reader.fieldnames
        if not header or not any(str(name or "").strip() for name in header):
            raise TabularDecodeError("Missing header row")

        rows: list[dict[str, str]] = []
        for raw in reader:
            row = {name: (value or "") for name, value in raw.items() if name is not None}
            if not any(str(value).strip() for value in row.values()):
                continue
            rows.append(row)
    except csv.Error as exc:
        raise TabularDecodeError(f"Invalid delimited text (line {reader.line_num}): {exc}") from exc
    return rows
