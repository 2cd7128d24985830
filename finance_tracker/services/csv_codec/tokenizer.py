"""
CSV Line Tokenizer

Grammar of one line, as written by the exporter:

    line   := field ("," field)*
    field  := quoted | bare
    quoted := '"' <any chars except '"'> '"' <junk up to next comma>
    bare   := <any chars except ','>

There is no escape for a double quote inside a field. Consequences:
- Commas inside a quoted field are kept.
- Quote characters inside a bare field (or trailing junk after a
  closing quote) are dropped.
- An opening quote with no closing quote runs to the end of the line.
- Empty fields are kept as "" so columns never shift.
"""

QUOTE = '"'
DELIMITER = ","


def _read_quoted(line: str, start: int) -> tuple[str, int]:
    """Read a quoted field whose opening quote is at `start`."""
    close = line.find(QUOTE, start + 1)
    if close == -1:
        return line[start + 1:], len(line)

    value = line[start + 1:close]
    junk, end = _read_bare(line, close + 1)
    return value + junk, end


def _read_bare(line: str, start: int) -> tuple[str, int]:
    """Read up to the next delimiter, dropping quote characters."""
    end = line.find(DELIMITER, start)
    if end == -1:
        end = len(line)
    return line[start:end].replace(QUOTE, ""), end


def tokenize_line(line: str) -> list[str]:
    """
    Split one CSV line into raw field values.

    Values are not trimmed; that is up to the caller.
    """
    fields = []
    pos = 0
    while True:
        if line.startswith(QUOTE, pos):
            value, pos = _read_quoted(line, pos)
        else:
            value, pos = _read_bare(line, pos)
        fields.append(value)

        if pos >= len(line):
            return fields
        # line[pos] is a delimiter
        pos += 1
