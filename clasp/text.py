import operator

# please leave this copyright notice in binary distributions.
license = """
clasp/text.py
part of the Clasp software package
Copyright 2023 by Larry Hastings
All rights reserved.

Permission is hereby granted, free of charge, to any person obtaining a
copy of this software and associated documentation files (the "Software"),
to deal in the Software without restriction, including without limitation
the rights to use, copy, modify, merge, publish, distribute, sublicense,
and/or sell copies of the Software, and to permit persons to whom the
Software is furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included
in all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT.
IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM,
DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF CONTRACT,
TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE
OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.
"""


def wrap(s, margin=79):
    """
    Word-wraps s so no line is longer than margin
    (unless a single word is longer than margin,
    in which case it gets a line to itself).

    Whitespace between words is collapsed to a single space.
    Returns the wrapped text as a single string.
    """
    if margin < 1:
        return s.strip()
    lines = []
    line = []
    col = 0
    for word in s.split():
        length = len(word)
        if line and (col + 1 + length) > margin:
            lines.append(" ".join(line))
            line = []
            col = 0
        if line:
            col += 1
        line.append(word)
        col += length
    if line:
        lines.append(" ".join(line))
    return "\n".join(lines)


def _max_line_length(lines):
    return max(len(line) for line in lines)


def merge_columns(*blobs, column_spacing=1):
    """
    Merges blobs of text side-by-side, one column per blob.

    Each blob is a tuple of (text, min_width, max_width),
    where text is a string (possibly containing newlines).

    A column is as wide as its longest line plus column_spacing,
    clamped to [min_width, max_width].  A line that doesn't fit
    in its column gets the rest of the row to itself, and the
    columns to its right start on the next row.  So

        merge_columns(("-o, --output <FILENAME-PATTERN>", 12, 12),
                      ("Where to write.", 0, 40))

    returns

        -o, --output <FILENAME-PATTERN>
                    Where to write.

    Trailing whitespace is stripped from every line.
    """
    columns = []
    for s, min_width, max_width in blobs:
        assert isinstance(s, str)
        operator.index(min_width)
        operator.index(max_width)

        lines = s.rstrip().split('\n')
        width = min(max_width, max(min_width, _max_line_length(lines) + column_spacing))
        columns.append((iter(lines), width))

    output = []
    while True:
        row = []
        exhausted = True
        for lines, width in columns:
            line = next(lines, None)
            if line is None:
                row.append(" " * width)
                continue
            exhausted = False
            if line and ((len(line) + column_spacing) > width):
                row.append(line)
                break
            row.append(line.ljust(width))
        if exhausted:
            break
        output.append("".join(row).rstrip())

    return "\n".join(output)


def indented_table(rows, *, indent=2, first_width=28, max_columns=80, column_spacing=1):
    """
    Renders each (left, right) pair in rows as a table row:
    left in a column first_width wide (plus column_spacing),
    right word-wrapped into whatever's left of max_columns.
    Every line is indented by indent spaces.

    Returns a list of strings, one per row.  (A row may
    contain newlines if it wrapped.)
    """
    prefix = " " * indent
    left_width = first_width + column_spacing
    right_width = max(max_columns - (indent + left_width), 20)
    results = []
    for left, right in rows:
        blobs = [(left, left_width, left_width)]
        if right:
            blobs.append((wrap(right, right_width), 0, right_width))
        merged = merge_columns(*blobs, column_spacing=column_spacing)
        results.append("\n".join((prefix + line) if line else line for line in merged.split("\n")))
    return results
