"""
Renders the help message for a clasp specification string.
"""

# please leave this copyright notice in binary distributions.
license = """
clasp/usage.py
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


import sys

from . import spec
from . import text


help_definition = "help:h#f##Show this help message and exit"

option_column_width = 28


def annotations(definition):
    a = []
    if definition.type:
        a.append(f" (type: {definition.type})")
    if definition.choices:
        a.append(f" (choices: {', '.join(definition.choices)})")
    default = definition.default
    if default and ((not definition.is_flag) or (default == "true")):
        a.append(f" (default: {default})")
    return "".join(a)


def placeholder(definition):
    return (definition.type or definition.name).upper()


def option_synopsis(definition):
    if definition.name == "help":
        s = "-h|--help"
    elif definition.is_flag:
        s = f"--{definition.name}"
    else:
        s = f"--{definition.name} <{placeholder(definition)}>"
    # a flag that defaults to true is always "on",
    # so we don't present it as optional.
    if not (definition.is_required or (definition.is_flag and (definition.default == "true"))):
        s = f"[{s}]"
    return s


def positional_synopsis(definition):
    s = definition.name.upper()
    if not definition.is_required:
        s = f"[{s}]"
    return s


def option_row(definition):
    long_option = f"--{definition.name}"
    if definition.short:
        left = f"-{definition.short}, {long_option}"
    else:
        left = f"    {long_option}"
    if not definition.is_flag:
        left += f" <{placeholder(definition)}>"

    description = definition.description
    if definition.is_required and not definition.is_flag:
        description = f"{description} (required)" if description else "(required)"
    return left, description + annotations(definition)


def positional_row(definition):
    description = definition.description + annotations(definition)
    if not description:
        return None
    return definition.name.upper(), description


def render_usage(spec_string, prog, *, max_columns=80, indent=2):
    """
    Renders the full help message for spec_string, returned as a string.

    This parses spec_string itself; it doesn't use a CompiledSpec.
    It also adds a definition for -h|--help.  A malformed definition
    doesn't stop rendering: it's reported on stderr and skipped.
    """
    option_synopses = []
    positional_synopses = []
    option_rows = []
    positional_rows = []

    for definition_text in spec.split_spec(spec_string) + [help_definition]:
        try:
            definition = spec.parse_definition(definition_text)
        except spec.SpecError as e:
            print(f"ERROR: Usage: {e}", file=sys.stderr)
            continue

        if definition.is_positional:
            positional_synopses.append(positional_synopsis(definition))
            row = positional_row(definition)
            if row:
                positional_rows.append(row)
            continue

        option_synopses.append(option_synopsis(definition))
        option_rows.append(option_row(definition))

    usage_line = " ".join(["usage:", prog] + option_synopses + positional_synopses)
    lines = [usage_line]

    table_kwargs = dict(indent=indent, first_width=option_column_width, max_columns=max_columns)

    if positional_rows:
        lines.append("")
        lines.append("Arguments:")
        lines.extend(text.indented_table(positional_rows, **table_kwargs))

    # option_rows is never empty, it always has help.
    lines.append("")
    lines.append("Options:")
    lines.extend(sorted(text.indented_table(option_rows, **table_kwargs)))

    return "\n".join(lines)
