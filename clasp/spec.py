"""
Compiles a clasp specification string into lookup tables.

A specification is a comma-separated list of definitions.
Each definition looks like

    aliases#flags#metadata#description

for example

    output:o#r#type=file;default=out.txt#Where to write the output

"aliases" is the canonical name, optionally followed by ':' and
a single-character short alias.  "flags" is any combination of
'f' (flag, takes no value), 'r' (required), and 'p' (positional).
"metadata" is a ';'-separated list of key=value pairs; clasp
understands "default", "choices" (separated with '|'), and "type".
"""

# please leave this copyright notice in binary distributions.
license = """
clasp/spec.py
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


import re


class ClaspBaseException(Exception):
    pass

class SpecError(ClaspBaseException):
    """
    Raised when a clasp specification string is malformed.
    """
    pass


definition_separator = ","
field_separator = "#"
alias_separator = ":"
metadata_separator = ";"
choices_separator = "|"

_whitespace_re = re.compile(r"\s+")


def parse_metadata(s):
    """
    Parses "key=value;key2=value2" into a dict.

    Pairs without an '=' are ignored.  If a key appears
    more than once, the last one wins.  There's no escaping,
    so neither ';' nor '=' can appear in a key.  (A value
    may contain '=', everything after the first one is the value.)
    """
    metadata = {}
    if not s:
        return metadata
    for pair in s.split(metadata_separator):
        key, equals, value = pair.partition("=")
        if equals:
            metadata[key] = value
    return metadata


def clean_description(s):
    s = s.replace("\t", " ").replace("\r", " ").replace("\n", " ")
    return s.replace("  ", " ")


class ArgumentDefinition:
    def __init__(self, aliases, *, is_flag=False, is_required=False, is_positional=False, metadata=None, description=''):
        assert aliases
        self.aliases = tuple(aliases)
        self.name = self.aliases[0]
        self.is_flag = is_flag
        self.is_required = is_required
        self.is_positional = is_positional

        self.metadata = metadata = metadata or {}
        self.default = metadata.get("default")
        choices = metadata.get("choices")
        self.choices = tuple(choices.split(choices_separator)) if choices else None
        self.type = metadata.get("type") or None
        self.description = description

    @property
    def short(self):
        if len(self.aliases) > 1:
            return self.aliases[1]
        return None

    def __repr__(self):
        flags = "".join(c for c, b in (("f", self.is_flag), ("r", self.is_required), ("p", self.is_positional)) if b)
        return f"<ArgumentDefinition {alias_separator.join(self.aliases)!r} flags={flags!r} default={self.default!r} choices={self.choices!r} type={self.type!r}>"


def parse_definition(text):
    """
    Parses a single definition into an ArgumentDefinition.

    Raises SpecError if the definition is malformed.
    Doesn't know anything about other definitions, so it
    can't check for duplicate aliases; compile_spec does that.
    """
    if text.count(field_separator) > 3:
        raise SpecError(f"Malformed option specification (too many '{field_separator}'): {text}")

    fields = text.split(field_separator)
    fields.extend([''] * (4 - len(fields)))
    aliases_str, flags_str, metadata_str, description = fields

    if not aliases_str:
        raise SpecError(f"Malformed option specification (empty alias part): {text}")

    aliases = [_whitespace_re.sub("", alias) for alias in aliases_str.split(alias_separator)]
    name = aliases[0]
    if not all(aliases):
        raise SpecError(f"Malformed option specification (empty alias): {text}")

    is_flag = "f" in flags_str
    is_required = "r" in flags_str
    is_positional = "p" in flags_str

    if is_positional and (len(aliases) > 1):
        raise SpecError(f"Positional option '{name}' cannot have aliases.")
    if len(aliases) > 2:
        raise SpecError(f"Option '{name}' can only have one short alias: {text}")
    if (len(aliases) == 2) and (len(aliases[1]) != 1):
        raise SpecError(f"Short alias '{aliases[1]}' for option '{name}' must be a single character.")

    return ArgumentDefinition(
        aliases,
        is_flag=is_flag,
        is_required=is_required,
        is_positional=is_positional,
        metadata=parse_metadata(metadata_str),
        description=clean_description(description),
        )


def split_spec(spec):
    """
    Splits a specification string into its definition strings.

    Surrounding whitespace is stripped from each definition,
    which means you can spread a spec over several lines.
    A trailing comma is permitted.
    """
    if not spec.strip():
        return []
    definitions = [s.strip() for s in spec.split(definition_separator)]
    if not definitions[-1]:
        definitions.pop()
    return definitions


class CompiledSpec:
    """
    The lookup tables for one specification string.

    Built fresh by compile_spec() on every parse;
    nothing here is shared between parses.

    aliases maps every alias (and canonical name) to
    its canonical name.  flag_aliases and value_aliases
    partition the non-positional aliases by whether they
    consume a value.  positionals lists the positional
    canonical names in the order they're expected on the
    command-line, and required lists the required canonical
    names in definition order.  defaults is the named map
    pre-seeded with default values.
    """

    def __init__(self, spec):
        self.spec = spec
        self.definitions = []
        self.definitions_by_name = {}
        self.aliases = {}
        self.flag_aliases = set()
        self.value_aliases = set()
        self.positionals = []
        self.required = []
        self.defaults = {}

    def __repr__(self):
        return f"<CompiledSpec {len(self.definitions)} definitions, positionals={self.positionals!r} required={self.required!r}>"

    def __getitem__(self, name):
        return self.definitions_by_name[name]

    def add(self, definition):
        name = definition.name
        for alias in definition.aliases:
            if alias in self.aliases:
                existing = self.aliases[alias]
                raise SpecError(f"Alias '{alias}' for option '{name}' is already used by option '{existing}'.")
            self.aliases[alias] = name
            if definition.is_positional:
                pass
            elif definition.is_flag:
                self.flag_aliases.add(alias)
            else:
                self.value_aliases.add(alias)

        self.definitions.append(definition)
        self.definitions_by_name[name] = definition

        if definition.is_positional:
            self.positionals.append(name)
        elif definition.is_flag:
            if definition.default == "true":
                self.defaults[name] = "true"
        elif definition.default is not None:
            # even an empty default counts.
            self.defaults[name] = definition.default

        if definition.is_required:
            self.required.append(name)

    def positional_definition(self, index):
        """
        Returns the definition for the index'th positional
        argument, or None if that's an extra.
        """
        if index < len(self.positionals):
            return self.definitions_by_name[self.positionals[index]]
        return None


def compile_spec(spec):
    """
    Compiles a specification string into a CompiledSpec.

    Fails fast: the first malformed definition raises SpecError.
    """
    compiled = CompiledSpec(spec)
    for text in split_spec(spec):
        compiled.add(parse_definition(text))
    return compiled
