#!/usr/bin/env python3

"A declarative command-line parser.  One spec string, and your arguments are clasped!"
__version__ = "0.1"


# please leave this copyright notice in binary distributions.
license = """
clasp/__init__.py
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


import big.all as big
from big.itertools import PushbackIterator
from collections.abc import MutableMapping
import os
from os.path import basename
import re
import shlex
import sys

from . import spec
from . import usage

from .spec import ClaspBaseException, SpecError, ArgumentDefinition, CompiledSpec, compile_spec, parse_metadata


class UsageError(ClaspBaseException):
    """
    Raised when clasp processes an invalid command-line.
    """
    pass

class UnrecognizedOption(UsageError):
    pass

class MissingValue(UsageError):
    pass

class TypeMismatch(UsageError):
    pass

class InvalidChoice(UsageError):
    pass

class MissingRequired(UsageError):
    """
    Raised after parsing if any required arguments
    weren't supplied.  names lists all of them,
    in the order they were defined.
    """
    def __init__(self, message, names):
        super().__init__(message)
        self.names = names


class ParseResult:
    """
    The result of a successful parse.

    named maps canonical names to string values.  Flags that
    are set have the value "true".  Defined positional arguments
    appear here too, under their own names.

    positionals is a list of every positional argument,
    in order, including any beyond the defined ones.

    You can unpack it:
        named, positionals = clasp.parse(spec)
    """
    def __init__(self, named, positionals):
        self.named = named
        self.positionals = positionals

    def __repr__(self):
        return f"<ParseResult named={self.named!r} positionals={self.positionals!r}>"

    def __iter__(self):
        yield self.named
        yield self.positionals


class HelpRequested:
    """
    Returned instead of a ParseResult when the
    command-line asked for help (-h or --help).

    Call usage() to get the help text.
    """
    def __init__(self, clasp):
        self.clasp = clasp
        self.spec = clasp.spec

    def __repr__(self):
        return f"<HelpRequested {self.clasp.name!r}>"

    def usage(self):
        return self.clasp.usage()


##
## The tokenizer rewrites the command-line into a normalized form,
## so the processor only has to handle "--option", "-o", and values.
##
##     --option=value     ->  --option value
##     -ovalue            ->  -o value        (if -o takes a value)
##     -xyz               ->  -x -y -z        (if -x is a flag)
##
## Once we see "--", everything after it (and the "--" itself)
## is passed through untouched.
##
def tokenize(args, compiled):
    tokens = []
    append = tokens.append
    passthrough = False

    for arg in args:
        if passthrough:
            append(arg)
            continue

        if arg == "--":
            append(arg)
            passthrough = True
            continue

        if arg.startswith("--"):
            option, equals, value = arg.partition("=")
            if equals and (len(option) > 2):
                append(option)
                append(value)
            else:
                append(arg)
            continue

        if arg.startswith("-") and (len(arg) > 1):
            c = arg[1]
            if (c in compiled.value_aliases) and (len(arg) > 2):
                append("-" + c)
                append(arg[2:])
                continue
            if c in compiled.flag_aliases:
                tokens.extend("-" + c for c in arg[1:])
                continue

        append(arg)

    return tokens


help_options = ("-h", "--help")

int_re = re.compile("-?[0-9]+")


def is_option(token):
    # a lone "-" is a positional argument (traditionally, stdin or stdout).
    return token.startswith("-") and (len(token) > 1)

def option_key(option):
    if option.startswith("--"):
        return option[2:]
    return option[1:]

def is_recognized_option(token, compiled):
    """
    Returns true if token is an option clasp knows about.
    "-" and unknown dashed strings are not.
    """
    return is_option(token) and (option_key(token) in compiled.aliases)


class Processor:
    """
    Parses one command-line for a Clasp object.

    Compiles the spec, tokenizes the command-line, then walks
    the tokens, storing values in named and positionals.
    Returns a ParseResult or a HelpRequested, or raises
    a UsageError.
    """
    def __init__(self, clasp):
        self.clasp = clasp
        self.reset()

    def reset(self):
        self.compiled = None
        self.iterator = None
        self.named = {}
        self.positionals = []
        self.passthrough = False
        self.next_positional_index = 0
        self.log = big.Log()

    def __call__(self, args):
        self.reset()
        log = self.log
        log("process start")

        log.enter("compile")
        compiled = self.compiled = compile_spec(self.clasp.spec)
        self.named = dict(compiled.defaults)
        log(f"{len(compiled.definitions)} definitions")
        log.exit()

        tokens = tokenize(args, compiled)
        log(f"tokenize: {shlex.join(tokens)}")

        self.iterator = PushbackIterator(tokens)
        log.enter("match")
        for token in self.iterator:
            if self.passthrough:
                self.store_positional(token, validate=False)
                continue

            if token in help_options:
                log(f"{token}: help requested")
                log.exit()
                return HelpRequested(self.clasp)

            if token == "--":
                log("--: passthrough")
                self.passthrough = True
                continue

            if is_option(token):
                self.match_option(token)
                continue

            self.store_positional(token)
        log.exit()

        log("check required")
        self.check_required()

        log("process complete")
        return ParseResult(self.named, self.positionals)

    def validate(self, definition, value, description):
        if (definition.type == "int") and (not int_re.fullmatch(value)):
            raise TypeMismatch(f"Invalid integer value for {description}: '{value}'. Expected integer.")
        choices = definition.choices
        if (choices is not None) and (value not in choices):
            raise InvalidChoice(f"Invalid choice for {description}: '{value}'. Allowed: {', '.join(choices)}.")

    def match_option(self, option):
        compiled = self.compiled
        key = option_key(option)
        name = compiled.aliases.get(key)
        if name is None:
            raise UnrecognizedOption(f"Unrecognized option: {option}")

        if key in compiled.flag_aliases:
            self.log(f"{option}: flag {name}")
            self.named[name] = "true"
            return

        if key not in compiled.value_aliases:
            raise UnrecognizedOption(f"Unrecognized option: {option} ('{name}' is a positional argument)")

        # policy: the next token is the value unless it's an option
        # we recognize.  so "-o -x" stores "-x" in o, if -x isn't defined.
        value = next(self.iterator, None)
        if (value is None) or is_recognized_option(value, compiled):
            raise MissingValue(f"Option '{option}' requires an argument.")

        self.validate(compiled[name], value, option)
        self.log(f"{option}: {name}={value!r}")
        self.named[name] = value

    def store_positional(self, value, *, validate=True):
        self.positionals.append(value)
        definition = self.compiled.positional_definition(self.next_positional_index)
        if definition:
            if validate:
                self.validate(definition, value, f"positional argument '{definition.name}'")
            self.named[definition.name] = value
            self.log(f"positional #{self.next_positional_index}: {definition.name}={value!r}")
        else:
            self.log(f"positional #{self.next_positional_index}: extra {value!r}")
        self.next_positional_index += 1

    def is_provided(self, definition):
        name = definition.name
        value = self.named.get(name)
        if definition.is_positional:
            index = self.compiled.positionals.index(name)
            if (index < len(self.positionals)) and self.positionals[index]:
                return True
            return bool(value)
        if definition.is_flag:
            return value == "true"
        if value:
            return True
        # an option with a (non-empty) default is always satisfied,
        # even if the command-line overrode it with an empty string.
        return (value is not None) and bool(definition.default)

    def check_required(self):
        compiled = self.compiled
        missing = [name for name in compiled.required if not self.is_provided(compiled[name])]
        if missing:
            message = " ".join(f"Missing required argument: '{name}'." for name in missing)
            raise MissingRequired(message, missing)


class Clasp:
    """
    A command-line parser built from a single spec string.

    name is the program name shown in usage; it defaults
    to the basename of sys.argv[0].  usage_max_columns caps
    the width of the help text (it's further limited to the
    terminal width, if there is one).  usage_indent_definitions
    is how far option and argument descriptions are indented.
    """

    def __init__(self,
        spec,
        name=None,
        *,
        usage_max_columns = 80,
        usage_indent_definitions = 2,
        ):
        self.spec = spec
        self.name = name or basename(sys.argv[0])
        self.usage_max_columns = usage_max_columns
        self.usage_indent_definitions = usage_indent_definitions

    def __repr__(self):
        return f"<Clasp {self.name!r} spec={self.spec!r}>"

    def processor(self):
        return Processor(self)

    def process(self, args=None):
        if args is None:
            args = sys.argv[1:]
        processor = self.processor()
        return processor(args)

    def usage(self):
        try:
            columns, rows = os.get_terminal_size()
        except OSError:
            columns = self.usage_max_columns
        columns = min(columns, self.usage_max_columns)
        return usage.render_usage(self.spec, self.name, max_columns=columns, indent=self.usage_indent_definitions)

    def print_usage(self):
        print(self.usage())

    def error(self, s):
        print(f"ERROR: {s}", file=sys.stderr)
        print(f"Try '{self.name} --help' for more information.", file=sys.stderr)

    def main(self, args=None):
        """
        Parses the command-line and returns a ParseResult.

        If the command-line asks for help, prints usage and exits
        with status 0.  If the command-line (or the spec) is invalid,
        prints an error to stderr and exits with status 1.
        """
        try:
            result = self.process(args)
        except ClaspBaseException as e:
            self.error(str(e))
            sys.exit(1)
        if isinstance(result, HelpRequested):
            self.print_usage()
            sys.exit(0)
        return result


def parse(spec, args=None):
    """
    Parses args (default: sys.argv[1:]) according to spec.

    Returns a ParseResult, or a HelpRequested if args asked for help.
    Raises SpecError if spec is malformed, and UsageError
    (or a subclass) if args is invalid.
    """
    return Clasp(spec).process(args)

def main(spec, args=None, name=None):
    return Clasp(spec, name).main(args)


def assign(named, target, *names):
    """
    Copies values from named into target.

    For each name in names that's present in named, sets
    target[name] (if target is a mutable mapping) or
    target.name (otherwise) to its value.  Names not in
    named are left alone.  Returns target.
    """
    for name in names:
        if name not in named:
            continue
        if isinstance(target, MutableMapping):
            target[name] = named[name]
        else:
            setattr(target, name, named[name])
    return target
