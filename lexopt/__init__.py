#!/usr/bin/env python3

"A tiny command-line lexer.  You drive the loop, lexopt hands you the tokens."
__version__ = "0.1"


# please leave this copyright notice in binary distributions.
license = """
lexopt/__init__.py
part of the lexopt software package
Copyright 2023 by the lexopt authors
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

# set to 1 to watch the parser think out loud
want_prints = 0


import big.all as big
import enum
import sys


class LexoptBaseException(Exception):
    pass

class UnexpectedValue(LexoptBaseException):
    """
    Raised (or recorded in Parser.error) when an option
    had a value attached to it, like "--option=value"
    or "-ovalue", and you moved on without consuming it.
    """
    pass

class NoValue(LexoptBaseException):
    """
    Raised when you ask for a value and there isn't one.
    """
    pass

class ConversionError(LexoptBaseException, ValueError):
    """
    Raised when a token can't be converted to the type
    you asked for.
    """
    pass


# convert needs ConversionError, so it must be defined first.
from . import convert


##
## Tokens.
##
## A token is a tagged value: a kind, and a string.
## There are exactly five kinds, and two tokens are equal
## only if both the kind *and* the string match.  So
##
##     Short('a') != Positional('a') != Value('a')
##
## Short options store their single character *without*
## the dash, and long options store their name without
## the double-dash.  Use dashed() if you want them back.
##

class TokenKind(enum.Enum):
    UNMATCHED = "unmatched"
    SHORT = "short"
    LONG = "long"
    POSITIONAL = "positional"
    VALUE = "value"


class Token:
    __slots__ = ('kind', 's')

    def __init__(self, kind, s):
        if not isinstance(kind, TokenKind):
            raise TypeError(f"kind must be a TokenKind, not {kind!r}")
        if not isinstance(s, str):
            raise TypeError(f"s must be a str, not {s!r}")
        object.__setattr__(self, 'kind', kind)
        object.__setattr__(self, 's', s)

    def __setattr__(self, name, value):
        raise AttributeError(f"{self.__class__.__name__} objects are immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{self.__class__.__name__} objects are immutable")

    # copy and pickle would otherwise setattr() the slots.
    def __reduce__(self):
        return (Token, (self.kind, self.s))

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind == other.kind) and (self.s == other.s)

    def __hash__(self):
        return hash((self.kind, self.s))

    def __repr__(self):
        if self.kind == TokenKind.UNMATCHED:
            return "Unmatched"
        return f"{self.kind.name.title()}({self.s!r})"

    def __str__(self):
        return self.s

    def dashed(self):
        """
        Returns the token the way the user would have typed it:
        short options get one dash, long options get two,
        everything else is returned as-is.
        """
        if self.kind == TokenKind.SHORT:
            return "-" + self.s
        if self.kind == TokenKind.LONG:
            return "--" + self.s
        return self.s

    @property
    def is_short(self):
        return self.kind == TokenKind.SHORT

    @property
    def is_long(self):
        return self.kind == TokenKind.LONG

    @property
    def is_option(self):
        return self.kind in (TokenKind.SHORT, TokenKind.LONG)

    @property
    def is_positional(self):
        return self.kind == TokenKind.POSITIONAL

    @property
    def is_value(self):
        return self.kind == TokenKind.VALUE

    # conversions.  these never touch the parser,
    # they just hand self.s to lexopt.convert.

    def as_str(self):
        return convert.to_str(self.s)

    def as_bool(self):
        return convert.to_bool(self.s)

    def as_int(self):
        return convert.to_int(self.s)

    def as_uint(self):
        return convert.to_uint(self.s)

    def as_float(self):
        return convert.to_float(self.s)

    def as_duration(self):
        return convert.to_duration(self.s)

    def must_str(self):
        return convert.must(self.as_str)

    def must_bool(self):
        return convert.must(self.as_bool)

    def must_int(self):
        return convert.must(self.as_int)

    def must_uint(self):
        return convert.must(self.as_uint)

    def must_float(self):
        return convert.must(self.as_float)

    def must_duration(self):
        return convert.must(self.as_duration)


def Short(c):
    "A short option, like -v.  c is the single character, without the dash."
    if not (isinstance(c, str) and (len(c) == 1)):
        raise ValueError(f"Short() requires exactly one character, got {c!r}")
    return Token(TokenKind.SHORT, c)

def Long(name):
    "A long option, like --verbose.  name is the name, without the dashes."
    return Token(TokenKind.LONG, name)

def Positional(s):
    "A positional argument, as returned by Parser.advance() or a RawArgs view."
    return Token(TokenKind.POSITIONAL, s)

def Value(s):
    "An option value, as returned by Parser.value() and friends."
    return Token(TokenKind.VALUE, s)

Unmatched = Token(TokenKind.UNMATCHED, '')


class State(enum.Enum):
    EMPTY = "empty"
    SHORT_CLUSTER = "short cluster"
    PENDING_VALUE = "pending value"
    FINISHED = "finished"


def _looks_like_option(s):
    return s.startswith("-") and (s != "-")


class Parser:
    """
    A command-line lexer.

    Rather than declaring your options up front, you
    call advance() in a loop and look at each token
    as it comes by.  When you see an option that wants
    a value, you ask for it with value(), optional_value(),
    or values(), right then and there:

        parser = lexopt.Parser.from_env()
        for token in parser:
            if token == lexopt.Short('n'):
                number = parser.value().as_int()
            elif token == lexopt.Long('loud'):
                loud = True
            else:
                greeting = str(token)

    args is the sequence of command-line arguments,
    *not* including the program name.  If you have
    the program name too, use Parser.from_argv().
    """

    def __init__(self, args, *, bin_name=''):
        if isinstance(args, str):
            raise TypeError("args must be a sequence of str, not a str")
        self.args = tuple(args)
        for a in self.args:
            if not isinstance(a, str):
                raise TypeError(f"every argument must be a str, got {a!r}")
        self.bin_name = bin_name

        # the public face
        self.current = Unmatched
        self.error = None

        # the cursor.  only ever goes up.
        self.position = 0

        self.state = State.EMPTY
        # when state is PENDING_VALUE, the "value" from "--option=value"
        self._pending = ''
        # when state is SHORT_CLUSTER, the unconsumed
        # remainder of "-abc".  never empty in that state.
        self._short = ''

    @classmethod
    def from_argv(cls, argv):
        """
        Builds a parser from a full argv, like sys.argv.
        The first element is the program name; it's stored
        in bin_name and never tokenized.
        """
        if isinstance(argv, str):
            raise TypeError("argv must be a sequence of str, not a str")
        argv = list(argv)
        if not argv:
            raise ValueError("argv must contain at least the program name")
        return cls(argv[1:], bin_name=argv[0])

    @classmethod
    def from_env(cls):
        return cls.from_argv(sys.argv)

    def __repr__(self):
        return f"<Parser position={self.position}/{len(self.args)} state={self.state.value} current={self.current!r}>"

    def __iter__(self):
        """
        Yields tokens until the command-line is exhausted.

        You may call value() and friends in the body of the
        loop.  If iteration stops because of an error,
        the error is raised once the loop runs dry.
        """
        while self.advance():
            yield self.current
        if self.error is not None:
            raise self.error

    def _next_arg(self):
        if self.position >= len(self.args):
            return None
        arg = self.args[self.position]
        self.position += 1
        return arg

    def _take_short(self):
        c = self._short[0]
        self._short = self._short[1:]
        self.state = State.SHORT_CLUSTER if self._short else State.EMPTY
        return Short(c)

    def _has_pending(self):
        "True if there's a value attached to the current option."
        if self.state == State.PENDING_VALUE:
            return True
        if self.state == State.SHORT_CLUSTER:
            return bool(self._short)
        return False

    def _next_is_normal(self):
        "True if the next raw argument exists and isn't an option."
        if self.position >= len(self.args):
            return False
        if self.state == State.FINISHED:
            return True
        return not _looks_like_option(self.args[self.position])

    def _unexpected_value(self, value):
        return UnexpectedValue(f"{self.current.dashed()} doesn't take a value, but got {value!r}")

    def _no_value(self):
        if self.current.is_option:
            return NoValue(f"{self.current.dashed()} requires a value")
        return NoValue("expected a value")

    def advance(self):
        """
        Moves to the next token, storing it in self.current.

        Returns True if it produced a token, and False if
        the command-line is exhausted or there's an error.
        When it returns False, check self.error; if it's
        not None, it's the exception explaining what
        went wrong.
        """
        self.error = None
        state = self.state

        if state == State.PENDING_VALUE:
            # "--option=value", and nobody consumed value.
            self.error = self._unexpected_value(self._pending)
            return False

        if state == State.SHORT_CLUSTER:
            # "-o=value", and nobody consumed value.
            if self._short.startswith("="):
                self.error = self._unexpected_value(self._short[1:])
                return False
            self.current = self._take_short()
            return True

        arg = self._next_arg()
        if arg is None:
            return False

        if state == State.FINISHED:
            self.current = Positional(arg)
            return True

        assert state == State.EMPTY

        if want_prints:
            print(f">> advance: position={self.position - 1} arg={arg!r}")

        if arg == "--":
            # everything after "--" is positional, no matter what.
            self.state = State.FINISHED
            return self.advance()

        if arg.startswith("--"):
            name, equals, value = arg[2:].partition("=")
            if equals:
                # Note: value can be an empty string! "--option="
                self._pending = value
                self.state = State.PENDING_VALUE
            self.current = Long(name)
            return True

        if arg == "-":
            # conventionally means stdin or stdout.
            self.current = Positional(arg)
            return True

        if arg.startswith("-"):
            # the first character is always an option, even "=".
            self._short = arg[1:]
            self.current = self._take_short()
            return True

        self.current = Positional(arg)
        return True

    def _value(self):
        """
        Returns a (token, attached) tuple.
        attached is true if the value was attached with an
        equals sign, as in "-o=value" or "--option=value".
        """
        state = self.state

        if state == State.PENDING_VALUE:
            value = self._pending
            self._pending = ''
            self.state = State.EMPTY
            return Value(value), True

        if state == State.EMPTY:
            arg = self._next_arg()
            if arg is None:
                raise self._no_value()
            return Value(arg), False

        if state == State.SHORT_CLUSTER:
            value = self._short
            attached = value.startswith("=")
            if attached:
                value = value[1:]
            self._short = ''
            self.state = State.EMPTY
            return Value(value), attached

        assert state == State.FINISHED
        raise self._no_value()

    def value(self):
        """
        Returns the value for the current option, as a Value token.

        If a value is attached ("-ovalue", "-o=value",
        "--option=value"), returns that.  Otherwise
        consumes the next argument, *even if it looks
        like an option.*

        Raises NoValue if there's no value to be had,
        or after "--".
        """
        token, _ = self._value()
        if want_prints:
            print(f">> value: {token!r}")
        return token

    def optional_value(self):
        """
        Returns a (token, found) tuple.

        Only returns a value that's attached to the current
        option, as in "-ovalue" or "--option=value", but
        never "-o value".  If there isn't one, returns
        (Unmatched, False) and changes nothing.
        """
        if not self._has_pending():
            return Unmatched, False
        token, _ = self._value()
        return token, True

    def values(self):
        """
        Returns a list of one or more Value tokens.

        Use this for options that take a variable number
        of arguments, like "--command echo hello".  It
        gathers arguments until it finds one that looks
        like an option, or the end of the command-line.

        An equals sign limits it to exactly one value:
        "-a=b c" and "--opt=b c" only yield "b", while
        "-a b c", "-ab c", and "--opt b c" yield "b" and "c".

        After "--", every remaining argument is a value.

        Raises NoValue if it can't find at least one.
        """
        if self.state == State.FINISHED:
            values = [Value(arg) for arg in self.args[self.position:]]
            if not values:
                raise self._no_value()
            self.position = len(self.args)
            return values

        if not (self._has_pending() or self._next_is_normal()):
            raise self._no_value()

        token, attached = self._value()
        values = [token]
        if not attached:
            while self._next_is_normal():
                values.append(Value(self._next_arg()))
        return values

    def raw_args(self):
        """
        Returns a RawArgs view onto the remaining arguments.

        The view shares this parser's cursor; whatever it
        consumes, the parser skips.  Raises UnexpectedValue
        if the current option still has an attached value,
        or you're in the middle of "-abc".
        """
        if self._has_pending():
            if self.state == State.PENDING_VALUE:
                value = self._pending
            else:
                value = self._short.removeprefix("=")
            raise self._unexpected_value(value)
        return self.RawArgs()

    @big.BoundInnerClass
    class RawArgs:
        """
        An escape hatch: raw arguments, no option processing.

        Every argument comes out as a Positional token,
        even "--" and "-x".  Stop whenever you like and
        go back to calling advance() on the parser.
        """

        def __init__(self, parser):
            self.parser = parser
            self.current = Unmatched

        def __repr__(self):
            return f"<RawArgs remaining={len(self)}>"

        def __len__(self):
            parser = self.parser
            return len(parser.args) - parser.position

        def __iter__(self):
            while self.next():
                yield self.current

        def next(self):
            arg = self.parser._next_arg()
            if arg is None:
                return False
            self.current = Positional(arg)
            return True

        def peek(self):
            "Returns the next argument without consuming it, or None."
            parser = self.parser
            if parser.position >= len(parser.args):
                return None
            return Positional(parser.args[parser.position])

        def next_if(self, predicate):
            """
            Consumes and returns the next argument, but only if
            predicate(token) is true.  Otherwise returns None.
            """
            token = self.peek()
            if (token is None) or (not predicate(token)):
                return None
            self.next()
            return token

        def as_list(self):
            return list(self)

        def as_strings(self):
            return [token.s for token in self]

    def dump_state(self, file=None):
        "Prints everything about the parser's internal state.  For debugging."
        if file is None:
            file = sys.stdout
        def print_field(name, value):
            print(f"{name+':':<13}{value}", file=file)
        print("--- parser state ---", file=file)
        print_field("current", repr(self.current))
        print_field("args", list(self.args))
        print_field("position", self.position)
        print_field("state", self.state.value)
        print_field("pending", repr(self._pending))
        print_field("short", repr(self._short))
        print_field("error", repr(self.error))
        print("---", file=file)
