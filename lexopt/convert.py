#!/usr/bin/env python3

# part of the lexopt software package
# Copyright 2023 by the lexopt authors
# All rights reserved.
#
# Permission is hereby granted, free of charge, to any person obtaining a
# copy of this software and associated documentation files (the "Software"),
# to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense,
# and/or sell copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included
# in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT.
# IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM,
# DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF CONTRACT,
# TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE
# OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.

"""
Converters from command-line strings to Python values.

Every converter takes a str and either returns the
converted value or raises ConversionError.  They're
deliberately strict: no surrounding whitespace, no
underscores, none of the other things int() and float()
will let slide.

must() is the impatient wrapper.  It calls a function
and turns any lexopt error into a SystemExit with a
readable message.
"""

import datetime
from decimal import Decimal
import math
import re

from . import ConversionError, LexoptBaseException


__all__ = [
    "to_str",
    "to_bool",
    "to_int",
    "to_uint",
    "to_float",
    "to_duration",
    "must",
    ]


def to_str(s):
    return s


_true_strings = {"1", "t", "T", "TRUE", "true", "True"}
_false_strings = {"0", "f", "F", "FALSE", "false", "False"}

def to_bool(s):
    if s in _true_strings:
        return True
    if s in _false_strings:
        return False
    raise ConversionError(f"invalid boolean {s!r}")


_int_re = re.compile(r"[+-]?[0-9]+")
_uint_re = re.compile(r"[0-9]+")

def to_int(s):
    if not _int_re.fullmatch(s):
        raise ConversionError(f"invalid integer {s!r}")
    return int(s)

def to_uint(s):
    if not _uint_re.fullmatch(s):
        raise ConversionError(f"invalid unsigned integer {s!r}")
    return int(s)


def to_float(s):
    if (not s) or (s != s.strip()) or ("_" in s):
        raise ConversionError(f"invalid float {s!r}")
    try:
        value = float(s)
    except ValueError:
        raise ConversionError(f"invalid float {s!r}") from None
    # "1e500" overflows to inf; only an explicit "inf" may produce one.
    if math.isinf(value) and (s.lstrip("+-").lower() not in ("inf", "infinity")):
        raise ConversionError(f"float {s!r} is out of range")
    return value


##
## Durations look like "300ms", "1.5h", or "2h45m".
## A duration is an optional sign followed by one or more
## (number, unit) pairs; the number may have a fraction.
## "0" by itself is also allowed.
##
## The units, in microseconds (timedelta's resolution).
## Nanoseconds are truncated.
##

_duration_units = {
    "ns": Decimal("0.001"),
    "us": Decimal(1),
    "µs": Decimal(1), # micro sign
    "μs": Decimal(1), # greek small letter mu
    "ms": Decimal(1000),
    "s":  Decimal(1000000),
    "m":  Decimal(60000000),
    "h":  Decimal(3600000000),
    }

_duration_component_re = re.compile(r"([0-9]*(?:\.[0-9]*)?)([^0-9.]+)")

def to_duration(s):
    text = s
    negative = text.startswith("-")
    if text[:1] in ("-", "+"):
        text = text[1:]
    if text == "0":
        return datetime.timedelta(0)
    if not text:
        raise ConversionError(f"invalid duration {s!r}")

    total = Decimal(0)
    pos = 0
    while pos < len(text):
        match = _duration_component_re.match(text, pos)
        if not match:
            raise ConversionError(f"invalid duration {s!r}")
        number, unit = match.groups()
        if not any(c.isdigit() for c in number):
            raise ConversionError(f"invalid duration {s!r}")
        multiplier = _duration_units.get(unit)
        if multiplier is None:
            raise ConversionError(f"unknown unit {unit!r} in duration {s!r}")
        total += Decimal(number) * multiplier
        pos = match.end()

    microseconds = int(total)
    if negative:
        microseconds = -microseconds
    try:
        return datetime.timedelta(microseconds=microseconds)
    except OverflowError:
        raise ConversionError(f"duration {s!r} is out of range") from None


def must(fn, *args, **kwargs):
    """
    Calls fn(*args, **kwargs) and returns the result.
    If it raises a lexopt exception, exits the program
    with a message instead.
    """
    try:
        return fn(*args, **kwargs)
    except LexoptBaseException as e:
        raise SystemExit(f"error: {e}") from None
