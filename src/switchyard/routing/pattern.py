"""Composable path patterns.

A ``Match`` pairs a ``Parser`` (path → params) with a ``Formatter``
(params → path), so the same declaration both recognizes a URL and
builds one::

    user = lit("users").then(int_param("id")).then(end)

    user.match("/users/42")    # {"id": 42}
    user.match("/users/bob")   # None
    user.format({"id": 42})    # "/users/42"

Template strings compile to the same combinators::

    pattern("/users/{id:int}") == user   # equivalent behavior

Parsers compose by ordered alternation (``alt``): the first alternative
that matches wins, and alternatives are tried in the order they were
combined. ``zero()`` is the empty alternation and never matches.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import reduce
from typing import Any
from urllib.parse import quote

from switchyard.errors import ConfigurationError

# (regex_pattern, python_type) for each supported converter
CONVERTERS: dict[str, tuple[str, type]] = {
    "str": (r"[^/]+", str),
    "int": (r"[0-9]+", int),
    "float": (r"[0-9]+(?:\.[0-9]+)?", float),
    "path": (r".+", str),
}

type Params = dict[str, Any]


@dataclass(frozen=True, slots=True)
class RoutePath:
    """A request path split into its non-empty segments.

    ``parse`` does not percent-decode: ASGI servers hand over paths that
    are already decoded. ``str()`` encodes each segment again.
    """

    segments: tuple[str, ...] = ()

    @classmethod
    def parse(cls, path: str) -> "RoutePath":
        return cls(tuple(part for part in path.split("/") if part))

    @property
    def rest(self) -> "RoutePath":
        """The path with its first segment consumed."""
        return RoutePath(self.segments[1:])

    def append(self, *segments: str) -> "RoutePath":
        return RoutePath((*self.segments, *segments))

    def __str__(self) -> str:
        return "/" + "/".join(quote(segment, safe="") for segment in self.segments)


type Step[A] = Callable[[RoutePath], tuple[A, RoutePath] | None]


@dataclass(frozen=True, slots=True)
class Parser[A]:
    """An ordered alternation of parse steps.

    Each step either consumes a prefix of the path and yields a value,
    or returns ``None``. ``run`` tries the steps in order and returns the
    first success. Alternation concatenates step tuples instead of
    nesting, so a parser built from thousands of ``alt`` calls still runs
    in a flat loop.
    """

    steps: tuple[Step[A], ...] = ()

    def run(self, path: RoutePath) -> tuple[A, RoutePath] | None:
        for step in self.steps:
            result = step(path)
            if result is not None:
                return result
        return None

    def alt(self, other: "Parser[A]") -> "Parser[A]":
        """Try this parser, then *other*."""
        return Parser((*self.steps, *other.steps))

    def map[B](self, f: Callable[[A], B]) -> "Parser[B]":
        """Transform the value of a successful parse."""
        run = self.run

        def step(path: RoutePath) -> tuple[B, RoutePath] | None:
            result = run(path)
            if result is None:
                return None
            value, rest = result
            return f(value), rest

        return Parser((step,))

    def then(self, other: "Parser[Params]") -> "Parser[Params]":
        """Run *other* on what this parser leaves, merging both param dicts."""
        first, second = self.run, other.run

        def step(path: RoutePath) -> tuple[Params, RoutePath] | None:
            head = first(path)
            if head is None:
                return None
            left, rest = head
            tail = second(rest)
            if tail is None:
                return None
            right, remaining = tail
            return {**left, **right}, remaining

        return Parser((step,))


def zero[A]() -> Parser[A]:
    """The parser that never matches."""
    return Parser()


@dataclass(frozen=True, slots=True)
class Formatter:
    """Appends the segments for a params mapping to a path."""

    run: Callable[[RoutePath, Mapping[str, Any]], RoutePath]

    def then(self, other: "Formatter") -> "Formatter":
        first, second = self.run, other.run
        return Formatter(lambda path, params: second(first(path, params), params))


@dataclass(frozen=True, slots=True)
class Match:
    """A path pattern: parser, formatter, and a display template."""

    parser: Parser[Params]
    formatter: Formatter
    template: str = ""

    def then(self, other: "Match") -> "Match":
        return Match(
            self.parser.then(other.parser),
            self.formatter.then(other.formatter),
            self.template + other.template,
        )

    def match(self, path: str) -> Params | None:
        """Return the params extracted from *path*, or ``None``."""
        result = self.parser.run(RoutePath.parse(path))
        if result is None:
            return None
        return result[0]

    def format(self, params: Mapping[str, Any]) -> str:
        """Build a path from *params*. Raises ``KeyError`` for a missing name."""
        return str(self.formatter.run(RoutePath(), params))

    def __str__(self) -> str:
        return self.template or "/"


# -- Combinators --


def _keep(path: RoutePath, _params: Mapping[str, Any]) -> RoutePath:
    return path


def _succeed(path: RoutePath) -> tuple[Params, RoutePath]:
    return {}, path


def _at_end(path: RoutePath) -> tuple[Params, RoutePath] | None:
    if path.segments:
        return None
    return {}, path


end = Match(Parser((_at_end,)), Formatter(_keep))
"""Matches only when every segment has been consumed."""


def lit(text: str) -> Match:
    """Match one literal segment."""

    def step(path: RoutePath) -> tuple[Params, RoutePath] | None:
        if path.segments[:1] != (text,):
            return None
        return {}, path.rest

    return Match(
        Parser((step,)),
        Formatter(lambda path, _params: path.append(text)),
        f"/{text}",
    )


def param(name: str, converter: str = "str") -> Match:
    """Capture a segment under *name*, converted by *converter*.

    ``"path"`` captures every remaining segment, joined with ``/``.
    """
    try:
        regex, target = CONVERTERS[converter]
    except KeyError:
        known = ", ".join(sorted(CONVERTERS))
        msg = f"Unknown converter {converter!r} for {name!r}. Known converters: {known}"
        raise ConfigurationError(msg) from None

    template = f"/{{{name}}}" if converter == "str" else f"/{{{name}:{converter}}}"

    if converter == "path":

        def take_rest(path: RoutePath) -> tuple[Params, RoutePath] | None:
            if not path.segments:
                return None
            return {name: "/".join(path.segments)}, RoutePath()

        def format_rest(path: RoutePath, params: Mapping[str, Any]) -> RoutePath:
            return path.append(*(part for part in str(params[name]).split("/") if part))

        return Match(Parser((take_rest,)), Formatter(format_rest), template)

    compiled = re.compile(regex)

    def take_one(path: RoutePath) -> tuple[Params, RoutePath] | None:
        if not path.segments or compiled.fullmatch(path.segments[0]) is None:
            return None
        return {name: target(path.segments[0])}, path.rest

    return Match(
        Parser((take_one,)),
        Formatter(lambda path, params: path.append(str(params[name]))),
        template,
    )


def str_param(name: str) -> Match:
    return param(name, "str")


def int_param(name: str) -> Match:
    return param(name, "int")


def float_param(name: str) -> Match:
    return param(name, "float")


def path_param(name: str) -> Match:
    return param(name, "path")


def pattern(template: str, *, exact: bool = True) -> Match:
    """Compile a template string such as ``/users/{id:int}`` into a Match.

    Segments in braces are captures (``{name}`` or ``{name:converter}``),
    everything else is literal. With ``exact=True`` (the default) the
    pattern ends with ``end``; otherwise it matches any path it prefixes.

    Raises ``ConfigurationError`` for Flask-style ``<param>`` segments,
    empty capture names, unknown converters, and a ``path`` capture that
    is not the last segment.
    """
    parts = [part for part in template.strip("/").split("/") if part]
    matches: list[Match] = []

    for index, part in enumerate(parts):
        if part.startswith("<") and part.endswith(">"):
            msg = (
                f"Invalid segment {part!r} in {template!r}: "
                "use {param} captures, not <param>."
            )
            raise ConfigurationError(msg)
        if not (part.startswith("{") and part.endswith("}")):
            matches.append(lit(part))
            continue

        name, _, converter = part[1:-1].partition(":")
        if not name:
            msg = f"Empty capture name in {template!r}"
            raise ConfigurationError(msg)
        converter = converter or "str"
        if converter == "path" and index != len(parts) - 1:
            msg = f"{{{name}:path}} must be the last segment of {template!r}"
            raise ConfigurationError(msg)
        matches.append(param(name, converter))

    if exact:
        matches.append(end)
    if not matches:
        return Match(Parser((_succeed,)), Formatter(_keep))
    return reduce(Match.then, matches)
