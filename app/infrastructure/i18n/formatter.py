"""ICU-style message formatting.

Supports the subset of ICU MessageFormat used by bot strings:

    {name}                                  simple argument
    {count, number}                         locale-aware number
    {count, plural, =0 {none} one {# item} other {# items}}
    {place, selectordinal, one {#st} two {#nd} few {#rd} other {#th}}
    {gender, select, female {she} male {he} other {they}}

Plural categories and number formatting come from Babel's CLDR data. A
missing variable never raises: its placeholder is left in the output as
written, so partially bound messages stay readable.
"""

import functools
import math
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from babel import Locale, UnknownLocaleError
from babel import numbers as babel_numbers

from core.logging import get_module_logger
from infrastructure.i18n.exceptions import MessageFormatError

logger = get_module_logger()

PLURAL_TYPES = ("plural", "selectordinal")


@dataclass(frozen=True)
class Argument:
    """Placeholder without a format type."""

    name: str
    source: str


@dataclass(frozen=True)
class NumberArgument:
    name: str
    style: str
    source: str


@dataclass(frozen=True)
class Pound:
    """`#` inside a plural branch: the plural value minus offset."""

    pass


@dataclass(frozen=True)
class ChoiceArgument:
    """plural, selectordinal or select argument.

    Attributes:
        name: Variable name.
        kind: "plural", "selectordinal" or "select".
        options: Selector (e.g. "one", "=0", "male") to branch nodes.
        offset: Plural offset.
        source: Original placeholder text.
    """

    name: str
    kind: str
    options: Dict[str, Tuple["Node", ...]] = field(default_factory=dict)
    offset: Union[int, float] = 0
    source: str = ""


Node = Union[str, Argument, NumberArgument, Pound, ChoiceArgument]


@functools.lru_cache(maxsize=128)
def get_babel_locale(tag: str) -> Optional[Locale]:
    """Babel locale of a language tag ("en-US", "ru_RU"), or None if unknown."""
    try:
        return Locale.parse(tag.replace("-", "_"))
    except (UnknownLocaleError, ValueError, TypeError):
        return None


def select_plural_category(
    n: Union[int, float, Decimal], tag: str, ordinal: bool = False
) -> str:
    """CLDR plural category of a number for a language tag.

    Unknown tags fall back to the one/other rule.
    """
    locale = get_babel_locale(tag)
    if locale is None:
        if ordinal:
            return "other"
        return "one" if abs(n) == 1 else "other"
    rule = locale.ordinal_form if ordinal else locale.plural_form
    return rule(n)


class _Parser:
    """Recursive descent parser for message templates."""

    def __init__(self, template: str):
        self.template = template
        self.pos = 0

    def parse(self) -> Tuple[Node, ...]:
        nodes = self._parse_message(depth=0, in_plural=False)
        if self.pos < len(self.template):
            self._fail("unmatched '}'")
        return nodes

    def _fail(self, reason: str) -> None:
        raise MessageFormatError(
            f"Invalid message template at position {self.pos}: {reason} "
            f"(template: {self.template[:80]!r})"
        )

    def _parse_message(self, depth: int, in_plural: bool) -> Tuple[Node, ...]:
        nodes: List[Node] = []
        text: List[str] = []
        template = self.template

        while self.pos < len(template):
            char = template[self.pos]

            if char == "'":
                text.append(self._parse_apostrophe(in_plural))
                continue

            if char == "{":
                if text:
                    nodes.append("".join(text))
                    text = []
                nodes.append(self._parse_argument(depth))
                continue

            if char == "}":
                if depth == 0:
                    self._fail("unmatched '}'")
                break

            if char == "#" and in_plural:
                if text:
                    nodes.append("".join(text))
                    text = []
                nodes.append(Pound())
                self.pos += 1
                continue

            text.append(char)
            self.pos += 1

        if text:
            nodes.append("".join(text))
        return tuple(nodes)

    def _parse_apostrophe(self, in_plural: bool) -> str:
        template = self.template
        nxt = template[self.pos + 1] if self.pos + 1 < len(template) else ""

        if nxt == "'":
            self.pos += 2
            return "'"

        if nxt in ("{", "}") or (in_plural and nxt == "#"):
            # Quoted literal up to the next lone apostrophe
            self.pos += 1
            quoted: List[str] = []
            while self.pos < len(template):
                char = template[self.pos]
                if char == "'":
                    if template[self.pos + 1 : self.pos + 2] == "'":
                        quoted.append("'")
                        self.pos += 2
                        continue
                    self.pos += 1
                    return "".join(quoted)
                quoted.append(char)
                self.pos += 1
            return "".join(quoted)

        self.pos += 1
        return "'"

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.template) and self.template[self.pos].isspace():
            self.pos += 1

    def _read_token(self, stop: str) -> str:
        start = self.pos
        template = self.template
        while (
            self.pos < len(template)
            and not template[self.pos].isspace()
            and template[self.pos] not in stop
        ):
            self.pos += 1
        return template[start : self.pos]

    def _expect(self, char: str) -> None:
        if self.pos >= len(self.template) or self.template[self.pos] != char:
            self._fail(f"expected {char!r}")
        self.pos += 1

    def _parse_argument(self, depth: int) -> Node:
        start = self.pos
        self._expect("{")
        self._skip_whitespace()

        name = self._read_token(",{}")
        if not name:
            self._fail("empty argument name")
        self._skip_whitespace()

        if self._peek() == "}":
            self.pos += 1
            return Argument(name=name, source=self.template[start : self.pos])

        self._expect(",")
        self._skip_whitespace()
        kind = self._read_token(",{}")
        self._skip_whitespace()

        if kind in PLURAL_TYPES or kind == "select":
            self._expect(",")
            options, offset = self._parse_options(kind, depth)
            self._expect("}")
            return ChoiceArgument(
                name=name,
                kind=kind,
                options=options,
                offset=offset,
                source=self.template[start : self.pos],
            )

        if kind != "number":
            self._fail(f"unsupported argument type {kind!r}")

        style = ""
        if self._peek() == ",":
            self.pos += 1
            style_start = self.pos
            while self.pos < len(self.template) and self.template[self.pos] != "}":
                self.pos += 1
            style = self.template[style_start : self.pos].strip()
        self._expect("}")
        return NumberArgument(
            name=name, style=style, source=self.template[start : self.pos]
        )

    def _parse_options(
        self, kind: str, depth: int
    ) -> Tuple[Dict[str, Tuple[Node, ...]], Union[int, float]]:
        options: Dict[str, Tuple[Node, ...]] = {}
        offset: Union[int, float] = 0

        while True:
            self._skip_whitespace()
            if self._peek() in ("}", ""):
                break

            selector = self._read_token("{}")
            if kind == "plural" and selector.startswith("offset:"):
                offset = _parse_number(selector[len("offset:") :], self)
                continue
            if not selector:
                self._fail("expected a selector")

            self._skip_whitespace()
            self._expect("{")
            branch = self._parse_message(depth + 1, in_plural=kind in PLURAL_TYPES)
            self._expect("}")
            options[selector] = branch

        if "other" not in options:
            self._fail(f"{kind} argument requires an 'other' option")
        return options, offset

    def _peek(self) -> str:
        return self.template[self.pos] if self.pos < len(self.template) else ""


def _parse_number(raw: str, parser: Optional[_Parser] = None) -> Union[int, float]:
    try:
        number = float(raw)
    except ValueError:
        if parser is not None:
            parser._fail(f"invalid number {raw!r}")
        raise
    return int(number) if number.is_integer() else number


@functools.lru_cache(maxsize=1024)
def parse_template(template: str) -> Tuple[Node, ...]:
    """Parse a template into nodes, caching the result per template.

    Raises:
        MessageFormatError: If the template is malformed.
    """
    return _Parser(template).parse()


class MessageFormatter:
    """Renders message templates for a language.

    Example:
        >>> MessageFormatter().format("Hi {name}", {"name": "Bob"}, "en-US")
        'Hi Bob'
    """

    def format(
        self,
        template: str,
        variables: Optional[Mapping[str, Any]] = None,
        tag: str = "en",
    ) -> str:
        """Render a template.

        Args:
            template: ICU-style message template.
            variables: Values of the template placeholders.
            tag: Language tag selecting plural rules and number format.

        Returns:
            Rendered message. Unbound placeholders are kept verbatim.

        Raises:
            MessageFormatError: If the template is malformed.
        """
        if not any(char in template for char in "{}'"):
            return template
        nodes = parse_template(template)
        return self._render(nodes, variables or {}, tag, None)

    def _render(
        self,
        nodes: Tuple[Node, ...],
        variables: Mapping[str, Any],
        tag: str,
        plural_value: Optional[Union[int, float, Decimal]],
    ) -> str:
        parts: List[str] = []
        for node in nodes:
            if isinstance(node, str):
                parts.append(node)
            elif isinstance(node, Pound):
                parts.append(
                    "#" if plural_value is None else _format_number(plural_value, "", tag)
                )
            elif isinstance(node, Argument):
                parts.append(self._render_argument(node, variables))
            elif isinstance(node, NumberArgument):
                parts.append(self._render_number(node, variables, tag))
            else:
                parts.append(self._render_choice(node, variables, tag, plural_value))
        return "".join(parts)

    def _render_argument(self, node: Argument, variables: Mapping[str, Any]) -> str:
        if node.name not in variables:
            logger.debug("missing_message_variable", variable=node.name)
            return node.source
        value = variables[node.name]
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def _render_number(
        self, node: NumberArgument, variables: Mapping[str, Any], tag: str
    ) -> str:
        if node.name not in variables:
            logger.debug("missing_message_variable", variable=node.name)
            return node.source
        number = _to_number(variables[node.name])
        if number is None:
            return str(variables[node.name])
        return _format_number(number, node.style, tag)

    def _render_choice(
        self,
        node: ChoiceArgument,
        variables: Mapping[str, Any],
        tag: str,
        plural_value: Optional[Union[int, float, Decimal]],
    ) -> str:
        if node.name not in variables:
            logger.debug("missing_message_variable", variable=node.name)
            return node.source
        value = variables[node.name]

        if node.kind == "select":
            key = str(value).lower() if isinstance(value, bool) else str(value)
            branch = node.options.get(key, node.options["other"])
            return self._render(branch, variables, tag, plural_value)

        number = _to_number(value)
        if number is None:
            logger.debug(
                "non_numeric_plural_value", variable=node.name, value=repr(value)
            )
            return self._render(node.options["other"], variables, tag, None)

        exact = node.options.get(f"={_plain_number(number)}")
        if exact is not None:
            return self._render(exact, variables, tag, number - node.offset)

        category = select_plural_category(
            number - node.offset, tag, ordinal=node.kind == "selectordinal"
        )
        branch = node.options.get(category, node.options["other"])
        return self._render(branch, variables, tag, number - node.offset)


def _to_number(value: Any) -> Optional[Union[int, float, Decimal]]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = value
    elif isinstance(value, str):
        try:
            number = _parse_number(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if _is_finite(number) else None


def _is_finite(number: Union[int, float, Decimal]) -> bool:
    if isinstance(number, int):
        return True
    if isinstance(number, Decimal):
        return number.is_finite()
    return math.isfinite(number)


def _plain_number(number: Union[int, float, Decimal]) -> str:
    if isinstance(number, int):
        return str(number)
    if _is_finite(number) and float(number).is_integer():
        return str(int(number))
    return str(number)


def _format_number(number: Union[int, float, Decimal], style: str, tag: str) -> str:
    locale = get_babel_locale(tag)
    if locale is None:
        return _plain_number(number)
    try:
        if style == "integer":
            return babel_numbers.format_decimal(round(number), locale=locale)
        if style == "percent":
            return babel_numbers.format_percent(number, locale=locale)
        if style:
            return babel_numbers.format_decimal(number, format=style, locale=locale)
        return babel_numbers.format_decimal(number, locale=locale)
    except InvalidOperation:
        logger.debug("number_format_fallback", number=repr(number), language=tag)
        return _plain_number(number)
