"""
Named parameter detection and substitution for hoarded command templates.

A parameter starts with the configured parameter token (``#`` by default) and
runs until the ending token (``!`` by default), whitespace or the end of the
template, whichever comes first::

    echo #greeting! #name    ->  greeting, name
    echo \\#literal           ->  no parameters
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from rich.text import Text

from constants import DEFAULT_PARAMETER_TOKEN, DEFAULT_PARAMETER_ENDING_TOKEN, PARAMETER_ESCAPE
from exceptions import DelimiterCollisionError
from logger import get_logger


@dataclass
class ParameterToken:
    """A distinct named parameter and every span it occupies in the template"""
    name: str
    spans: List[Tuple[int, int]] = field(default_factory=list)  # (start, end) with delimiters included

    @property
    def occurrences(self) -> int:
        return len(self.spans)


# Asked once per distinct parameter; returning None cancels the resolution
ValuePromptFn = Callable[[ParameterToken, str], Optional[str]]


def validate_delimiters(start: Optional[str], end: Optional[str]):
    """Reject a configuration whose start and ending tokens collide"""
    if start and end and start == end:
        raise DelimiterCollisionError(
            f"Your parameter token {start!r} is equal to your ending token {end!r}. "
            "Please set one of them to another character!"
        )


def parse(template: str,
          start: Optional[str] = DEFAULT_PARAMETER_TOKEN,
          end: Optional[str] = DEFAULT_PARAMETER_ENDING_TOKEN) -> List[ParameterToken]:
    """Scan a template and return its parameters in first-occurrence order.

    Runs without a name (``# ``, ``#!``, a trailing ``#``) and escaped tokens
    are left as literal text, so parsing never fails.
    """
    if not start:
        return []

    tokens: Dict[str, ParameterToken] = {}
    length = len(template)
    i = 0
    while i < length:
        if not template.startswith(start, i):
            i += 1
            continue
        if i > 0 and template[i - 1] == PARAMETER_ESCAPE:
            i += len(start)
            continue

        name_start = i + len(start)
        j = name_start
        span_end = None
        while j < length and not template[j].isspace():
            if end and template.startswith(end, j):
                span_end = j + len(end)
                break
            j += 1
        if span_end is None:
            span_end = j

        name = template[name_start:j]
        if not name:
            i += len(start)
            continue

        tokens.setdefault(name, ParameterToken(name)).spans.append((i, span_end))
        i = span_end

    return list(tokens.values())


def resolve(template: str, tokens: List[ParameterToken], values: Dict[str, str]) -> str:
    """Substitute every span of each named parameter with its value.

    Parameters without a value keep their original text.
    """
    replacements = []
    for token in tokens:
        if token.name not in values:
            continue
        for span_start, span_end in token.spans:
            replacements.append((span_start, span_end, values[token.name]))

    # Apply changes from right to left to maintain positions
    resolved = template
    for span_start, span_end, value in sorted(replacements, key=lambda r: r[0], reverse=True):
        resolved = resolved[:span_start] + value + resolved[span_end:]
    return resolved


def highlight_parameters(template: str, tokens: List[ParameterToken],
                         base_style: str = "white", param_style: str = "yellow") -> Text:
    """Highlight parameters in a command template"""
    spans = sorted(span for token in tokens for span in token.spans)
    if not spans:
        return Text(template, style=base_style)

    result = Text()
    last_end = 0
    for span_start, span_end in spans:
        if span_start > last_end:
            result.append(template[last_end:span_start], style=base_style)
        result.append(template[span_start:span_end], style=param_style)
        last_end = span_end

    if last_end < len(template):
        result.append(template[last_end:], style=base_style)
    return result


class ParameterResolver:
    """Turns a command template into an executable command string"""

    def __init__(self, start: Optional[str] = DEFAULT_PARAMETER_TOKEN,
                 end: Optional[str] = DEFAULT_PARAMETER_ENDING_TOKEN):
        self.start = start
        self.end = end
        self.logger = get_logger(self.__class__.__name__)

    @classmethod
    def from_config(cls, config) -> 'ParameterResolver':
        return cls(config.parameter_token, config.parameter_ending_token)

    def parse(self, template: str) -> List[ParameterToken]:
        return parse(template, self.start, self.end)

    def resolve(self, template: str, values: Dict[str, str]) -> str:
        return resolve(template, self.parse(template), values)

    def resolve_interactively(self, template: str, prompt: ValuePromptFn) -> Optional[str]:
        """Ask for a value for each distinct parameter and substitute them.

        The prompt sees a preview of the command with the values gathered so
        far. Returns None as soon as a prompt is cancelled; values collected up
        to that point are dropped.
        """
        tokens = self.parse(template)
        values: Dict[str, str] = {}
        for token in tokens:
            preview = resolve(template, tokens, values)
            value = prompt(token, preview)
            if value is None:
                self.logger.debug(f"Resolution cancelled at parameter '{token.name}'")
                return None
            values[token.name] = value

        resolved = resolve(template, tokens, values)
        self.logger.debug(f"Resolved {len(tokens)} parameters in '{template}'")
        return resolved
