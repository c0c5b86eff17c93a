"""Reading and updating the YAML frontmatter of outline documents."""

from __future__ import annotations

import re

import yaml

_STR_TAG = "tag:yaml.org,2002:str"


class FrontmatterError(ValueError):
    """Raised when frontmatter is unclosed, malformed, or has a bad title."""


class _CoreLoader(yaml.SafeLoader):
    """Resolves plain scalars by the YAML 1.2 core schema."""

    yaml_implicit_resolvers: dict = {}


_CoreLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)
_CoreLoader.add_implicit_resolver(
    "tag:yaml.org,2002:null",
    re.compile(r"^(?:~|null|Null|NULL|)$"),
    ["~", "n", "N", ""],
)
_CoreLoader.add_implicit_resolver(
    "tag:yaml.org,2002:int",
    re.compile(r"^[-+]?(?:0b[01_]+|0o[0-7_]+|0x[0-9a-fA-F_]+|[0-9][0-9_]*)$"),
    list("-+0123456789"),
)
_CoreLoader.add_implicit_resolver(
    "tag:yaml.org,2002:float",
    re.compile(
        r"^(?:[-+]?(?:\.[0-9]+|[0-9][0-9_]*(?:\.[0-9_]*)?)(?:[eE][-+]?[0-9]+)?"
        r"|[-+]?\.(?:inf|Inf|INF)|\.(?:nan|NaN|NAN))$"
    ),
    list("-+.0123456789"),
)
_CoreLoader.add_implicit_resolver(
    "tag:yaml.org,2002:timestamp",
    re.compile(
        r"""^(?:[0-9][0-9][0-9][0-9]-[0-9][0-9]-[0-9][0-9]
        |[0-9][0-9][0-9][0-9] -[0-9][0-9]? -[0-9][0-9]?
        (?:[Tt]|[ \t]+)[0-9][0-9]?
        :[0-9][0-9] :[0-9][0-9] (?:\.[0-9]*)?
        (?:[ \t]*(?:Z|[-+][0-9][0-9]?(?::[0-9][0-9])?))?)$""",
        re.X,
    ),
    list("0123456789"),
)


def split(text: str) -> tuple[str, str]:
    """Separate a document into (frontmatter, body).

    Frontmatter is delimited by ``---`` lines; without an opening delimiter
    the whole text is the body.
    """
    if not text:
        return "", ""
    if not text.startswith("---\n"):
        return "", text

    rest = text[4:]
    offset = 0
    for line in rest.split("\n"):
        if line == "---":
            return rest[:offset], rest[offset + len(line) + 1:]
        offset += len(line) + 1
    raise FrontmatterError("unclosed frontmatter")


def _compose(fm: str) -> yaml.Node | None:
    try:
        return yaml.compose(fm, Loader=_CoreLoader)
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"malformed frontmatter: {exc}") from exc


def _find_title(root: yaml.Node | None) -> tuple[yaml.Node, yaml.Node] | None:
    if not isinstance(root, yaml.MappingNode):
        return None
    for key, value in root.value:
        if isinstance(key, yaml.ScalarNode) and key.value == "title":
            return key, value
    return None


def get_title(text: str) -> str:
    """The ``title`` field of the frontmatter, or "" when there is none."""
    fm, _ = split(text)
    if not fm:
        return ""
    entry = _find_title(_compose(fm))
    if entry is None:
        return ""
    _, value = entry
    if value.tag != _STR_TAG:
        raise FrontmatterError("title is not a string")
    return value.value


def set_title(text: str, new_title: str) -> str:
    """Set the frontmatter title, keeping other fields, order and comments."""
    fm, body = split(text)
    title_line = f"title: {encode_yaml_value(new_title)}\n"

    if not fm:
        return serialize(title_line, body)

    entry = _find_title(_compose(fm))
    if entry is None:
        return serialize(fm + title_line, body)

    key, _ = entry
    pieces = fm.split("\n")
    lines = [piece + "\n" for piece in pieces[:-1]] + [pieces[-1]]
    lines[key.start_mark.line] = title_line
    return serialize("".join(lines), body)


def encode_yaml_value(value: str) -> str:
    """Encode a string as a YAML scalar that cannot inject extra keys.

    Values with newlines, colons, double quotes, backslashes or a leading
    ``#`` are double-quoted with escapes.
    """
    if not any(c in value for c in '\n:"\\') and not value.startswith("#"):
        return value

    has_newline = "\n" in value
    escapes = {'"': '\\"', "\\": "\\\\", "\n": "\\n"}
    if has_newline:
        escapes[":"] = "\\x3a"
    return '"' + "".join(escapes.get(c, c) for c in value) + '"'


def serialize(fm: str, body: str) -> str:
    """Combine frontmatter and body into a complete document."""
    return "---\n" + fm + "---\n" + body