"""Outline parser: Logseq-style pages with two-space indentation.

Syntax:
    - bullet text                 — top-level bullet (depth 0)
      continuation text           — more text for the bullet above
      key:: value                 — metadata line (Logseq property)
      - child bullet              — depth 1

Each level is exactly two spaces. A bullet indented by an odd number of
spaces, or more than one level below the previous bullet, is a ParseError.
Non-bullet lines are continuations: they belong to the nearest preceding
bullet whose depth encloses their indentation. An odd indent on a
continuation line is not a ParseError: it is logged as a warning and the
line attaches to the enclosing bullet. Lines inside ``` fences are always
continuation text.
"""

import logging
import re

from losrs.errors import ParseError
from losrs.models import Bullet, Property

logger = logging.getLogger(__name__)

INDENT = 2

_BULLET_RE = re.compile(r'^([ \t]*)-(?:[ \t](.*))?$')
_PROPERTY_RE = re.compile(r'^([A-Za-z0-9_.-]+)::(?:[ \t]+(.*?))?[ \t]*$')


def parse_property(stripped: str) -> tuple[str, str] | None:
    """Return (key, value) if the stripped line is a `key:: value` metadata line."""
    m = _PROPERTY_RE.match(stripped)
    if not m:
        return None
    return m.group(1), m.group(2) or ""


def _toggles_fence(s: str) -> bool:
    return s.count("```") % 2 == 1


def _append_text(bullet: Bullet, s: str):
    bullet.text = f"{bullet.text}\n{s}" if bullet.text else s


def parse_outline(text: str) -> Bullet:
    """Parse page text into a root Bullet holding the nested tree."""
    root = Bullet(text="", depth=-1, line=0, head_end=0)
    stack = [root]
    fence_owner: Bullet | None = None

    for lineno, raw in enumerate(text.split("\n"), start=1):
        line = raw.rstrip("\r")
        stripped = line.strip()

        if fence_owner is not None:
            _append_text(fence_owner, stripped)
            if fence_owner is stack[-1]:
                fence_owner.head_end = lineno
            if _toggles_fence(stripped):
                fence_owner = None
            continue

        m = _BULLET_RE.match(line)
        if m:
            leading = m.group(1)
            if "\t" in leading:
                raise ParseError("tab indentation (pages must use two-space indentation)", lineno)
            if len(leading) % INDENT:
                raise ParseError(
                    f"bullet indented by {len(leading)} spaces, not a multiple of {INDENT}", lineno)
            depth = len(leading) // INDENT
            deepest = stack[-1].depth + 1
            if depth > deepest:
                raise ParseError(
                    f"bullet at depth {depth} skips a level (deepest allowed here is {deepest})",
                    lineno)
            while stack[-1].depth >= depth:
                stack.pop()
            body = (m.group(2) or "").strip()
            bullet = Bullet(text=body, depth=depth, line=lineno, head_end=lineno)
            stack[-1].children.append(bullet)
            stack.append(bullet)
            if _toggles_fence(body):
                fence_owner = bullet
            continue

        if not stripped:
            continue

        indent = len(line) - len(line.lstrip(" "))
        if indent % INDENT:
            logger.warning("line %d: continuation indented by %d spaces, not a multiple of %d; "
                           "attaching to enclosing bullet", lineno, indent, INDENT)
        enclosing = indent // INDENT - 1
        owner = root
        for candidate in reversed(stack):
            if candidate.depth <= enclosing:
                owner = candidate
                break
        if owner is stack[-1]:
            owner.head_end = lineno

        prop = parse_property(stripped)
        if prop is not None:
            owner.properties.append(Property(key=prop[0], value=prop[1], line=lineno))
        else:
            _append_text(owner, stripped)
            if _toggles_fence(stripped):
                fence_owner = owner

    return root
