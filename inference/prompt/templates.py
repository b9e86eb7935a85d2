"""
Prompt Templates - logic-light template rendering for flow prompts

Supported syntax (a Handlebars subset):

    {{name}} / {{{name}}}          substitute a value (dotted paths allowed)
    {{#if name}}..{{else}}..{{/if}} conditional section
    {{#if name includeZero=true}}  conditional where 0 counts as present
    {{#unless name}}..{{/unless}}  inverted conditional
    {{#each list}}..{{else}}..{{/each}}
                                   repeat per element; ``this``, ``@index``,
                                   ``@first`` and ``@last`` are in scope, and
                                   keys of dict elements resolve directly
                                   (a key an element lacks is absent)
    {{media url=name}}             attach a data-URI value
    {{!-- comment --}}             dropped
    {{~tag}} / {{tag~}}            strip whitespace before / after the tag

Truthiness rule for ``#if`` / ``#unless``: a value is *falsy* when it is
missing, ``None``, ``False``, ``0`` / ``0.0``, ``""``, an empty list or an
empty dict.  Everything else, including the string ``"0"``, is truthy.  A
legitimate zero (e.g. a 0% interest rate) needs ``includeZero=true``.

Substituted values are plain text.  The template is parsed once, before any
value is seen, so a value containing ``{{...}}`` is emitted verbatim and can
never add directives.  Double and triple braces behave the same (no HTML
escaping; prompts are not HTML).

Any substituted value that is a data URI is lifted out of the text into
``RenderedPrompt.attachments`` and replaced by a short reference label.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..input_processing.attachments import Attachment, is_data_uri, parse_data_uri

_TAG_RE = re.compile(
    r"\{\{(?P<lstrip>~)?(?P<open3>\{)?\s*(?P<body>.*?)\s*(?P<close3>\})?(?P<rstrip>~)?\}\}",
    re.DOTALL,
)
_PATH_RE = re.compile(r"^(?:@\w+|this|[A-Za-z_][\w-]*)(?:\.[A-Za-z_][\w-]*)*$")
_BLOCK_KINDS = ("if", "unless", "each")
_MISSING = object()


class TemplateSyntaxError(ValueError):
    """The template string itself is malformed."""


class TemplateRenderError(KeyError):
    """The render context lacks a variable the template references."""


# ---------------------------------------------------------------------------
# Parse tree
# ---------------------------------------------------------------------------

@dataclass
class _Text:
    text: str


@dataclass
class _Var:
    path: str


@dataclass
class _Media:
    path: str


@dataclass
class _Block:
    kind: str
    path: str
    include_zero: bool = False
    body: List[Any] = field(default_factory=list)
    inverse: List[Any] = field(default_factory=list)
    has_else: bool = False


@dataclass(frozen=True)
class TemplateReference:
    """A variable reference and the ``#each`` lists enclosing it.

    ``scope`` holds the paths of enclosing ``#each`` blocks, outermost
    first; an empty scope means the reference resolves against the root
    context.
    """

    path: str
    scope: Tuple[str, ...] = ()

    @property
    def root(self) -> str:
        return self.path.split(".", 1)[0]

    @property
    def is_local(self) -> bool:
        """True for ``this`` / ``@index`` style names bound by ``#each``."""
        return self.root == "this" or self.root.startswith("@")


@dataclass(frozen=True)
class RenderedPrompt:
    text: str
    attachments: Tuple[Attachment, ...] = ()


@dataclass
class _Frame:
    this: Any
    names: Mapping
    meta: Dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------

def is_truthy(value: Any, include_zero: bool = False) -> bool:
    """Apply the documented ``#if`` truthiness rule (see module docstring)."""
    if value is None or value is _MISSING:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return include_zero or value != 0
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) > 0
    return True


def stringify(value: Any) -> str:
    """Render a context value as prompt text."""
    if value is None or value is _MISSING:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(v) for v in value)
    if isinstance(value, Mapping):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


class PromptTemplate:
    """
    Prompt template with conditional, iteration and media sections

    The template is parsed at construction time; a malformed template raises
    ``TemplateSyntaxError`` immediately.
    """

    def __init__(
        self,
        template: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ):
        """
        Initialize prompt template

        Args:
            template: Template string
            name: Template name
            description: Template description
        """
        self.template = template
        self.name = name or "unnamed_template"
        self.description = description
        self._nodes = self._parse(self._tokenize(template))

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def _tokenize(self, template: str) -> List[Any]:
        tokens: List[Any] = []
        pos = 0
        for match in _TAG_RE.finditer(template):
            if match.start() > pos:
                tokens.append(template[pos:match.start()])
            if bool(match.group("open3")) != bool(match.group("close3")):
                raise TemplateSyntaxError(
                    f"{self.name}: unbalanced triple braces in {match.group(0)!r}"
                )
            if match.group("lstrip") and tokens and isinstance(tokens[-1], str):
                tokens[-1] = tokens[-1].rstrip()
            tokens.append(match)
            pos = match.end()
        if pos < len(template):
            tokens.append(template[pos:])

        # Right-strip markers apply to the following text token.
        for i, token in enumerate(tokens):
            if (
                not isinstance(token, str)
                and token.group("rstrip")
                and i + 1 < len(tokens)
                and isinstance(tokens[i + 1], str)
            ):
                tokens[i + 1] = tokens[i + 1].lstrip()
        return tokens

    def _check_path(self, path: str, tag: str) -> str:
        if not _PATH_RE.match(path):
            raise TemplateSyntaxError(f"{self.name}: invalid variable in {tag!r}")
        return path

    def _parse(self, tokens: List[Any]) -> List[Any]:
        root: List[Any] = []
        current = root
        stack: List[List[Any]] = []  # [block, active child list]

        for token in tokens:
            if isinstance(token, str):
                if token:
                    current.append(_Text(token))
                continue

            tag = token.group(0)
            body = token.group("body")

            if body.startswith("!"):
                continue

            if body.startswith("#"):
                parts = body[1:].split()
                if len(parts) < 2 or parts[0] not in _BLOCK_KINDS:
                    raise TemplateSyntaxError(f"{self.name}: unsupported block {tag!r}")
                kind, path, options = parts[0], parts[1], parts[2:]
                include_zero = False
                for option in options:
                    if kind == "if" and option == "includeZero=true":
                        include_zero = True
                    else:
                        raise TemplateSyntaxError(
                            f"{self.name}: unsupported option {option!r} in {tag!r}"
                        )
                block = _Block(kind, self._check_path(path, tag), include_zero)
                current.append(block)
                stack.append([block, block.body])
                current = block.body
                continue

            if body == "else":
                if not stack or stack[-1][0].has_else:
                    raise TemplateSyntaxError(f"{self.name}: unexpected {{{{else}}}}")
                block = stack[-1][0]
                block.has_else = True
                stack[-1][1] = block.inverse
                current = block.inverse
                continue

            if body.startswith("/"):
                kind = body[1:].strip()
                if not stack or stack[-1][0].kind != kind:
                    raise TemplateSyntaxError(f"{self.name}: unexpected closing tag {tag!r}")
                stack.pop()
                current = stack[-1][1] if stack else root
                continue

            if body.startswith("media"):
                parts = body.split()
                if len(parts) != 2 or not parts[1].startswith("url="):
                    raise TemplateSyntaxError(f"{self.name}: malformed media tag {tag!r}")
                current.append(_Media(self._check_path(parts[1][len("url="):], tag)))
                continue

            current.append(_Var(self._check_path(body, tag)))

        if stack:
            raise TemplateSyntaxError(
                f"{self.name}: unclosed {{{{#{stack[-1][0].kind} {stack[-1][0].path}}}}}"
            )
        return root

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def references(self) -> List[TemplateReference]:
        """List every variable reference with its enclosing ``#each`` scope."""
        refs: List[TemplateReference] = []

        def walk(nodes: List[Any], scope: Tuple[str, ...]) -> None:
            for node in nodes:
                if isinstance(node, (_Var, _Media)):
                    refs.append(TemplateReference(node.path, scope))
                elif isinstance(node, _Block):
                    refs.append(TemplateReference(node.path, scope))
                    inner = scope + (node.path,) if node.kind == "each" else scope
                    walk(node.body, inner)
                    walk(node.inverse, scope)

        walk(self._nodes, ())
        return refs

    @property
    def variables(self) -> List[str]:
        """Root-context variable names referenced by the template."""
        names = {
            ref.root for ref in self.references()
            if not ref.scope and not ref.is_local
        }
        return sorted(names)

    def validate(self, context: Mapping) -> tuple[bool, List[str]]:
        """
        Validate that all root variables are present in the context

        Args:
            context: Render context

        Returns:
            Tuple of (is_valid, missing_variables)
        """
        missing = [var for var in self.variables if var not in context]
        return len(missing) == 0, missing

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, context: Mapping) -> RenderedPrompt:
        """
        Render the template against a context

        Args:
            context: Mapping of variable names to values

        Returns:
            RenderedPrompt with text and extracted attachments

        Raises:
            TemplateRenderError: If a root variable is absent from context
        """
        ok, missing = self.validate(context)
        if not ok:
            raise TemplateRenderError(
                f"{self.name}: context is missing {', '.join(missing)}"
            )
        out: List[str] = []
        attachments: List[Attachment] = []
        frames = [_Frame(this=context, names=context)]
        self._render_nodes(self._nodes, frames, out, attachments)
        return RenderedPrompt(text="".join(out), attachments=tuple(attachments))

    def _lookup(self, path: str, frames: List[_Frame]) -> Any:
        head, *rest = path.split(".")
        value: Any = _MISSING
        if head.startswith("@"):
            value = frames[-1].meta.get(head, _MISSING)
        elif head == "this":
            value = frames[-1].this
        else:
            for frame in reversed(frames):
                if head in frame.names:
                    value = frame.names[head]
                    break
            else:
                if len(frames) == 1:
                    raise TemplateRenderError(f"{self.name}: unknown variable {head!r}")
                # Root names are checked up front, so inside #each this is an
                # item member that is absent from this element.
                return None
        for part in rest:
            if not isinstance(value, Mapping):
                return None
            value = value.get(part)
        return value

    def _emit(self, value: Any, out: List[str], attachments: List[Attachment]) -> None:
        if is_data_uri(value):
            attachment = parse_data_uri(value)
            attachments.append(attachment)
            out.append(f"[attachment #{len(attachments)}: {attachment.mime_type}]")
        else:
            out.append(stringify(value))

    def _render_nodes(
        self,
        nodes: List[Any],
        frames: List[_Frame],
        out: List[str],
        attachments: List[Attachment],
    ) -> None:
        for node in nodes:
            if isinstance(node, _Text):
                out.append(node.text)
            elif isinstance(node, (_Var, _Media)):
                self._emit(self._lookup(node.path, frames), out, attachments)
            elif node.kind == "each":
                items = self._lookup(node.path, frames)
                if isinstance(items, Mapping):
                    items = list(items.values())
                if not isinstance(items, (list, tuple)) or not items:
                    self._render_nodes(node.inverse, frames, out, attachments)
                    continue
                last = len(items) - 1
                for index, item in enumerate(items):
                    frame = _Frame(
                        this=item,
                        names=item if isinstance(item, Mapping) else {},
                        meta={
                            "@index": index,
                            "@first": index == 0,
                            "@last": index == last,
                        },
                    )
                    self._render_nodes(node.body, frames + [frame], out, attachments)
            else:
                truthy = is_truthy(self._lookup(node.path, frames), node.include_zero)
                if node.kind == "unless":
                    truthy = not truthy
                branch = node.body if truthy else node.inverse
                self._render_nodes(branch, frames, out, attachments)
