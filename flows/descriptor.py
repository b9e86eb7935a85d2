"""FlowDefinition: self-describing manifest for one generative use case.

Each flow sub-package exports a ``DESCRIPTOR`` instance so the registry can
discover and run flows **generically**: one orchestrator, many
declarations.  A definition carries only data (shapes, prompt template,
catalog text) plus an optional pure ``precompute`` hook.

Adding a new flow = create a sub-package with a ``DESCRIPTOR`` and list it
in ``flows.__init__``.  Zero edits to orchestration code.

Construction is the definition-time check: the prompt template is parsed
and every variable it references must be an input property, a declared
fact, or (inside ``#each``) a field of the iterated items.  Anything else
raises ``FlowDefinitionError`` so a broken flow never gets registered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Mapping, Optional

from inference.prompt.templates import PromptTemplate

from .errors import FlowDefinitionError
from .shapes import ArrayShape, ObjectShape

logger = logging.getLogger(__name__)

PrecomputeFn = Callable[[Mapping[str, Any], date], Mapping[str, Any]]


@dataclass(frozen=True)
class FlowDefinition:
    """Declarative flow manifest.

    Attributes:
        name:
            Unique flow identifier, e.g. ``"international_shipping"``.  Used
            as the registry key and in log prefixes.
        input_shape:
            Object shape the request must satisfy.
        output_shape:
            Object shape every returned value satisfies; its JSON schema is
            sent to the backend as the output contract.
        prompt_template:
            Template source rendered per invocation.
        system_prompt:
            Optional role / persona instruction sent alongside the contract.
        precompute:
            Optional ``(validated_input, today) -> facts`` pure function.
        facts:
            Names ``precompute`` may produce.  Undeclared keys it returns
            are dropped.
        catalog_entry:
            Human-readable purpose / inputs / outputs text for listings.
    """

    name: str
    input_shape: ObjectShape
    output_shape: ObjectShape
    prompt_template: str
    system_prompt: str = ""
    precompute: Optional[PrecomputeFn] = field(repr=False, default=None)
    facts: tuple[str, ...] = ()
    catalog_entry: str = ""
    template: PromptTemplate = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise FlowDefinitionError("flow name must not be empty")
        object.__setattr__(self, "facts", tuple(self.facts))

        clashes = set(self.facts) & set(self.input_shape.names)
        if clashes:
            raise FlowDefinitionError(
                f"facts shadow input fields: {', '.join(sorted(clashes))}",
                flow_name=self.name,
            )
        if self.facts and self.precompute is None:
            raise FlowDefinitionError(
                "facts are declared but no precompute function is set",
                flow_name=self.name,
            )

        # Syntax errors in the template itself propagate unchanged.
        template = PromptTemplate(self.prompt_template, name=self.name)
        object.__setattr__(self, "template", template)
        self._check_references()
        logger.debug(
            "[%s] definition checked: %d input field(s), %d fact(s)",
            self.name, len(self.input_shape.properties), len(self.facts),
        )

    # ------------------------------------------------------------------
    # Definition-time reference check
    # ------------------------------------------------------------------

    def _check_references(self) -> None:
        known = set(self.input_shape.names) | set(self.facts)
        for ref in self.template.references():
            if ref.is_local:
                if not ref.scope:
                    raise FlowDefinitionError(
                        f"{{{{{ref.path}}}}} is only valid inside an #each block",
                        flow_name=self.name,
                    )
                continue
            if ref.root in known:
                continue
            if ref.scope and ref.root in self._item_fields(ref.scope):
                continue
            raise FlowDefinitionError(
                f"template references {ref.path!r}, which is neither an input "
                f"field nor a declared fact",
                flow_name=self.name,
            )

    def _item_fields(self, scope: tuple[str, ...]) -> dict[str, Any]:
        """Fields of object items iterated by the enclosing ``#each`` blocks."""
        available: dict[str, Any] = {}
        for path in scope:
            head, *rest = path.split(".")
            if head in available:
                shape = available[head]
            else:
                member = self.input_shape.get(head)
                shape = member.shape if member is not None else None
            for part in rest:
                member = shape.get(part) if isinstance(shape, ObjectShape) else None
                shape = member.shape if member is not None else None
            if isinstance(shape, ArrayShape) and isinstance(shape.items, ObjectShape):
                available.update({p.name: p.shape for p in shape.items.properties})
        return available

    # ------------------------------------------------------------------
    # Per-invocation helpers
    # ------------------------------------------------------------------

    @property
    def has_precompute(self) -> bool:
        return self.precompute is not None

    def compute_facts(self, validated_input: Mapping[str, Any], today: date) -> dict[str, Any]:
        """Run ``precompute`` and keep only declared facts (default None)."""
        facts: dict[str, Any] = {name: None for name in self.facts}
        if self.precompute is None:
            return facts
        produced = self.precompute(validated_input, today) or {}
        for key, value in produced.items():
            if key in facts:
                facts[key] = value
            else:
                logger.warning("[%s] precompute produced undeclared fact %r; dropped", self.name, key)
        return facts

    def build_context(
        self,
        validated_input: Mapping[str, Any],
        facts: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Render context: every input field (absent ones as None) plus facts."""
        context: dict[str, Any] = {name: validated_input.get(name) for name in self.input_shape.names}
        context.update(facts)
        return context

    def to_catalog(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.catalog_entry.strip(),
            "input_schema": self.input_shape.to_json_schema(),
            "output_schema": self.output_shape.to_json_schema(),
        }
