# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Typed context payloads attached to AI tutor interactions.

Interaction context arrives from the tutor as a loose key-value payload.
It is parsed once, at the record boundary, into one of a closed set of
shapes discriminated by ``kind``:

- HintContext: a hint request (help type, concept, attempt count)
- ExplanationContext: an explanation request
- FeedbackContext: feedback on an answer
- ChatContext: free chat with the tutor
- OtherContext: anything else, carried as an opaque map

Every shape answers the same flag questions (is_confused, is_stuck,
is_incorrect, attempt_count) so the classifiers never look at raw keys.
Both snake_case and the tutor's camelCase keys are accepted.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from adaptlearn.core.adaptive.constants import InteractionType

CONFUSED_HELP_TYPE = "confused"
STUCK_HELP_TYPE = "stuck"


class BaseInteractionContext(BaseModel):
    """Common flag surface for all context shapes."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @property
    def is_confused(self) -> bool:
        """Whether the student reported confusion."""
        return False

    @property
    def is_stuck(self) -> bool:
        """Whether the student reported being stuck."""
        return False

    @property
    def is_incorrect(self) -> bool:
        """Whether the interaction followed an incorrect answer."""
        return False

    @property
    def attempt_count(self) -> int:
        """Attempts made before asking for help."""
        return 0

    @property
    def concept(self) -> str | None:
        """Concept the interaction was about, if named."""
        return None


class HintContext(BaseInteractionContext):
    """Context of a hint request."""

    kind: Literal["hint"] = "hint"
    help_type: str | None = Field(
        default=None, validation_alias=AliasChoices("help_type", "helpType")
    )
    concept_name: str | None = Field(
        default=None, validation_alias=AliasChoices("concept", "concept_name")
    )
    attempts: int = Field(
        default=0, ge=0, validation_alias=AliasChoices("attempt_count", "attemptCount")
    )
    incorrect: bool = Field(
        default=False, validation_alias=AliasChoices("is_incorrect", "isIncorrect")
    )

    @property
    def is_confused(self) -> bool:
        return self.help_type == CONFUSED_HELP_TYPE

    @property
    def is_stuck(self) -> bool:
        return self.help_type == STUCK_HELP_TYPE

    @property
    def is_incorrect(self) -> bool:
        return self.incorrect

    @property
    def attempt_count(self) -> int:
        return self.attempts

    @property
    def concept(self) -> str | None:
        return self.concept_name


class ExplanationContext(BaseInteractionContext):
    """Context of an explanation request."""

    kind: Literal["explanation"] = "explanation"
    concept_name: str | None = Field(
        default=None, validation_alias=AliasChoices("concept", "concept_name")
    )
    incorrect: bool = Field(
        default=False, validation_alias=AliasChoices("is_incorrect", "isIncorrect")
    )

    @property
    def is_incorrect(self) -> bool:
        return self.incorrect

    @property
    def concept(self) -> str | None:
        return self.concept_name


class FeedbackContext(BaseInteractionContext):
    """Context of tutor feedback on an answer."""

    kind: Literal["feedback"] = "feedback"
    rating: str | None = None
    incorrect: bool = Field(
        default=False, validation_alias=AliasChoices("is_incorrect", "isIncorrect")
    )

    @property
    def is_incorrect(self) -> bool:
        return self.incorrect


class ChatContext(BaseInteractionContext):
    """Context of a free chat message."""

    kind: Literal["chat"] = "chat"
    topic: str | None = None
    help_type: str | None = Field(
        default=None, validation_alias=AliasChoices("help_type", "helpType")
    )
    incorrect: bool = Field(
        default=False, validation_alias=AliasChoices("is_incorrect", "isIncorrect")
    )

    @property
    def is_confused(self) -> bool:
        return self.help_type == CONFUSED_HELP_TYPE

    @property
    def is_stuck(self) -> bool:
        return self.help_type == STUCK_HELP_TYPE

    @property
    def is_incorrect(self) -> bool:
        return self.incorrect


class OtherContext(BaseInteractionContext):
    """Fallback for payloads that match no known shape."""

    kind: Literal["other"] = "other"
    data: dict[str, Any] = Field(default_factory=dict)


InteractionContext = Annotated[
    Union[HintContext, ExplanationContext, FeedbackContext, ChatContext, OtherContext],
    Field(discriminator="kind"),
]

_SHAPES: dict[str, type[BaseInteractionContext]] = {
    InteractionType.HINT.value: HintContext,
    InteractionType.EXPLANATION.value: ExplanationContext,
    InteractionType.FEEDBACK.value: FeedbackContext,
    InteractionType.CHAT.value: ChatContext,
}


def parse_context(
    raw: Any,
    interaction_type: InteractionType | str | None = None,
) -> BaseInteractionContext:
    """Parse a raw context payload into its typed shape.

    An explicit ``kind`` key wins; otherwise the interaction type picks the
    shape. Payloads that fail validation, or that match no shape, become
    OtherContext with the original map preserved.

    Args:
        raw: Raw payload (dict, already-parsed context, or None).
        interaction_type: Type of the interaction carrying the payload.

    Returns:
        Parsed context instance.
    """
    if isinstance(raw, BaseInteractionContext):
        return raw
    if not isinstance(raw, dict):
        return OtherContext()

    kind = raw.get("kind")
    if kind is None and interaction_type is not None:
        kind = InteractionType(interaction_type).value

    if kind == "other":
        return OtherContext(data=dict(raw.get("data", {})))

    shape = _SHAPES.get(kind) if isinstance(kind, str) else None
    if shape is None:
        return OtherContext(data=dict(raw))

    payload = {key: value for key, value in raw.items() if key != "kind"}
    try:
        return shape.model_validate(payload)
    except ValidationError:
        return OtherContext(data=dict(raw))
