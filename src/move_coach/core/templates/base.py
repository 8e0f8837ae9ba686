"""
Base types for workout template definitions.

TemplateDefinition is static reference data loaded from YAML.  Calling
``render(constraints)`` turns it into a TemplateBlueprint: the concrete
warm-up, block list and finisher for one session given the athlete's
active movement restrictions.
"""

from dataclasses import dataclass, field

from ..models import ConstraintSet, ExerciseBlock


@dataclass(frozen=True)
class BlockDefinition:
    """One movement slot in a template."""

    move: str                 # Primary movement, e.g. "Back Squat"
    scheme: str               # Free-text prescription, e.g. "3x6–8 @7–8"
    target_rpe: float         # Target effort on the 1-10 scale
    slots: int                # Working sets

    # Constraint flag -> substitute offered alongside the primary (ExerciseBlock.alt)
    alt_when: dict[str, str] = field(default_factory=dict)
    # Constraint flag -> movement that replaces the primary outright
    replace_when: dict[str, str] = field(default_factory=dict)

    def render(self, constraints: ConstraintSet | None) -> ExerciseBlock:
        """Build the ExerciseBlock for this slot under the given constraints."""
        active = constraints.flags() if constraints is not None else []

        move = self.move
        for flag in active:
            if flag in self.replace_when:
                move = self.replace_when[flag]
                break

        alt: str | None = None
        for flag in active:
            if flag in self.alt_when:
                alt = self.alt_when[flag]
                break

        return ExerciseBlock(
            move=move,
            alt=alt,
            scheme=self.scheme,
            target_rpe=self.target_rpe,
            slots=self.slots,
        )


@dataclass
class TemplateBlueprint:
    """A rendered template: ready to be wrapped into a PlannedSession."""

    title: str
    warmup: list[str]
    blocks: list[ExerciseBlock]
    finisher: str


@dataclass(frozen=True)
class TemplateDefinition:
    """
    Full configuration for one workout template.

    ``uses_constraints`` False means the template renders identically
    whatever the injury list (e.g. general conditioning).
    """

    key: str                  # e.g. "lower_strength"
    title: str                # e.g. "Lower Strength + Grip"
    warmup: list[str]
    blocks: list[BlockDefinition]
    finisher: str
    uses_constraints: bool = True

    def render(self, constraints: ConstraintSet | None = None) -> TemplateBlueprint:
        """Produce a fresh blueprint; each call returns new mutable blocks."""
        effective = constraints if self.uses_constraints else None
        return TemplateBlueprint(
            title=self.title,
            warmup=list(self.warmup),
            blocks=[b.render(effective) for b in self.blocks],
            finisher=self.finisher,
        )
