"""
Template registry.

All workout templates are registered here.  Use get_template() to look
up a TemplateDefinition by key, or build_blueprint() to render one
directly under a constraint set.

Templates are loaded from per-template YAML files in the bundled
``src/move_coach/templates/`` directory at import time.  If no template
can be loaded a RuntimeError is raised — plans cannot be generated
without the library.
"""

from ..models import ConstraintSet
from .base import TemplateBlueprint, TemplateDefinition


def _build_registry() -> dict[str, TemplateDefinition]:
    from .loader import load_templates_from_yaml

    loaded = load_templates_from_yaml()
    if not loaded:
        raise RuntimeError(
            "move-coach: no workout templates could be loaded from YAML. "
            "Check that src/move_coach/templates/*.yaml files are present and valid."
        )
    return loaded


TEMPLATE_REGISTRY: dict[str, TemplateDefinition] = _build_registry()


def get_template(key: str) -> TemplateDefinition:
    """
    Return the TemplateDefinition for the given key.

    Args:
        key: One of "lower_strength", "upper_shoulder_safe", "gpp"
            (or any template in the registry)

    Returns:
        TemplateDefinition for the requested key

    Raises:
        ValueError: If key is not in the registry
    """
    if key not in TEMPLATE_REGISTRY:
        valid = ", ".join(TEMPLATE_REGISTRY)
        raise ValueError(f"Unknown template '{key}'. Valid keys: {valid}")
    return TEMPLATE_REGISTRY[key]


def build_blueprint(key: str, constraints: ConstraintSet | None = None) -> TemplateBlueprint:
    """Render the template ``key`` under ``constraints``."""
    return get_template(key).render(constraints)
