"""
Workout template library for move-coach.

Each template is described by a TemplateDefinition that renders into a
TemplateBlueprint for a given set of movement constraints.
"""

from .base import BlockDefinition, TemplateBlueprint, TemplateDefinition
from .registry import TEMPLATE_REGISTRY, build_blueprint, get_template

__all__ = [
    "BlockDefinition",
    "TemplateBlueprint",
    "TemplateDefinition",
    "TEMPLATE_REGISTRY",
    "build_blueprint",
    "get_template",
]
