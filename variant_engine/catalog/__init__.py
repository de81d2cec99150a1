"""Attribute catalog, combination generation and automatic titles.

Normalizes the category's attribute schema, expands a selection into
variant combinations and names them.
"""

from variant_engine.catalog.generator import (
    CombinationExplosionWarning,
    CombinationGenerator,
    GenerationResult,
    GeneratorConfig,
    generate_combinations,
)
from variant_engine.catalog.models import (
    AttributeCatalog,
    AttributeSchema,
    AttributeSelection,
    AttributeValueSchema,
    ProductTypeListResponse,
    SelectedAttribute,
    selected_attributes,
    selected_value_ids,
    selected_value_references,
)
from variant_engine.catalog.titles import (
    TITLE_SEPARATOR,
    AutoTitleGenerator,
    ResolvedValue,
    TitleRecomputation,
    generate_title,
)

__all__ = [
    # Models
    "AttributeCatalog",
    "AttributeSchema",
    "AttributeSelection",
    "AttributeValueSchema",
    "ProductTypeListResponse",
    "SelectedAttribute",
    "selected_attributes",
    "selected_value_ids",
    "selected_value_references",
    # Generator
    "CombinationExplosionWarning",
    "CombinationGenerator",
    "GenerationResult",
    "GeneratorConfig",
    "generate_combinations",
    # Titles
    "TITLE_SEPARATOR",
    "AutoTitleGenerator",
    "ResolvedValue",
    "TitleRecomputation",
    "generate_title",
]
