"""
Business logic services.

Each service handles one part of the translation pipeline.
"""

from services.mapping_service import MappingTable, build_mapping_table, load_mapping_file
from services.vocabulary_service import (
    Vocabulary,
    VocabularyRegistry,
    CommandMatch,
    load_vocabularies,
)
from services.dropdown_service import (
    DropdownEngine,
    TreeDropdownEngine,
    PatternDropdownEngine,
    get_dropdown_engine,
    substitute_text,
    substitute_tree,
)
from services.translation_service import (
    Direction,
    TranslationResult,
    TranslationService,
    TranslationStage,
    build_translation_service,
)

__all__ = [
    "MappingTable",
    "build_mapping_table",
    "load_mapping_file",
    "Vocabulary",
    "VocabularyRegistry",
    "CommandMatch",
    "load_vocabularies",
    "DropdownEngine",
    "TreeDropdownEngine",
    "PatternDropdownEngine",
    "get_dropdown_engine",
    "substitute_text",
    "substitute_tree",
    "Direction",
    "TranslationResult",
    "TranslationService",
    "TranslationStage",
    "build_translation_service",
]
