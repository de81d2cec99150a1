"""Application layer: reconciliation, merge policies, packs, rejection and the edit-session reducer."""

from variant_engine.application.commands import (
    ApplyMergeStrategy,
    BuildPack,
    CancelOptionsChange,
    ChangeSelection,
    GenerateCombinations,
    PendingOptionsChange,
    RecomputeTitles,
    UpdateVariant,
    VariantEditor,
    VariantEditState,
    apply_command,
    get_variant_editor,
)
from variant_engine.application.factory import VariantFactory
from variant_engine.application.merge import MergeResult, MergeStrategyExecutor
from variant_engine.application.packs import (
    PackBuildResult,
    PackVariantBuilder,
    validate_pack_quantity,
)
from variant_engine.application.payload import build_variant_payload, sanitize_variant
from variant_engine.application.reconciler import (
    OptionsChangeImpact,
    VariantReconciler,
    classify_change,
)
from variant_engine.application.rejection import (
    RejectionDecision,
    RejectionReason,
    decide_rejection,
    decide_variant_rejection,
    is_valid_ean,
    normalize_ean,
    validate_ean,
    validate_identifiers,
)

__all__ = [
    # Commands
    "ApplyMergeStrategy",
    "BuildPack",
    "CancelOptionsChange",
    "ChangeSelection",
    "GenerateCombinations",
    "PendingOptionsChange",
    "RecomputeTitles",
    "UpdateVariant",
    "VariantEditor",
    "VariantEditState",
    "apply_command",
    "get_variant_editor",
    # Variants
    "VariantFactory",
    "MergeResult",
    "MergeStrategyExecutor",
    "OptionsChangeImpact",
    "VariantReconciler",
    "classify_change",
    # Packs
    "PackBuildResult",
    "PackVariantBuilder",
    "validate_pack_quantity",
    # Rejection
    "RejectionDecision",
    "RejectionReason",
    "decide_rejection",
    "decide_variant_rejection",
    "is_valid_ean",
    "normalize_ean",
    "validate_ean",
    "validate_identifiers",
    # Payload
    "build_variant_payload",
    "sanitize_variant",
]
