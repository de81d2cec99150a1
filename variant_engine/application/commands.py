"""Edit-session reducer.

The variant editor's state lives in an immutable VariantEditState. Every
user action is a command; ``apply_command(state, command)`` returns the
next state and appends the domain events the command produced.

A selection change that touches saved variants parks the session in
PENDING_IMPACT. Until the user applies a merge strategy or cancels,
commands that edit the variant list are refused.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping

import structlog
import structlog.contextvars

from variant_engine.application.factory import VariantFactory
from variant_engine.application.merge import MergeStrategyExecutor
from variant_engine.application.packs import PackVariantBuilder, validate_pack_quantity
from variant_engine.application.reconciler import OptionsChangeImpact, VariantReconciler
from variant_engine.catalog.generator import CombinationExplosionWarning, CombinationGenerator
from variant_engine.catalog.models import AttributeCatalog, AttributeSelection
from variant_engine.catalog.titles import AutoTitleGenerator
from variant_engine.domain.base import DomainEvent
from variant_engine.domain.entities import Variant
from variant_engine.domain.events import (
    CombinationsGenerated,
    OptionsChangeCancelled,
    OptionsChangeProposed,
    OptionsChangeResolved,
    PackVariantCreated,
    VariantTitlesRecomputed,
)
from variant_engine.domain.exceptions import OptionsChangePendingError, VariantNotFoundError
from variant_engine.domain.state_machines import (
    OptionsChangeStatus,
    validate_options_change_transition,
)
from variant_engine.domain.value_objects import MergeStrategy, SessionId, VariantId

logger = structlog.get_logger()


# ============================================================================
# State
# ============================================================================


@dataclass(frozen=True)
class PendingOptionsChange:
    """A proposed selection change awaiting a merge strategy."""

    catalog: AttributeCatalog
    selection: AttributeSelection
    impact: OptionsChangeImpact

    @property
    def warning(self) -> CombinationExplosionWarning | None:
        """Explosion warning for the proposed selection."""
        return self.impact.warning


@dataclass(frozen=True)
class VariantEditState:
    """Immutable state of one variant-editing session.

    Attributes:
        session_id: Edit session identifier.
        catalog: Catalog the current selection applies to.
        selection: Selection the variant list was built from.
        variants: Current variant list.
        pending: Proposed change while status is PENDING_IMPACT.
        status: Options-change lifecycle status.
        events: Events recorded so far, oldest first.
        warning: Explosion warning for the current selection, if any.
    """

    session_id: SessionId
    catalog: AttributeCatalog
    selection: AttributeSelection = field(default_factory=AttributeSelection)
    variants: tuple[Variant, ...] = ()
    pending: PendingOptionsChange | None = None
    status: OptionsChangeStatus = OptionsChangeStatus.IDLE
    events: tuple[DomainEvent, ...] = ()
    warning: CombinationExplosionWarning | None = None

    @classmethod
    def start(
        cls,
        catalog: AttributeCatalog,
        selection: AttributeSelection | None = None,
        variants: tuple[Variant, ...] | list[Variant] = (),
        session_id: SessionId | None = None,
    ) -> "VariantEditState":
        """Open an edit session, typically over a saved product.

        Args:
            catalog: Category attribute catalog.
            selection: Saved selection (empty for a new product).
            variants: Saved variants.
            session_id: Session id (generated when omitted).

        Returns:
            Idle edit state.
        """
        return cls(
            session_id=session_id or SessionId.generate(),
            catalog=catalog,
            selection=selection or AttributeSelection(),
            variants=tuple(variants),
        )

    @property
    def is_pending(self) -> bool:
        """Check if an options change awaits resolution."""
        return self.status is OptionsChangeStatus.PENDING_IMPACT

    def get_variant(self, variant_id: VariantId | str) -> Variant:
        """Look up a variant by id.

        Raises:
            VariantNotFoundError: If no variant has that id.
        """
        target = str(variant_id)
        for variant in self.variants:
            if str(variant.id) == target:
                return variant
        raise VariantNotFoundError(str(self.session_id), target)


# ============================================================================
# Commands
# ============================================================================


@dataclass(frozen=True)
class GenerateCombinations:
    """Build one variant per combination of the current selection.

    Saved variants whose combination is still generated are kept as they
    are, in generation order. Every other saved variant (orphans, packs)
    follows in its saved order; only Regenerate All discards variants.
    """


@dataclass(frozen=True)
class ChangeSelection:
    """Propose a new selection (and optionally a new catalog)."""

    selection: AttributeSelection
    catalog: AttributeCatalog | None = None


@dataclass(frozen=True)
class ApplyMergeStrategy:
    """Resolve the pending options change with a merge strategy."""

    strategy: MergeStrategy


@dataclass(frozen=True)
class CancelOptionsChange:
    """Abandon the pending options change."""


@dataclass(frozen=True)
class BuildPack:
    """Derive a pack of ``pack_quantity`` units from a variant."""

    variant_id: VariantId | str
    pack_quantity: Any


@dataclass(frozen=True)
class UpdateVariant:
    """Change fields of one variant (pricing, stock, identifiers, titles)."""

    variant_id: VariantId | str
    changes: Mapping[str, Any]


@dataclass(frozen=True)
class RecomputeTitles:
    """Refresh stale auto-generated titles."""


Command = (
    GenerateCombinations
    | ChangeSelection
    | ApplyMergeStrategy
    | CancelOptionsChange
    | BuildPack
    | UpdateVariant
    | RecomputeTitles
)

_IMMUTABLE_FIELDS = frozenset({"id", "link", "is_pack", "pack_qty", "option_value_ids"})


# ============================================================================
# Editor
# ============================================================================


class VariantEditor:
    """Applies commands to edit states.

    Example usage:
        editor = VariantEditor()
        state = VariantEditState.start(catalog)
        state = editor.apply(state, ChangeSelection(selection))
        state = editor.apply(state, GenerateCombinations())
    """

    def __init__(
        self,
        generator: CombinationGenerator | None = None,
        reconciler: VariantReconciler | None = None,
        executor: MergeStrategyExecutor | None = None,
        pack_builder: PackVariantBuilder | None = None,
    ) -> None:
        self.generator = generator or CombinationGenerator()
        self.reconciler = reconciler or VariantReconciler(self.generator)
        self.executor = executor or MergeStrategyExecutor(self.generator)
        self.pack_builder = pack_builder or PackVariantBuilder()
        self._handlers: dict[type, Callable[[VariantEditState, Any], VariantEditState]] = {
            GenerateCombinations: self._generate,
            ChangeSelection: self._change_selection,
            ApplyMergeStrategy: self._apply_merge,
            CancelOptionsChange: self._cancel,
            BuildPack: self._build_pack,
            UpdateVariant: self._update_variant,
            RecomputeTitles: self._recompute_titles,
        }

    def apply(self, state: VariantEditState, command: Command) -> VariantEditState:
        """Apply a command and return the next state.

        Args:
            state: Current edit state.
            command: Command to apply.

        Returns:
            Next edit state.

        Raises:
            OptionsChangePendingError: If the command edits variants while a change is pending.
            InvalidStateTransitionError: If a change is resolved when none is pending.
            InvalidPackQuantityError: If a pack quantity is not a positive integer.
            VariantNotFoundError: If a command references an unknown variant.
        """
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unknown edit command: {type(command).__name__}")
        with structlog.contextvars.bound_contextvars(session_id=str(state.session_id)):
            logger.debug("Applying edit command", command=type(command).__name__)
            return handler(state, command)

    # -------------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------------

    def _require_editable(self, state: VariantEditState, command: Any) -> None:
        if not state.status.is_editable():
            logger.warning(
                "Edit refused while options change pending",
                command=type(command).__name__,
            )
            raise OptionsChangePendingError(str(state.session_id), type(command).__name__)

    def _record(self, state: VariantEditState, event: DomainEvent, **changes: Any) -> VariantEditState:
        return replace(state, events=state.events + (event,), **changes)

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def _generate(self, state: VariantEditState, command: GenerateCombinations) -> VariantEditState:
        self._require_editable(state, command)
        result = self.generator.generate(state.catalog, state.selection)
        factory = VariantFactory(state.catalog, state.selection)
        existing = {v.canonical_key: v for v in state.variants if not v.is_pack}

        variants = []
        for combination in result:
            saved = existing.get(combination.canonical_key)
            variants.append(saved if saved is not None else factory.blank(combination))
        # Saved variants outside the generated set (orphans, packs) are never dropped.
        reused_ids = {v.id for v in variants}
        retained = [v for v in state.variants if v.id not in reused_ids]

        logger.info(
            "Generated variants",
            combination_count=len(result),
            reused_count=len(reused_ids & {v.id for v in state.variants}),
            retained_count=len(retained),
        )
        event = CombinationsGenerated(
            session_id=str(state.session_id),
            combination_count=len(result),
            exceeds_threshold=result.exceeds_threshold,
        )
        return self._record(
            state, event, variants=tuple(variants + retained), warning=result.warning
        )

    def _change_selection(self, state: VariantEditState, command: ChangeSelection) -> VariantEditState:
        self._require_editable(state, command)
        catalog = command.catalog or state.catalog

        if not state.variants:
            logger.info("Selection applied, no saved variants")
            return replace(state, catalog=catalog, selection=command.selection)

        impact = self.reconciler.analyze(
            state.variants,
            catalog,
            state.selection,
            command.selection,
            previous_catalog=state.catalog,
        )
        validate_options_change_transition(
            str(state.session_id), state.status, OptionsChangeStatus.PENDING_IMPACT
        )
        event = OptionsChangeProposed(
            session_id=str(state.session_id),
            change_type=impact.change_type.value,
            new_combo_count=len(impact.new_combos),
            orphaned_count=len(impact.orphaned_variants),
            title_updates_needed=impact.title_updates_needed,
        )
        return self._record(
            state,
            event,
            pending=PendingOptionsChange(catalog=catalog, selection=command.selection, impact=impact),
            status=OptionsChangeStatus.PENDING_IMPACT,
        )

    def _apply_merge(self, state: VariantEditState, command: ApplyMergeStrategy) -> VariantEditState:
        validate_options_change_transition(
            str(state.session_id), state.status, OptionsChangeStatus.IDLE
        )
        pending = state.pending
        if pending is None:
            raise RuntimeError("Pending options change missing while status is pending")

        result = self.executor.apply(
            command.strategy,
            state.variants,
            pending.impact,
            pending.catalog,
            pending.selection,
        )
        event = OptionsChangeResolved(
            session_id=str(state.session_id),
            strategy=result.strategy.value,
            variant_count=len(result.variants),
            added_count=len(result.added),
            deactivated_count=len(result.deactivated),
            discarded_count=len(result.discarded),
        )
        return self._record(
            state,
            event,
            catalog=pending.catalog,
            selection=pending.selection,
            variants=result.variants,
            pending=None,
            status=OptionsChangeStatus.IDLE,
            warning=pending.warning,
        )

    def _cancel(self, state: VariantEditState, command: CancelOptionsChange) -> VariantEditState:
        validate_options_change_transition(
            str(state.session_id), state.status, OptionsChangeStatus.IDLE
        )
        logger.info("Options change cancelled")
        return self._record(
            state,
            OptionsChangeCancelled(session_id=str(state.session_id)),
            pending=None,
            status=OptionsChangeStatus.IDLE,
        )

    def _build_pack(self, state: VariantEditState, command: BuildPack) -> VariantEditState:
        self._require_editable(state, command)
        quantity = validate_pack_quantity(command.pack_quantity)
        base = state.get_variant(command.variant_id)
        built = self.pack_builder.build(base, quantity)

        variants = tuple(built.base if v.id == base.id else v for v in state.variants)
        event = PackVariantCreated(
            session_id=str(state.session_id),
            base_variant_id=str(built.base.id),
            pack_variant_id=str(built.pack.id),
            link_id=str(built.pack.link),
            pack_qty=quantity,
        )
        return self._record(state, event, variants=variants + (built.pack,))

    def _update_variant(self, state: VariantEditState, command: UpdateVariant) -> VariantEditState:
        self._require_editable(state, command)
        target = state.get_variant(command.variant_id)
        blocked = _IMMUTABLE_FIELDS.intersection(command.changes)
        if blocked:
            raise ValueError(f"Fields cannot be edited directly: {sorted(blocked)}")
        updated = replace(target, **dict(command.changes))
        return replace(
            state,
            variants=tuple(updated if v.id == target.id else v for v in state.variants),
        )

    def _recompute_titles(self, state: VariantEditState, command: RecomputeTitles) -> VariantEditState:
        self._require_editable(state, command)
        recomputation = AutoTitleGenerator(state.catalog, state.selection).recompute(
            v for v in state.variants if not v.is_pack
        )
        refreshed = {v.id: v for v in recomputation.variants}
        variants = tuple(refreshed.get(v.id, v) for v in state.variants)
        logger.info("Recomputed titles", updated_count=recomputation.updated_count)
        event = VariantTitlesRecomputed(
            session_id=str(state.session_id),
            updated_count=recomputation.updated_count,
        )
        return self._record(state, event, variants=variants)


# Global editor instance
_editor: VariantEditor | None = None


def get_variant_editor() -> VariantEditor:
    """Get variant editor singleton."""
    global _editor
    if _editor is None:
        _editor = VariantEditor()
    return _editor


def apply_command(state: VariantEditState, command: Command) -> VariantEditState:
    """Apply a command with the shared editor."""
    return get_variant_editor().apply(state, command)
