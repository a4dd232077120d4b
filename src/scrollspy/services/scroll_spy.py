"""Active-section detector controller.

One controller instance owns one tracked set. It wires the pure pipeline
(geometry sampling -> scoring -> hysteresis selection) to host events and to
the programmatic scroll lock, and publishes typed transitions on an
``EventBus``.

Host contract
-------------
The host forwards raw events and never mutates detector state directly:
 - ``handle_scroll()``          every scroll event of the tracked surface
 - ``handle_resize()``          viewport resize
 - ``handle_mutation()``        content changes that may move/add sections
 - ``handle_scroll_settled()``  the surface finished a programmatic scroll
 - ``register(id, handle)`` / ``unregister(id)`` for ids mode

Collaborators read ``snapshot`` (rebuilt after each tick) or subscribe to
``bus``. All per-tick mutable state lives in ``DetectorContext``.

Degenerate geometry (nothing mounted, zero viewport, no scrollable travel)
skips the tick and keeps the previous snapshot.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from collections import abc
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple, Union

from ..app.config_store import SpyOptions
from ..config.settings import MUTATION_DEBOUNCE_MS, SCROLL_IDLE_MS
from ..design.anchors import ANCHOR_POLICIES, position_scroll_target, section_scroll_target
from ..design.geometry import (
    LayoutProvider,
    RawTelemetry,
    SectionDescriptor,
    TrackedBy,
    TrackedByIds,
    TrackedBySelector,
    content_relative_top,
    sample_bounds,
)
from ..design.offsets import resolve_offset
from ..design.reduced_motion import resolve_behavior
from ..design.scoring import (
    ScoringContext,
    SectionScore,
    calculate_section_scores,
    scroll_progress,
    trigger_line_offset,
)
from ..design.selection import determine_active_section
from ..design.transitions import (
    ScrollEnded,
    ScrollStarted,
    Transition,
    diff_active,
    diff_viewport,
)
from ..design.validation import (
    sanitize_behavior,
    sanitize_ids,
    sanitize_offset,
    sanitize_selector,
)
from ..models import (
    LinkState,
    PositionTarget,
    ScrollState,
    ScrollTarget,
    ScrollToOptions,
    SectionState,
    SectionTarget,
    SpySnapshot,
)
from .event_bus import EventBus, SpyEvent
from .scheduler import Debouncer, Scheduler, UpdateScheduler
from .scroll_lock import ScrollLock

__all__ = ["DetectorContext", "ScrollSpyController"]

_logger = logging.getLogger(__name__)


@dataclass
class DetectorContext:
    """Mutable state carried from one tick to the next."""

    active_id: Optional[str] = None
    last_position: float = 0.0
    last_time: Optional[float] = None
    scrolling: bool = False
    in_viewport: FrozenSet[str] = frozenset()
    snapshot: SpySnapshot = field(default_factory=SpySnapshot)


class ScrollSpyController:
    def __init__(
        self,
        tracked: Union[TrackedBy, Iterable[str]],
        provider: LayoutProvider,
        scheduler: Scheduler,
        *,
        container: Any = None,
        options: Optional[SpyOptions] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self._provider = provider
        self._scheduler = scheduler
        self._container = container
        self._options = (options or SpyOptions()).sanitized()
        self.bus = bus if bus is not None else EventBus()
        self._ctx = DetectorContext()
        self._tracked: TrackedBy = TrackedByIds(())
        self._handles: Dict[str, Any] = {}
        self._resolved: List[SectionDescriptor] = []
        self._disposed = False

        self._updates = UpdateScheduler(scheduler, self.recompute, self._options.throttle_ms)
        self._lock = ScrollLock(scheduler, self._on_lock_released, idle_ms=SCROLL_IDLE_MS)
        self._idle = Debouncer(scheduler, SCROLL_IDLE_MS, self._on_scroll_idle)
        self._mutation = Debouncer(scheduler, MUTATION_DEBOUNCE_MS, self._on_mutation_settled)

        self._apply_tracked(tracked, initial=True)
        self._known_ids = self.ids
        self._updates.request_tick()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def options(self) -> SpyOptions:
        return self._options

    @property
    def tracked(self) -> TrackedBy:
        return self._tracked

    @property
    def ids(self) -> Tuple[str, ...]:
        if isinstance(self._tracked, TrackedByIds):
            return self._tracked.ids
        return tuple(d.id for d in self._resolved)

    @property
    def active_id(self) -> Optional[str]:
        return self._ctx.active_id

    @property
    def index(self) -> int:
        return self._index_of(self._ctx.active_id)

    @property
    def snapshot(self) -> SpySnapshot:
        return self._ctx.snapshot

    @property
    def context(self) -> DetectorContext:
        return self._ctx

    @property
    def locked(self) -> bool:
        return self._lock.locked

    @property
    def scrolling(self) -> bool:
        return self._ctx.scrolling

    def link_state(self, section_id: str) -> LinkState:
        return LinkState(id=section_id, active=self._ctx.active_id == section_id)

    # ------------------------------------------------------------------
    # Configuration changes
    # ------------------------------------------------------------------
    def set_tracked(self, tracked: Union[TrackedBy, Iterable[str]]) -> None:
        self._cancel_timers()
        self._apply_tracked(tracked, initial=False)
        self._publish_ids_if_changed()
        self._updates.request_tick()

    def set_options(self, options: SpyOptions) -> None:
        self._options = options.sanitized()
        self._updates.set_throttle(self._options.throttle_ms)
        self._updates.request_tick()

    def set_container(self, container: Any) -> None:
        """Switch the scrolling surface.

        The active id and the in-view set carry over so the next tick only
        reports what actually changed on the new surface; direction and
        velocity restart from its current position.
        """
        self._cancel_timers()
        self._container = container
        self._ctx.last_position = self._provider.telemetry(container).position
        self._ctx.last_time = None
        if isinstance(self._tracked, TrackedBySelector):
            self._resolve_selector(initial=False)
            self._publish_ids_if_changed()
        self._updates.request_tick()

    def register(self, section_id: str, handle: Any) -> None:
        if handle is None:
            self.unregister(section_id)
            return
        if isinstance(self._tracked, TrackedBySelector):
            _logger.warning('register("%s") ignored: sections are tracked by selector', section_id)
            return
        if section_id not in self._tracked.ids:
            _logger.warning('register: id "%s" is not tracked. Ignoring.', section_id)
            return
        self._handles[section_id] = handle
        self._updates.request_tick()

    def unregister(self, section_id: str) -> None:
        if self._handles.pop(section_id, None) is not None:
            self._updates.request_tick()

    def dispose(self) -> None:
        self._cancel_timers(emit=False)
        self._disposed = True

    # ------------------------------------------------------------------
    # Host events
    # ------------------------------------------------------------------
    def handle_scroll(self) -> None:
        if self._disposed:
            return
        if not self._ctx.scrolling:
            self._ctx.scrolling = True
            self._replace_scroll_state(scrolling=True)
            self._publish([ScrollStarted()])
        self._idle.trigger()
        self._lock.note_activity()
        self._updates.notify_scroll()

    def handle_scroll_settled(self) -> None:
        if self._disposed:
            return
        self._lock.note_settled()

    def handle_resize(self) -> None:
        if self._disposed:
            return
        if isinstance(self._tracked, TrackedBySelector):
            self._resolve_selector(initial=False)
            self._publish_ids_if_changed()
        self._updates.request_tick()

    def handle_mutation(self) -> None:
        if self._disposed:
            return
        if isinstance(self._tracked, TrackedBySelector):
            self._mutation.trigger()
        else:
            self._updates.request_tick()

    # ------------------------------------------------------------------
    # Recompute tick
    # ------------------------------------------------------------------
    def recompute(self) -> Optional[SpySnapshot]:
        """Run one detection tick; returns the new snapshot or None if skipped."""
        if self._disposed:
            return None
        ctx = self._ctx
        raw = self._provider.telemetry(self._container)
        now = self._scheduler.now()

        position = raw.position
        if position == ctx.last_position:
            direction = None
        else:
            direction = "down" if position > ctx.last_position else "up"
        elapsed = now - ctx.last_time if ctx.last_time is not None else 0.0
        velocity = abs(position - ctx.last_position) / elapsed if elapsed > 0 else 0.0
        ctx.last_position = position
        ctx.last_time = now

        bounds = sample_bounds(self._descriptors(), self._provider, self._container)
        viewport = raw.viewport_size
        if not bounds or not math.isfinite(viewport) or viewport <= 0 or raw.max_scroll <= 0:
            _logger.debug(
                "skipping degenerate tick (sections=%d viewport=%s content=%s)",
                len(bounds),
                viewport,
                raw.content_size,
            )
            return None

        effective_offset = resolve_offset(self._options.offset, viewport)
        scoring_ctx = ScoringContext(
            position=position,
            viewport_size=viewport,
            content_size=raw.content_size,
            effective_offset=effective_offset,
            threshold=self._options.threshold,
            trigger_policy=self._options.trigger_policy,
        )
        ids = self.ids
        scores = calculate_section_scores(bounds, scoring_ctx, self._index_map(ids))

        transitions: List[Transition] = []
        prev_active = ctx.active_id
        if self._lock.locked:
            new_active = prev_active
        else:
            new_active = determine_active_section(
                scores,
                ids,
                prev_active,
                self._options.hysteresis,
                position,
                viewport,
                raw.content_size,
            )
            transitions.extend(diff_active(prev_active, new_active))
            ctx.active_id = new_active
            current_in_view = frozenset(s.id for s in scores if s.in_viewport)
            transitions.extend(diff_viewport(ctx.in_viewport, current_in_view, ids))
            ctx.in_viewport = current_in_view

        ctx.snapshot = self._build_snapshot(
            scores, raw, effective_offset, direction, velocity, new_active
        )
        self._publish(transitions)
        return ctx.snapshot

    # ------------------------------------------------------------------
    # Programmatic navigation
    # ------------------------------------------------------------------
    def scroll_to(self, target: ScrollTarget, options: Optional[ScrollToOptions] = None) -> bool:
        """Scroll to a section id or raw position; returns False on a no-op.

        For section targets the active id is pinned before the scroll command
        is issued and detection stays suspended until the lock releases.
        """
        if self._disposed:
            return False
        opts = options or ScrollToOptions()
        section_id: Optional[str] = None
        raw_top: Optional[float] = None
        if isinstance(target, str):
            section_id = target
        elif isinstance(target, SectionTarget):
            section_id = target.id
        elif isinstance(target, PositionTarget):
            raw_top = target.top
        else:
            raise TypeError(f"unsupported scroll target: {target!r}")

        lock_active = opts.lock_active if opts.lock_active is not None else section_id is not None
        raw = self._provider.telemetry(self._container)
        behavior = resolve_behavior(
            sanitize_behavior(opts.behavior) if opts.behavior is not None else self._options.behavior
        )
        offset = sanitize_offset(opts.offset) if opts.offset is not None else self._options.offset
        effective_offset = resolve_offset(offset, raw.viewport_size)

        if section_id is not None:
            destination = self._section_destination(section_id, raw, effective_offset, opts.anchor)
        else:
            if raw_top is None or not _is_finite(raw_top):
                _logger.warning('scroll_to: top "%s" is not a valid number', raw_top)
                return False
            destination = position_scroll_target(raw_top, raw.max_scroll, effective_offset)
        if destination is None:
            return False

        if lock_active:
            self._lock.engage(section_id)
            if section_id is not None:
                self._pin(section_id)
        elif self._lock.locked:
            self._lock.cancel()
            self._updates.request_tick()

        self._provider.scroll_to(self._container, destination, behavior)

        if lock_active:
            if behavior == "instant":
                self._lock.release()
            else:
                self._lock.arm()
        return True

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _apply_tracked(self, tracked: Union[TrackedBy, Iterable[str]], *, initial: bool) -> None:
        if isinstance(tracked, TrackedBySelector):
            self._tracked = TrackedBySelector(sanitize_selector(tracked.query))
            self._handles.clear()
            self._resolve_selector(initial=initial)
            return
        if isinstance(tracked, TrackedByIds):
            ids = sanitize_ids(tracked.ids)
        elif isinstance(tracked, abc.Iterable) and not isinstance(tracked, (str, bytes)):
            ids = sanitize_ids(list(tracked))
        else:
            raise TypeError(f"unsupported tracked sections: {tracked!r}")
        self._tracked = TrackedByIds(ids)
        self._resolved = []
        for stale in [k for k in self._handles if k not in ids]:
            del self._handles[stale]
        self._ctx.in_viewport = frozenset(i for i in self._ctx.in_viewport if i in ids)
        current = self._ctx.active_id
        self._set_active(current if current in ids else (ids[0] if ids else None), initial)

    def _resolve_selector(self, *, initial: bool) -> None:
        assert isinstance(self._tracked, TrackedBySelector)
        query = self._tracked.query
        resolved: List[SectionDescriptor] = []
        if query:
            try:
                found = self._provider.query(query, self._container)
            except ValueError as exc:
                _logger.warning('Invalid selector "%s": %s', query, exc)
                found = []
            for idx, desc in enumerate(found):
                resolved.append(
                    desc if desc.id else SectionDescriptor(id=f"section-{idx}", handle=desc.handle)
                )
        self._resolved = resolved
        ids = self.ids
        self._ctx.in_viewport = frozenset(i for i in self._ctx.in_viewport if i in ids)
        current = self._ctx.active_id
        if ids:
            self._set_active(current if current in ids else ids[0], initial)
        else:
            self._set_active(None, initial)

    def _set_active(self, new_id: Optional[str], initial: bool) -> None:
        prev = self._ctx.active_id
        if prev == new_id:
            return
        self._ctx.active_id = new_id
        self._rebuild_active_flags()
        if not initial:
            self._publish(diff_active(prev, new_id))

    def _publish_ids_if_changed(self) -> None:
        ids = self.ids
        if ids != self._known_ids:
            self._known_ids = ids
            self.bus.publish(SpyEvent.SECTIONS_CHANGED, ids)

    def _pin(self, section_id: str) -> None:
        prev = self._ctx.active_id
        self._ctx.active_id = section_id
        self._rebuild_active_flags()
        self._publish(diff_active(prev, section_id))

    def _section_destination(
        self,
        section_id: str,
        raw: RawTelemetry,
        effective_offset: float,
        anchor: Optional[str],
    ) -> Optional[float]:
        if section_id not in self.ids:
            _logger.warning('scroll_to: id "%s" not found', section_id)
            return None
        desc = next((d for d in self._descriptors() if d.id == section_id), None)
        rect = (
            self._provider.rect_of(desc.handle)
            if desc is not None and desc.handle is not None
            else None
        )
        if rect is None:
            _logger.warning('scroll_to: element for id "%s" not yet mounted', section_id)
            return None
        if anchor is not None and anchor not in ANCHOR_POLICIES:
            _logger.warning('scroll_to: unknown anchor "%s". Using nearest.', anchor)
            anchor = None
        container_top = (
            self._provider.frame_top(self._container) if self._container is not None else None
        )
        top = content_relative_top(rect.top, raw.position, container_top)
        return section_scroll_target(
            top,
            rect.height,
            raw.viewport_size,
            raw.max_scroll,
            effective_offset,
            anchor,
            self._options.trigger_policy,
        )

    def _descriptors(self) -> List[SectionDescriptor]:
        if isinstance(self._tracked, TrackedByIds):
            return [SectionDescriptor(id=i, handle=self._handles.get(i)) for i in self._tracked.ids]
        return list(self._resolved)

    @staticmethod
    def _index_map(ids: Sequence[str]) -> Dict[str, int]:
        return {sid: i for i, sid in enumerate(ids)}

    def _index_of(self, section_id: Optional[str]) -> int:
        if section_id is None:
            return -1
        try:
            return self.ids.index(section_id)
        except ValueError:
            return -1

    def _build_snapshot(
        self,
        scores: Sequence[SectionScore],
        raw: RawTelemetry,
        effective_offset: float,
        direction: Optional[str],
        velocity: float,
        active_id: Optional[str],
    ) -> SpySnapshot:
        policy = self._options.trigger_policy
        scroll = ScrollState(
            position=raw.position,
            progress=scroll_progress(raw.position, raw.viewport_size, raw.content_size),
            direction=direction,
            velocity=velocity,
            scrolling=self._ctx.scrolling,
            max_scroll=raw.max_scroll,
            viewport_size=raw.viewport_size,
            content_size=raw.content_size,
            offset=effective_offset,
            trigger_line=trigger_line_offset(
                raw.position, raw.viewport_size, raw.content_size, effective_offset, policy
            ),
        )
        sections = {
            s.id: SectionState(
                bounds=s.bounds,
                visibility=round(s.visibility_ratio, 2),
                progress=round(s.progress, 2),
                in_viewport=s.in_viewport,
                active=s.id == active_id,
            )
            for s in scores
        }
        return SpySnapshot(
            active_id=active_id,
            index=self._index_of(active_id),
            ids=self.ids,
            scroll=scroll,
            sections=sections,
        )

    def _rebuild_active_flags(self) -> None:
        snap = self._ctx.snapshot
        active = self._ctx.active_id
        sections = {
            sid: dataclasses.replace(state, active=sid == active)
            for sid, state in snap.sections.items()
        }
        self._ctx.snapshot = dataclasses.replace(
            snap, active_id=active, index=self._index_of(active), ids=self.ids, sections=sections
        )

    def _replace_scroll_state(self, **changes: Any) -> None:
        snap = self._ctx.snapshot
        self._ctx.snapshot = dataclasses.replace(
            snap, scroll=dataclasses.replace(snap.scroll, **changes)
        )

    def _publish(self, transitions: Iterable[Transition]) -> None:
        for transition in transitions:
            self.bus.publish(SpyEvent(transition.kind), transition)
        self.bus.publish(SpyEvent.SNAPSHOT_UPDATED, self._ctx.snapshot)

    def _cancel_timers(self, *, emit: bool = True) -> None:
        self._updates.cancel()
        self._lock.cancel()
        self._mutation.cancel()
        self._idle.cancel()
        if self._ctx.scrolling:
            self._ctx.scrolling = False
            self._replace_scroll_state(scrolling=False)
            if emit:
                self._publish([ScrollEnded()])

    def _on_lock_released(self) -> None:
        self._updates.request_tick()

    def _on_scroll_idle(self) -> None:
        if not self._ctx.scrolling:
            return
        self._ctx.scrolling = False
        self._replace_scroll_state(scrolling=False)
        self._publish([ScrollEnded()])

    def _on_mutation_settled(self) -> None:
        if isinstance(self._tracked, TrackedBySelector):
            self._resolve_selector(initial=False)
            self._publish_ids_if_changed()
        self._updates.request_tick()


def _is_finite(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)
