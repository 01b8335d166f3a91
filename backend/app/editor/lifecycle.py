"""Upload lifecycle of the submission editor as an explicit state machine.

The editor owns one slot (one word of the weekly prompt) at a time. Every
image uploaded while the slot is open is tracked so that exactly the saved
image survives once the slot settles:

    IDLE --OpenSlot--> EDITING --UploadStarted--> UPLOADING --Upload*--> EDITING
    EDITING --SaveStarted--> SAVING --SaveSucceeded--> IDLE
    EDITING --Close--> IDLE
    IDLE --ClearStarted--> CLEARING --Clear*--> IDLE

``reduce`` is pure: it never talks to the network. Objects that should be
removed from storage come back as ``Transition.deletions`` for the caller to
delete best-effort.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from app.core.content_rules import has_text


class Phase(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    UPLOADING = "uploading"
    SAVING = "saving"
    CLEARING = "clearing"


class InvalidTransition(ValueError):
    def __init__(self, phase: Phase, event: object) -> None:
        super().__init__(f"{type(event).__name__} is not allowed while {phase.value}")
        self.phase = phase
        self.event = event


@dataclass(frozen=True, slots=True)
class SlotForm:
    title: str = ""
    text: str = ""
    image_url: str = ""


@dataclass(frozen=True, slots=True)
class EditorState:
    phase: Phase = Phase.IDLE
    slot: int | None = None
    form: SlotForm = field(default_factory=SlotForm)
    original_image_url: str = ""
    uploaded: tuple[str, ...] = ()
    error: str | None = None

    @property
    def awaiting_retry(self) -> bool:
        return self.phase == Phase.SAVING and self.error is not None

    @property
    def can_save(self) -> bool:
        if self.phase != Phase.EDITING and not self.awaiting_retry:
            return False
        return bool(self.form.image_url) or has_text(self.form.text)


@dataclass(frozen=True, slots=True)
class Transition:
    state: EditorState
    deletions: tuple[str, ...] = ()


# Events


@dataclass(frozen=True, slots=True)
class OpenSlot:
    word_index: int
    existing: SlotForm | None = None


@dataclass(frozen=True, slots=True)
class EditForm:
    title: str | None = None
    text: str | None = None


@dataclass(frozen=True, slots=True)
class UploadStarted:
    pass


@dataclass(frozen=True, slots=True)
class UploadSucceeded:
    public_url: str


@dataclass(frozen=True, slots=True)
class UploadFailed:
    message: str


@dataclass(frozen=True, slots=True)
class RemoveImage:
    pass


@dataclass(frozen=True, slots=True)
class Close:
    pass


@dataclass(frozen=True, slots=True)
class SaveStarted:
    pass


@dataclass(frozen=True, slots=True)
class SaveSucceeded:
    pass


@dataclass(frozen=True, slots=True)
class SaveFailed:
    message: str


@dataclass(frozen=True, slots=True)
class ClearStarted:
    pass


@dataclass(frozen=True, slots=True)
class ClearSucceeded:
    pass


@dataclass(frozen=True, slots=True)
class ClearFailed:
    message: str


Event = (
    OpenSlot
    | EditForm
    | UploadStarted
    | UploadSucceeded
    | UploadFailed
    | RemoveImage
    | Close
    | SaveStarted
    | SaveSucceeded
    | SaveFailed
    | ClearStarted
    | ClearSucceeded
    | ClearFailed
)


def _unique(urls: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(url for url in urls if url))


def reduce(state: EditorState, event: Event) -> Transition:
    phase = state.phase

    if isinstance(event, OpenSlot) and phase == Phase.IDLE:
        existing = event.existing or SlotForm()
        return Transition(
            EditorState(
                phase=Phase.EDITING,
                slot=event.word_index,
                form=existing,
                original_image_url=existing.image_url,
            )
        )

    if isinstance(event, EditForm) and (phase == Phase.EDITING or state.awaiting_retry):
        form = replace(
            state.form,
            title=state.form.title if event.title is None else event.title,
            text=state.form.text if event.text is None else event.text,
        )
        return Transition(replace(state, form=form))

    if isinstance(event, UploadStarted) and phase == Phase.EDITING:
        return Transition(replace(state, phase=Phase.UPLOADING, error=None))

    if isinstance(event, UploadSucceeded) and phase == Phase.UPLOADING:
        return Transition(
            replace(
                state,
                phase=Phase.EDITING,
                form=replace(state.form, image_url=event.public_url),
                uploaded=state.uploaded + (event.public_url,),
            )
        )

    if isinstance(event, UploadFailed) and phase == Phase.UPLOADING:
        return Transition(replace(state, phase=Phase.EDITING, error=event.message))

    if isinstance(event, RemoveImage) and phase == Phase.EDITING:
        current = state.form.image_url
        form = replace(state.form, image_url="")
        if current and current != state.original_image_url:
            uploaded = tuple(url for url in state.uploaded if url != current)
            return Transition(replace(state, form=form, uploaded=uploaded), deletions=(current,))
        return Transition(replace(state, form=form))

    if isinstance(event, Close) and (phase == Phase.EDITING or state.awaiting_retry):
        deletions = _unique([url for url in state.uploaded if url != state.original_image_url])
        return Transition(EditorState(), deletions=deletions)

    if isinstance(event, SaveStarted) and (phase == Phase.EDITING or state.awaiting_retry):
        if not state.can_save:
            raise InvalidTransition(phase, event)
        return Transition(replace(state, phase=Phase.SAVING, error=None))

    if isinstance(event, SaveSucceeded) and phase == Phase.SAVING and state.error is None:
        saved = state.form.image_url
        original = state.original_image_url
        stale = [url for url in state.uploaded if url != saved and url != original]
        if original and original != saved:
            stale.append(original)
        return Transition(EditorState(), deletions=_unique(stale))

    if isinstance(event, SaveFailed) and phase == Phase.SAVING and state.error is None:
        return Transition(replace(state, error=event.message))

    if isinstance(event, ClearStarted) and phase == Phase.IDLE:
        return Transition(EditorState(phase=Phase.CLEARING))

    if isinstance(event, ClearSucceeded) and phase == Phase.CLEARING:
        return Transition(EditorState())

    if isinstance(event, ClearFailed) and phase == Phase.CLEARING:
        return Transition(EditorState(error=event.message))

    raise InvalidTransition(phase, event)
