from fastapi import APIRouter, Depends, HTTPException

from vocab_drill.config import get_settings
from vocab_drill.models.session import (
    AnswerOutcome,
    CsvImportRequest,
    DirectionRequest,
    FlashcardAnswerRequest,
    ImportReport,
    ImportRequest,
    JumpRequest,
    ModeRequest,
    OptionsOut,
    QcmAnswerRequest,
    RestartRequest,
    ScopeRequest,
    SessionSnapshot,
    ShuffleRequest,
    WritingAnswerRequest,
)
from vocab_drill.services.quiz_modes import ModeMismatchError, QcmMode
from vocab_drill.services.runtime import DrillRuntime, get_runtime
from vocab_drill.utils.tabular import TabularDecodeError, decode_delimited

router = APIRouter(prefix="/session", tags=["session"])


def _mode_conflict(exc: ModeMismatchError) -> HTTPException:
    return HTTPException(status_code=409, detail=str(exc))


@router.get("", response_model=SessionSnapshot)
async def get_session(runtime: DrillRuntime = Depends(get_runtime)):
    return runtime.session.snapshot()


@router.get("/options", response_model=OptionsOut)
async def get_options(runtime: DrillRuntime = Depends(get_runtime)):
    session = runtime.session
    try:
        options = session.options()
    except ModeMismatchError as exc:
        raise _mode_conflict(exc)
    strategy = session.strategy
    selected = strategy.selected if isinstance(strategy, QcmMode) else None
    return OptionsOut(options=options, answered=strategy.answered, selected=selected)


@router.post("/import", response_model=ImportReport)
async def import_records(payload: ImportRequest, runtime: DrillRuntime = Depends(get_runtime)):
    return runtime.loader.apply(payload.records, source="json")


@router.post("/import/csv", response_model=ImportReport)
async def import_csv(payload: CsvImportRequest, runtime: DrillRuntime = Depends(get_runtime)):
    delimiter = payload.delimiter or get_settings().csv_delimiter
    try:
        records = decode_delimited(payload.text, delimiter=delimiter)
    except TabularDecodeError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return runtime.loader.apply(records, source="csv")


@router.post("/mode", response_model=SessionSnapshot)
async def set_mode(payload: ModeRequest, runtime: DrillRuntime = Depends(get_runtime)):
    runtime.session.set_mode(payload.mode)
    await runtime.flush()
    return runtime.session.snapshot()


@router.post("/direction", response_model=SessionSnapshot)
async def set_direction(payload: DirectionRequest, runtime: DrillRuntime = Depends(get_runtime)):
    runtime.session.set_direction(payload.direction)
    await runtime.flush()
    return runtime.session.snapshot()


@router.post("/shuffle", response_model=SessionSnapshot)
async def set_shuffle(payload: ShuffleRequest, runtime: DrillRuntime = Depends(get_runtime)):
    runtime.session.set_shuffle(payload.shuffle)
    await runtime.flush()
    return runtime.session.snapshot()


@router.post("/scope", response_model=SessionSnapshot)
async def set_scope(payload: ScopeRequest, runtime: DrillRuntime = Depends(get_runtime)):
    runtime.session.set_scope(payload.scope)
    return runtime.session.snapshot()


@router.post("/restart", response_model=SessionSnapshot)
async def restart(payload: RestartRequest | None = None, runtime: DrillRuntime = Depends(get_runtime)):
    runtime.session.restart(full=bool(payload and payload.full))
    return runtime.session.snapshot()


@router.post("/jump", response_model=SessionSnapshot)
async def jump(payload: JumpRequest, runtime: DrillRuntime = Depends(get_runtime)):
    runtime.session.jump_to(payload.index)
    return runtime.session.snapshot()


@router.post("/advance", response_model=SessionSnapshot)
async def advance(runtime: DrillRuntime = Depends(get_runtime)):
    runtime.session.advance()
    return runtime.session.snapshot()


@router.post("/reveal", response_model=SessionSnapshot)
async def reveal(runtime: DrillRuntime = Depends(get_runtime)):
    try:
        runtime.session.reveal_answer()
    except ModeMismatchError as exc:
        raise _mode_conflict(exc)
    return runtime.session.snapshot()


@router.post("/answer/flashcard", response_model=AnswerOutcome)
async def answer_flashcard(payload: FlashcardAnswerRequest, runtime: DrillRuntime = Depends(get_runtime)):
    try:
        outcome = runtime.session.self_report(payload.knew)
    except ModeMismatchError as exc:
        raise _mode_conflict(exc)
    await runtime.flush()
    return outcome


@router.post("/answer/qcm", response_model=AnswerOutcome)
async def answer_qcm(payload: QcmAnswerRequest, runtime: DrillRuntime = Depends(get_runtime)):
    try:
        outcome = runtime.session.choose_option(payload.option)
    except ModeMismatchError as exc:
        raise _mode_conflict(exc)
    await runtime.flush()
    return outcome


@router.post("/answer/writing", response_model=AnswerOutcome)
async def answer_writing(payload: WritingAnswerRequest, runtime: DrillRuntime = Depends(get_runtime)):
    try:
        outcome = runtime.session.submit_text(payload.text)
    except ModeMismatchError as exc:
        raise _mode_conflict(exc)
    await runtime.flush()
    return outcome
