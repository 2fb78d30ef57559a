"""Rebuilds the patient -> order -> result -> observation tree from flat segments.

HL7 carries no parent pointers; a segment's parent is whatever was opened most
recently, so the whole pass is a fold over the segments in source order with
the "current" pointers kept in :class:`AssemblyState`.
"""
from dataclasses import dataclass, field
from functools import partial
from operator import attrgetter
from typing import Callable, Dict, List, Optional

from lab_results.commons.logger import logger
from lab_results.parsers import emr, generic
from lab_results.parsers.base import Dialect, Segment
from lab_results.parsers.models import EmrOrder, Order, ParsedMessage


@dataclass
class AssemblyState:
    header: Optional[object] = None
    patients: List = field(default_factory=list)
    patient: Optional[object] = None
    order: Optional[object] = None
    result: Optional[object] = None
    notes: Optional[List] = None  # whichever notes list NTE segments feed


Handler = Callable[[AssemblyState, Segment], None]


def _drop(state: AssemblyState, seg: Segment, reason: str) -> None:
    logger.debug(f"{seg.type} #{seg.index} descartado: {reason}")


def on_header(mapper, state: AssemblyState, seg: Segment) -> None:
    if state.header is not None:
        _drop(state, seg, "el mensaje ya tiene cabecera")
        return
    state.header = mapper(seg)


def on_patient(mapper, replace: bool, state: AssemblyState, seg: Segment) -> None:
    patient = mapper(seg)
    if replace and state.patients:
        logger.warning(f"PID #{seg.index}: se esperaba un solo paciente, se reemplaza el anterior")
        state.patients.clear()
    state.patients.append(patient)
    state.patient = patient
    state.order = None
    state.result = None
    state.notes = patient.notes


def on_order(mapper, state: AssemblyState, seg: Segment) -> None:
    if state.patient is None:
        _drop(state, seg, "sin paciente abierto")
        return
    state.order = mapper(seg)
    state.patient.orders.append(state.order)
    state.result = None
    state.notes = None


def on_result(mapper, new_order: Callable, state: AssemblyState, seg: Segment) -> None:
    if state.patient is None:
        _drop(state, seg, "sin paciente abierto")
        return
    if state.order is None:
        state.order = new_order()
        state.patient.orders.append(state.order)
    state.result = mapper(seg)
    state.order.lab_results.append(state.result)
    state.notes = state.result.notes


def on_observation(mapper, state: AssemblyState, seg: Segment) -> None:
    if state.result is None:
        _drop(state, seg, "OBX sin OBR previo")
        return
    observation = mapper(seg)
    state.result.observations.append(observation)
    state.notes = observation.notes


def on_note(mapper, state: AssemblyState, seg: Segment) -> None:
    if state.notes is None:
        _drop(state, seg, "no hay lista de notas abierta")
        return
    state.notes.append(mapper(seg))


def on_extension(mapper, attr: str, state: AssemblyState, seg: Segment) -> None:
    if state.patient is None:
        _drop(state, seg, "sin paciente abierto")
        return
    getattr(state.patient, attr).append(mapper(seg))


def on_visit(mapper, state: AssemblyState, seg: Segment) -> None:
    if state.patient is None:
        _drop(state, seg, "sin paciente abierto")
        return
    state.patient.location = mapper(seg)


def generic_handlers() -> Dict[str, Handler]:
    handlers: Dict[str, Handler] = {
        "MSH": partial(on_header, generic.map_msh),
        "PID": partial(on_patient, generic.map_pid, False),
        "ORC": partial(on_order, generic.map_orc),
        "OBR": partial(on_result, generic.map_obr, Order),
        "OBX": partial(on_observation, generic.map_obx),
        "NTE": partial(on_note, generic.map_nte),
    }
    for seg_type, (mapper, attr) in generic.EXTENSIONS.items():
        handlers[seg_type] = partial(on_extension, mapper, attr)
    return handlers


def emr_handlers(ctx: emr.EmrContext) -> Dict[str, Handler]:
    def bind(mapper):
        return partial(mapper, ctx=ctx)

    handlers: Dict[str, Handler] = {
        "MSH": partial(on_header, bind(emr.map_msh)),
        "PID": partial(on_patient, bind(emr.map_pid), True),
        "ORC": partial(on_order, bind(emr.map_orc)),
        "OBR": partial(on_result, bind(emr.map_obr), EmrOrder),
        "OBX": partial(on_observation, bind(emr.map_obx)),
        "NTE": partial(on_note, bind(emr.map_nte)),
    }
    if ctx.is_ontario:
        handlers["PV1"] = partial(on_visit, bind(emr.map_pv1))
    return handlers


def assemble(segments: List[Segment], handlers: Dict[str, Handler]) -> AssemblyState:
    """Single forward pass; segment types without a handler are ignored."""
    state = AssemblyState()
    for seg in sorted(segments, key=attrgetter("index")):
        handler = handlers.get(seg.type)
        if handler is not None:
            handler(state, seg)
    return state


def build_message(
    segments: List[Segment],
    dialect: Dialect,
    ctx: Optional[emr.EmrContext] = None,
) -> ParsedMessage:
    if dialect == Dialect.EMR:
        ctx = ctx or emr.EmrContext()
        state = assemble(segments, emr_handlers(ctx))
        return ParsedMessage(
            message_header=state.header,
            patients=state.patients,
            is_ontario_format=ctx.is_ontario,
            is_document_report=ctx.is_document_report,
            report_type=ctx.report_type,
        )
    state = assemble(segments, generic_handlers())
    return ParsedMessage(message_header=state.header, patients=state.patients)
