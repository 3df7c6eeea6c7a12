import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

# Identificador da execucao corrente; "-" quando o log nao pertence a nenhuma.
_run_id: ContextVar[str] = ContextVar("maintenance_run_id", default="-")


def new_run_id() -> str:
    return uuid.uuid4().hex[:12]


def get_run_id() -> str:
    return _run_id.get()


@contextmanager
def run_scope(run_id: str | None = None) -> Iterator[str]:
    active_run_id = run_id or new_run_id()
    token = _run_id.set(active_run_id)
    try:
        yield active_run_id
    finally:
        _run_id.reset(token)
