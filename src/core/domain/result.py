"""Resultado explícito de una operación remota: `Ok(value)` o `Err(error)`.

Por qué:
- Cada operación (login, get) termina exactamente una vez, por una sola rama.
- El tipo lo hace visible: quien espera la corrutina recibe uno de los dos,
  nunca ambos, nunca ninguno.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from core.errors import AtomxError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: AtomxError

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
