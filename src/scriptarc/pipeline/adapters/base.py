"""Provider adapter seam.

The generator talks to the remote model only through ``GenerationAdapter``.
Adapters send one ``GenerationRequest`` and return the raw reply text; they do
not parse or validate it. Transport-level failures surface as
``TransportError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from scriptarc.core.types import GenerationRequest


@runtime_checkable
class GenerationAdapter(Protocol):
    """Protocol for provider adapters."""

    async def generate(self, request: GenerationRequest) -> str:
        """Send ``request`` and return the reply text ("" when the model is silent).

        Raises:
            TransportError: When the call could not complete.
        """
        ...
