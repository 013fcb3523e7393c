from typing import Any, Protocol

ResponseEnvelope = dict[str, Any]


class GenerationClient(Protocol):
    def generate(self, prompt: str, payload: Any) -> ResponseEnvelope:
        """Run one generation call; raise GenerationTransportError on network or API failure."""
        ...
