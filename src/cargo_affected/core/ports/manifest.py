from typing import Protocol


class ManifestProvider(Protocol):
    def load(self) -> str: ...
