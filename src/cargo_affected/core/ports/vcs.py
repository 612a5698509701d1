from typing import Protocol


class VcsProvider(Protocol):
    def changed_files(self, base_ref: str, head_ref: str) -> list[str]: ...

    def merge_base(self, first_ref: str, second_ref: str) -> str: ...
