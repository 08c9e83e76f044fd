from dataclasses import dataclass, field
from enum import StrEnum


class HunkOp(StrEnum):
    CONTEXT = "context"
    ADD = "add"
    DELETE = "delete"


@dataclass
class Hunk:
    original_start: int
    original_count: int
    new_start: int
    new_count: int
    ops: list[tuple[HunkOp, str]] = field(default_factory=list)
    # False when the "@@" line carried no parseable line numbers
    seeded: bool = True

    @property
    def counted_original(self) -> int:
        return sum(1 for op, _ in self.ops if op in (HunkOp.CONTEXT, HunkOp.DELETE))

    @property
    def counted_new(self) -> int:
        return sum(1 for op, _ in self.ops if op in (HunkOp.CONTEXT, HunkOp.ADD))

    @property
    def is_consistent(self) -> bool:
        """Header counts agree with the body."""
        return (
            self.original_count == self.counted_original
            and self.new_count == self.counted_new
        )

    def header(self) -> str:
        return (
            f"@@ -{self.original_start},{self.original_count} "
            f"+{self.new_start},{self.new_count} @@"
        )

    def body_lines(self) -> list[str]:
        prefixes = {HunkOp.CONTEXT: " ", HunkOp.ADD: "+", HunkOp.DELETE: "-"}
        return [f"{prefixes[op]}{text}" for op, text in self.ops]
