from pydantic import BaseModel, ConfigDict, Field, model_validator


class ByteRange(BaseModel):
    """Inclusive byte span ``[start, end]`` of a stored object."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @model_validator(mode="after")
    def validate_order(self) -> "ByteRange":
        if self.end < self.start:
            msg = f"Range end {self.end} is before start {self.start}"
            raise ValueError(msg)
        return self

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def capped(self, ceiling: int) -> "ByteRange":
        """Return this span shortened to at most ``ceiling`` bytes."""
        end = min(self.start + ceiling - 1, self.end)
        if end == self.end:
            return self
        return ByteRange(start=self.start, end=end)

    def covers(self, size_bytes: int) -> bool:
        """Whether this span is the whole of an object of ``size_bytes``."""
        return self.start == 0 and self.end == size_bytes - 1

    def content_range(self, size_bytes: int) -> str:
        return f"bytes {self.start}-{self.end}/{size_bytes}"

    def range_header(self) -> str:
        return f"bytes={self.start}-{self.end}"
