from dataclasses import dataclass


@dataclass(frozen=True)
class ValidatedImage:
    data: bytes
    mime_type: str #sniffed from content, authoritative

    @property
    def size(self) -> int:
        return len(self.data)
