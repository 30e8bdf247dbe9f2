from dataclasses import dataclass

from linkshortener.utils.shortener import encode_shortcode


# fmt: off
@dataclass(frozen=True)
class ShortURLModel:
    id: int                     # Sequential id assigned by the data store
    target: str                 # Original long URL
    owner: str | None = None    # Identity of the user who created the link, None if anonymous
# fmt: on

    @property
    def shortcode(self) -> str:
        """Public identifier of this link, always derived from its id."""
        return encode_shortcode(self.id)
