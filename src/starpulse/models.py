"""Pydantic v2 models for the celebrity profile record.

Used both as the response_schema sent to Gemini and as the decoder that
validates the returned JSON. Also the persisted form of the history list.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class TotalStats(_Frozen):
    """Headline numbers for the subject's career."""

    views: str | None = Field(default=None, description="Average efficiency of core official works")
    sales: str | None = Field(default=None, description="Lead-role box office or certified album sales")
    followers: str | None = Field(default=None, description="Cross-language recognition scale")
    awards: str | None = Field(default=None, description="Short summary of major awards, e.g. 3 Oscar, 12 Grammy")


class BasicInfo(_Frozen):
    """Biographical facts."""

    age: str
    nationality: str
    gender: str
    spouse: str
    birth_date: str
    blood_type: str | None = None
    height: str | None = None
    awards: list[str] = Field(default_factory=list)


class SocialLinks(_Frozen):
    facebook: str | None = None
    twitter: str | None = None
    instagram: str | None = None


class Work(_Frozen):
    title: str
    year: str
    role: str | None = None
    stats: str | None = None


class FamousWork(_Frozen):
    title: str
    youtube_url: str


class FeaturedMedia(_Frozen):
    """The single production the subject is best known for."""

    title: str
    type: Literal["album", "movie"]
    description: str
    release_date: str
    related_people: list[str] = Field(default_factory=list)


class RelatedCelebrity(_Frozen):
    name: str
    relationship: str


class ProfileRecord(_Frozen):
    """Complete fame-index profile for one subject."""

    name: str = Field(min_length=1)
    original_name: str | None = None
    stage_name: str | None = None
    popularity_rating: float = Field(ge=0, le=10, description="Global authority index, 0.0-10.0")
    rating_justification: str
    total_stats: TotalStats = Field(default_factory=TotalStats)
    basic_info: BasicInfo
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    growth_background: str
    career_story: str
    works: list[Work] = Field(default_factory=list)
    famous_works: list[FamousWork] = Field(default_factory=list)
    featured_media: FeaturedMedia
    related_celebrities: list[RelatedCelebrity] = Field(default_factory=list)
    others: str = ""
    tags: list[str] = Field(default_factory=list)

    @property
    def identity(self) -> str:
        """Case-insensitive identity used for history de-duplication."""
        return self.name.lower()


# (lower bound inclusive, upper bound exclusive, title)
STAR_RANKS: tuple[tuple[float, float, str], ...] = (
    (0.0, 1.0, "Industry Scrap"),
    (1.0, 2.0, "Seventh-Tier Act"),
    (2.0, 3.0, "Sixth-Tier Act"),
    (3.0, 4.0, "Fifth-Tier Act"),
    (4.0, 5.0, "Fourth-Tier Act"),
    (5.0, 6.0, "Third-Tier Act"),
    (6.0, 7.0, "Second-Tier Act"),
    (7.0, 8.0, "First-Tier Act"),
    (8.0, 9.0, "Top-Tier Star"),
    (9.0, 10.1, "Cross-Generational Legend"),
)


def rank_title(rating: float) -> str:
    """Map a popularity rating to its tier title."""
    for low, high, title in STAR_RANKS:
        if low <= rating < high:
            return title
    if rating >= 9.0:
        return STAR_RANKS[-1][2]
    return "Unknown"


# (axis name, base weight, rating divisor)
_RADAR_AXES: tuple[tuple[str, float, float], ...] = (
    ("Authority", 0.7, 35),
    ("Commercial Value", 0.6, 40),
    ("Public Recognition", 0.8, 30),
    ("Professional Standing", 0.7, 33),
    ("Output Efficiency", 0.5, 25),
)


def radar_dimensions(rating: float) -> list[tuple[str, float]]:
    """Return the five radar axes as (name, weight in [0, 1]) pairs."""
    return [(name, min(1.0, base + rating / divisor)) for name, base, divisor in _RADAR_AXES]
