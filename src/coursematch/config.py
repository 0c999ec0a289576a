"""Configuration — component weights, floors, result limits."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings


class ComponentWeights(BaseModel):
    course: float = Field(default=50.0, ge=0.0)
    level: float = Field(default=30.0, ge=0.0)
    progress: float = Field(default=20.0, ge=0.0)

    @model_validator(mode="after")
    def _check_total(self) -> ComponentWeights:
        total = self.course + self.level + self.progress
        if total > 100.0:
            raise ValueError(
                f"component weights sum to {total:g}, must not exceed 100"
            )
        return self


class Settings(BaseSettings):
    component_weights: ComponentWeights = ComponentWeights()

    # Score given to a pair with no course overlap.  Must stay below the
    # smallest score a single shared course can produce.
    no_overlap_floor: float = Field(default=5.0, ge=0.0, le=100.0)
    neutral_progress_ratio: float = Field(default=0.5, ge=0.0, le=1.0)
    score_precision: int = Field(default=2, ge=0)

    top_n: int = Field(default=50, ge=0)
    previous_matches_limit: int = Field(default=5, ge=0)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
