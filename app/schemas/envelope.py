"""Uniform success/failure envelope returned by the analysis entry point."""

from typing import Any, Union

from pydantic import BaseModel, ConfigDict

from app.schemas.bill import AnalysisResult


class AnalysisSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: AnalysisResult

    @property
    def ok(self) -> bool:
        return True

    def to_json(self) -> dict[str, Any]:
        return {"data": self.data.model_dump(mode="json", by_alias=True)}


class AnalysisFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    error: str

    @property
    def ok(self) -> bool:
        return False

    def to_json(self) -> dict[str, Any]:
        return {"error": self.error}


AnalysisResponse = Union[AnalysisSuccess, AnalysisFailure]
