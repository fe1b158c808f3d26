"""Pydantic response models for the HTTP API.

Thin views over the domain dataclasses; the builders at the bottom are
the only place that knows how to flatten an ``EmotionAnalysis``.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel

from .analysis.loudness import ClipStats
from .classification.profiles import EMOTION_PROFILES, FEATURE_WEIGHTS
from .pipeline import EmotionAnalysis
from .types import ClassificationResult, ExtractionFailure, FeatureVector, FeatureWeights


class FeaturesModel(BaseModel):
    energy: float
    pitch: float
    tempo: float
    variance: float
    brightness: float
    rhythm_stability: float

    @classmethod
    def from_record(cls, record: FeatureVector | FeatureWeights) -> "FeaturesModel":
        return cls(**record.as_dict())


class SimilarityModel(BaseModel):
    emotion: str
    similarity: float


class ClassificationModel(BaseModel):
    emotion: str
    confidence: float
    similarities: Dict[str, float]
    alternatives: List[SimilarityModel]

    @classmethod
    def from_result(cls, result: ClassificationResult, alternatives: int = 4) -> "ClassificationModel":
        return cls(
            emotion=result.label,
            confidence=result.confidence,
            similarities=dict(result.similarities),
            alternatives=[
                SimilarityModel(emotion=label, similarity=score)
                for label, score in result.alternatives(alternatives)
            ],
        )


class ClipStatsModel(BaseModel):
    duration_sec: float
    peak_dbfs: float
    rms_dbfs: float
    lufs: float

    @classmethod
    def from_stats(cls, stats: ClipStats) -> "ClipStatsModel":
        return cls(
            duration_sec=stats.duration_sec,
            peak_dbfs=stats.peak_dbfs,
            rms_dbfs=stats.rms_dbfs,
            lufs=stats.lufs,
        )


class ErrorModel(BaseModel):
    error: str
    reason: str
    message: str

    @classmethod
    def from_failure(cls, failure: ExtractionFailure) -> "ErrorModel":
        return cls(error="FEATURE_EXTRACTION_FAILED", reason=failure.reason, message=failure.message)


class AnalysisResponse(BaseModel):
    status: str
    filename: Optional[str] = None
    sample_rate: Optional[int] = None
    classification: Optional[ClassificationModel] = None
    features: Optional[FeaturesModel] = None
    clip: Optional[ClipStatsModel] = None
    error: Optional[ErrorModel] = None


class BatchAnalysisResponse(BaseModel):
    results: List[AnalysisResponse]


class ProfileModel(BaseModel):
    emotion: str
    features: FeaturesModel


class ProfilesResponse(BaseModel):
    profiles: List[ProfileModel]
    weights: FeaturesModel


def build_analysis_response(
    analysis: EmotionAnalysis,
    *,
    filename: Optional[str] = None,
    sample_rate: Optional[int] = None,
) -> AnalysisResponse:
    if analysis.failure is not None:
        return AnalysisResponse(
            status="failed",
            filename=filename,
            sample_rate=sample_rate,
            error=ErrorModel.from_failure(analysis.failure),
        )

    return AnalysisResponse(
        status="analyzed",
        filename=filename,
        sample_rate=sample_rate,
        classification=ClassificationModel.from_result(analysis.classification),
        features=FeaturesModel.from_record(analysis.features),
        clip=ClipStatsModel.from_stats(analysis.stats),
    )


def build_profiles_response() -> ProfilesResponse:
    return ProfilesResponse(
        profiles=[
            ProfileModel(emotion=p.label, features=FeaturesModel.from_record(p.features))
            for p in EMOTION_PROFILES
        ],
        weights=FeaturesModel.from_record(FEATURE_WEIGHTS),
    )
