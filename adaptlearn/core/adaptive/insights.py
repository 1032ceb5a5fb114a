# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning insights.

Short, rule-based observations a dashboard can show next to the practice
plan. Insights are ranked by confidence; equally confident insights keep
the order they were generated in.
"""

from collections.abc import Sequence

from adaptlearn.core.adaptive.constants import InsightThresholds, InsightType, LearningStyle
from adaptlearn.core.adaptive.defaults import mean_accuracy
from adaptlearn.core.adaptive.models import LearningInsight, LearningPattern, SessionRecord

STYLE_ACTIONS: dict[LearningStyle, list[str]] = {
    LearningStyle.VISUAL: [
        "Use diagrams and visual aids",
        "Sketch the problem before solving it",
    ],
    LearningStyle.ANALYTICAL: [
        "Work through step-by-step solutions",
        "Review the concept before practicing",
    ],
    LearningStyle.TRIAL_AND_ERROR: [
        "Practice with immediate feedback",
        "Attempt problems before asking for hints",
    ],
}


class LearningInsightGenerator:
    """Turns a learning pattern and recent sessions into insights."""

    def generate(
        self,
        pattern: LearningPattern,
        sessions: Sequence[SessionRecord],
    ) -> list[LearningInsight]:
        """Generate ranked insights.

        Args:
            pattern: The student's learning pattern.
            sessions: Recent sessions, newest first.

        Returns:
            Up to eight insights, most confident first.
        """
        subject = pattern.subject
        insights: list[LearningInsight] = []

        for area in pattern.improving_areas:
            insights.append(
                LearningInsight(
                    insight_type=InsightType.STRENGTH,
                    subject=subject,
                    topic=area,
                    description=f"Showing strong improvement in {area}",
                    confidence=0.8,
                    suggested_actions=[
                        f"Try more challenging problems in {area}",
                        f"Use {area} skills to support related topics",
                    ],
                )
            )

        for area in pattern.struggling_areas:
            insights.append(
                LearningInsight(
                    insight_type=InsightType.WEAKNESS,
                    subject=subject,
                    topic=area,
                    description=f"Needs additional practice in {area}",
                    confidence=0.9,
                    suggested_actions=[
                        f"Review the fundamentals of {area}",
                        f"Practice easier {area} problems before moving on",
                    ],
                )
            )

        if pattern.learning_style != LearningStyle.MIXED:
            insights.append(
                LearningInsight(
                    insight_type=InsightType.PATTERN,
                    subject=subject,
                    description=(
                        f"Learns best with a {pattern.learning_style.value} approach"
                    ),
                    confidence=0.7,
                    suggested_actions=list(STYLE_ACTIONS[pattern.learning_style]),
                )
            )

        trend = self._trend_insight(pattern)
        if trend is not None:
            insights.append(trend)

        readiness = self._readiness_insight(pattern, sessions)
        if readiness is not None:
            insights.append(readiness)

        insights.sort(key=lambda insight: insight.confidence, reverse=True)
        return insights[: InsightThresholds.MAX_INSIGHTS]

    def _trend_insight(self, pattern: LearningPattern) -> LearningInsight | None:
        rate = pattern.improvement_rate
        if rate > InsightThresholds.POSITIVE_TREND:
            return LearningInsight(
                insight_type=InsightType.STRENGTH,
                subject=pattern.subject,
                description=f"Performance is trending up ({rate:+.0%})",
                confidence=0.8,
                actionable=False,
            )
        if rate < InsightThresholds.NEGATIVE_TREND:
            return LearningInsight(
                insight_type=InsightType.WEAKNESS,
                subject=pattern.subject,
                description=f"Performance is trending down ({rate:+.0%}) and needs attention",
                confidence=0.7,
                suggested_actions=[
                    "Practice in shorter, more frequent sessions",
                    "Revisit recently missed topics",
                ],
            )
        return None

    def _readiness_insight(
        self, pattern: LearningPattern, sessions: Sequence[SessionRecord]
    ) -> LearningInsight | None:
        if len(sessions) < InsightThresholds.MIN_SESSIONS:
            return None

        accuracy = mean_accuracy(sessions)
        if accuracy is None:
            return None

        if accuracy > InsightThresholds.READY_ACCURACY:
            return LearningInsight(
                insight_type=InsightType.RECOMMENDATION,
                subject=pattern.subject,
                description="Consistently accurate and ready for more challenging material",
                confidence=0.8,
                suggested_actions=["Increase difficulty", "Try challenge problems"],
            )
        if accuracy < InsightThresholds.FUNDAMENTALS_ACCURACY:
            return LearningInsight(
                insight_type=InsightType.RECOMMENDATION,
                subject=pattern.subject,
                description="Accuracy is low, focus on fundamentals before moving on",
                confidence=0.9,
                suggested_actions=["Review core concepts", "Use hints and explanations"],
            )
        return None
