"""Decision card schemas."""
from research_tracker.schemas.common import DecisionChoice, PostResult, Priority, RequestModel


class DecisionUpdate(RequestModel):
    conclusion: DecisionChoice | None = None
    priority: Priority | None = None
    why_apply: str | None = None
    risks: str | None = None
    fit_evidence: str | None = None
    strategy: str | None = None
    post_result: PostResult | None = None
    timeline: str | None = None
    worked: str | None = None
    didnt: str | None = None
    improvements: str | None = None
    takeaways: str | None = None
