"""Decision model: the rationale / post-mortem card of one project."""
from research_tracker.models.base import Text, TrackerModel
from research_tracker.schemas.common import DecisionChoice, Priority


class Decision(TrackerModel):
    id: str
    project_internal_id: Text = ""
    conclusion: Text = DecisionChoice.MAYBE.value
    priority: Text = Priority.MEDIUM.value

    # Rationale
    why_apply: Text = ""
    risks: Text = ""
    fit_evidence: Text = ""
    strategy: Text = ""

    # Post-mortem; post_result is "" until an outcome is known
    post_result: Text = ""
    timeline: Text = ""
    worked: Text = ""
    didnt: Text = ""
    improvements: Text = ""
    takeaways: Text = ""
