"""First-run example document.

Also the fallback whenever a persisted document cannot be trusted: the
normalizer takes a whole collection from here when the input's copy is not
a list.
"""
from __future__ import annotations

from research_tracker.models import Decision, Document, DocumentMeta, MaterialTask, Outreach, Project
from research_tracker.utils.helpers import make_id


def seed_document() -> Document:
    """One project, one outreach contact, two materials and one decision, fully linked."""
    p1 = Project(
        id=make_id("p"),
        code="SR-2026-01",
        name="Summer Research Internship in Computational Biology",
        institution="Example University",
        region="USA",
        program_type="Summer Research Program",
        official_link="https://example.edu/summer-research",
        keywords=["Computational Chemistry", "GPCR", "Docking", "ML", "Free Energy"],
        pi_lab="Dr. A. Smith, Structural Pharmacology Lab",
        needs_outreach="Yes",
        application_round="Round 1",
        deadline="2026-02-01",
        period="2026-06-01 ~ 2026-08-15",
        funding=["stipend", "housing"],
        eligibility="Master/PhD track preferred; programming required",
        required_materials=["CV", "Research Statement", "Transcript", "2 Letters"],
        portal_status="Open",
        status="Preparing",
        fit=9,
        risk=7,
        roi=9,
        priority="High",
        decision="Apply",
        next_action="Send outreach email with CV + 1-page summary",
        next_action_date="2026-01-05",
        notes="Recent relevant publications; method-development friendly.",
    )

    o1 = Outreach(
        id=make_id("o"),
        code="PI-2026-01",
        pi_name="A. Smith",
        institution="Example University",
        directions=["GPCR", "Docking", "ML"],
        contact="asmith@example.edu",
        first_contact="2026-01-05",
        email_version="v2-tailored",
        replied="No reply",
        stage="Sent",
        next_follow_up="2026-01-12",
        next_action="Follow up with 1-page proposal summary",
        project_ids=[p1.id],
        notes="Keep email concise; include 2 most relevant outputs.",
    )

    m1 = MaterialTask(
        id=make_id("m"),
        code="MAT-01",
        material_type="CV",
        target_project=None,
        status="Revised",
        version="v2",
        due="2026-01-10",
        notes="Add 2 representative projects + skills summary.",
    )

    m2 = MaterialTask(
        id=make_id("m"),
        code="MAT-02",
        material_type="Research Statement",
        target_project=p1.id,
        status="Draft",
        version="v1",
        due="2026-01-15",
        dependency="Need PI focus confirmed",
        notes="Emphasize compute→experiment loop.",
    )

    d1 = Decision(
        id=make_id("d"),
        project_internal_id=p1.id,
        conclusion="Apply",
        priority="High",
        why_apply=(
            "- Strong alignment with computational chemistry + drug discovery\n"
            "- Stipend and housing lower cost\n"
            "- Clear PI/lab options"
        ),
        risks=(
            "- Early DDL and tight materials timeline\n"
            "- Competitive; may prefer PhD-only\n"
            "- Recommendation letter uncertainty"
        ),
        fit_evidence=(
            "- Prior screening + docking + assay validation experience\n"
            "- Python + modeling + free-energy familiarity"
        ),
        strategy=(
            "- Outreach: short email + 2 relevant outputs\n"
            "- Materials: tailor RS around closed-loop pipeline\n"
            "- Backup: alternative labs within same institute"
        ),
    )

    return Document(
        projects=[p1],
        outreach=[o1],
        materials=[m1, m2],
        decisions=[d1],
        meta=DocumentMeta(),
    )
