"""
Report generation tools for the Interview Grader platform.

This module renders a stored interview record as a JSON and/or PDF report.
"""
import logging
import json
from typing import Dict, Any, Union
from datetime import datetime
from pathlib import Path
from xml.sax.saxutils import escape

from pydantic import ValidationError
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch

from interview_grader.models.rubric import Part
from interview_grader.models.session import SessionResult

# Configure logging
logger = logging.getLogger(__name__)

GRID_STYLE = TableStyle([
    ('GRID', (0, 0), (-1, -1), 1, colors.black),
    ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
    ('VALIGN', (0, 0), (-1, -1), 'TOP'),
    ('PADDING', (0, 0), (-1, -1), 6)
])


def _calculate_summary_statistics(result: SessionResult) -> Dict[str, Any]:
    """Calculate summary statistics from the session result."""
    scorable = [s for s in result.per_question if s.scorable]
    answered = [s for s in result.per_question if s.word_count > 0]
    theory = result.part_summary(Part.THEORY)
    coding = result.part_summary(Part.CODING)

    return {
        "total_score": result.total_score,
        "max_possible_score": result.max_possible_score,
        "percentage": result.percentage,
        "theory_percentage": theory.percentage,
        "coding_percentage": coding.percentage,
        "theory_average": theory.average_percentage,
        "coding_average": coding.average_percentage,
        "total_questions": len(result.per_question),
        "answered_questions": len(answered),
        "unscorable_questions": len(result.per_question) - len(scorable),
        "total_penalty": result.penalties.total_penalty,
        "status": result.status.value,
    }


def _report_path(output_dir: str, interview_id: str, extension: str) -> str:
    Path(output_dir).mkdir(parents=True, exist_ok=True)
    return f"{output_dir}/interview_report_{interview_id}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.{extension}"


def _generate_pdf_report(result: SessionResult, output_dir: str = "reports") -> str:
    """Generate a PDF report from the session result."""
    filename = _report_path(output_dir, result.id, "pdf")
    doc = SimpleDocTemplate(filename, pagesize=letter)
    styles = getSampleStyleSheet()

    # Create custom styles
    title_style = ParagraphStyle(
        'CustomTitle',
        parent=styles['Heading1'],
        fontSize=24,
        spaceAfter=30
    )

    heading_style = ParagraphStyle(
        'CustomHeading',
        parent=styles['Heading2'],
        fontSize=16,
        spaceAfter=12
    )

    cell_style = styles["BodyText"]
    candidate = result.submission.candidate_info
    stats = _calculate_summary_statistics(result)

    content = []

    # Title
    content.append(Paragraph("Java Technical Interview - Result Report", title_style))
    content.append(Spacer(1, 12))

    # Interview Details
    content.append(Paragraph("Interview Details", heading_style))
    details_data = [
        ["Interview ID:", result.id],
        ["Candidate:", candidate.name or "Unknown"],
        ["Email:", candidate.email or "N/A"],
        ["Position:", candidate.position or "N/A"],
        ["Submitted:", result.timestamp],
        ["Status:", stats["status"]],
    ]
    details_table = Table(details_data, colWidths=[2*inch, 4*inch])
    details_table.setStyle(TableStyle([
        ('GRID', (0, 0), (-1, -1), 1, colors.black),
        ('BACKGROUND', (0, 0), (0, -1), colors.lightgrey),
        ('PADDING', (0, 0), (-1, -1), 6)
    ]))
    content.append(details_table)
    content.append(Spacer(1, 20))

    # Summary
    content.append(Paragraph("Performance Summary", heading_style))
    summary_data = [
        ["Metric", "Value"],
        ["Total Score:", f"{stats['total_score']}/{stats['max_possible_score']} ({stats['percentage']}%)"],
        ["Part A (Theory):", f"{stats['theory_percentage']}%"],
        ["Part B (Coding):", f"{stats['coding_percentage']}%"],
        ["Questions Answered:", f"{stats['answered_questions']}/{stats['total_questions']}"],
        ["Integrity Penalty:", str(stats["total_penalty"])],
    ]
    summary_table = Table(summary_data, colWidths=[3*inch, 3*inch])
    summary_table.setStyle(GRID_STYLE)
    content.append(summary_table)
    content.append(Spacer(1, 20))

    # Categories
    if result.category_scores:
        content.append(Paragraph("Category Breakdown", heading_style))
        category_data = [["Category", "Average"]]
        category_data.extend([category, f"{value}%"] for category, value in result.category_scores.items())
        category_table = Table(category_data, colWidths=[3*inch, 3*inch])
        category_table.setStyle(GRID_STYLE)
        content.append(category_table)
        content.append(Spacer(1, 20))

    # Per-question details, one table per part
    for part in Part:
        scores = [s for s in result.per_question if s.part is part]
        if not scores:
            continue
        content.append(Paragraph(f"{part.label} Details", heading_style))
        rows = [["Question", "Score", "Feedback"]]
        for score in scores:
            rows.append([
                Paragraph(escape(score.question_text or score.question_id), cell_style),
                f"{score.score}/{score.max_score}",
                Paragraph(escape(score.feedback), cell_style),
            ])
        question_table = Table(rows, colWidths=[3*inch, 0.8*inch, 2.7*inch])
        question_table.setStyle(GRID_STYLE)
        content.append(question_table)
        content.append(Spacer(1, 12))

    # Overall assessment
    if result.comparison:
        content.append(Spacer(1, 8))
        content.append(Paragraph("Overall Assessment", heading_style))
        content.append(Paragraph(escape(result.comparison.overall_assessment), styles["Normal"]))
        content.append(Paragraph(escape(result.comparison.theory_strength), styles["Normal"]))
        content.append(Paragraph(escape(result.comparison.coding_strength), styles["Normal"]))

    # Build the PDF
    doc.build(content)
    return filename


def generate_interview_report(
    record: Union[SessionResult, Dict[str, Any]],
    output_format: str = "both",
    output_dir: str = "reports"
) -> Dict[str, Any]:
    """
    Generate an interview report in JSON and/or PDF format.

    Args:
        record: A SessionResult, or a stored record as returned by a result store
        output_format: Format of the report ("json", "pdf", or "both")
        output_dir: Directory the report files are written to

    Returns:
        Dictionary with ``success`` and the written file paths, or ``error``
    """
    if output_format not in ("json", "pdf", "both"):
        raise ValueError(f"Unsupported report format: {output_format}")

    try:
        result = record if isinstance(record, SessionResult) else SessionResult.model_validate(record)
    except ValidationError as e:
        logger.error(f"Stored record is not a valid interview result: {e}")
        return {"success": False, "error": str(e)}

    logger.info(f"Generating {output_format} report for interview {result.id}")

    try:
        report = {"success": True}

        if output_format in ("json", "both"):
            report_data = {
                "interview_id": result.id,
                "generated_at": datetime.now().isoformat(),
                "summary_statistics": _calculate_summary_statistics(result),
                "result": result.to_record(),
            }
            json_path = _report_path(output_dir, result.id, "json")
            with open(json_path, 'w', encoding="utf-8") as f:
                json.dump(report_data, f, indent=2)
            report["json_path"] = json_path

        if output_format in ("pdf", "both"):
            report["pdf_path"] = _generate_pdf_report(result, output_dir)

        return report

    except OSError as e:
        logger.error(f"Error writing report for interview {result.id}: {e}")
        return {"success": False, "error": str(e)}
