# views/report_view.py
# Purpose: Report viewer renderer. Displays a single report by id: header with date,
# institution and download link, the summary and highlights, then the report content
# according to its file type (pdf, image, gallery or video).

import logging
from typing import Any, Dict, List, Mapping, Optional

from flask import render_template

from core.app_context import AppContext
from core.config import REPORT_RENDERER
from core.utils import file_url, format_date

logger = logging.getLogger(__name__)

SUPPORTED_FILE_TYPES = ("pdf", "image", "gallery", "video")


def download_path(report: Mapping[str, Any]) -> Optional[str]:
    """The report's own file, or the first file of a gallery."""
    if report.get("filePath"):
        return report["filePath"]
    files = report.get("files") or []
    if files and isinstance(files[0], Mapping):
        return files[0].get("path")
    return None


def gallery_items(report: Mapping[str, Any]) -> List[Dict[str, Any]]:
    items = []
    for index, entry in enumerate(report.get("files") or []):
        if not isinstance(entry, Mapping) or not entry.get("path"):
            logger.warning(f"Skipping gallery entry without a path in report '{report.get('id')}'")
            continue
        items.append(
            {
                "url": file_url(entry["path"]),
                "caption": entry.get("caption") or "",
                "alt": entry.get("caption") or f"Photo {index + 1}",
            }
        )
    return items


class ReportViewerRenderer:
    def __init__(self, context: AppContext):
        self.context = context

    def render(self, target, params=None) -> None:
        """Render the report whose id is ``params``; unknown ids show a not-found notice."""
        report_id = params
        report = self.context.get_report(report_id)
        if report is None:
            logger.info(f"Report '{report_id}' not found")
            target.replace(render_template("views/report.html", report=None, report_id=report_id))
            return

        file_type = report.get("fileType")
        if file_type not in SUPPORTED_FILE_TYPES:
            logger.debug(f"Report '{report_id}' has unsupported file type '{file_type}'")

        summary = (report.get("summary") or "").strip()
        target.replace(
            render_template(
                "views/report.html",
                report=report,
                report_id=report_id,
                title=report.get("title") or report_id,
                date=format_date(report.get("date")),
                institution=report.get("institution") or "",
                download_url=file_url(download_path(report)),
                summary=summary,
                highlights=list(report.get("highlights") or []),
                file_type=file_type if file_type in SUPPORTED_FILE_TYPES else None,
                content_url=file_url(report.get("filePath")),
                gallery=gallery_items(report) if file_type == "gallery" else [],
            )
        )


def register(registry, context: AppContext) -> None:
    registry.register(REPORT_RENDERER, ReportViewerRenderer(context))
