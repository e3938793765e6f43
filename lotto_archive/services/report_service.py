"""HTML reports for a single stored draw."""

from __future__ import annotations

import datetime as dt
import logging
import pathlib
from dataclasses import dataclass

from jinja2 import Environment, PackageLoader, select_autoescape
from sqlalchemy.orm import Session

from lotto_archive.domain.dates import parse_date_text
from lotto_archive.errors import NotFoundError
from lotto_archive.models.prize_number import PrizeNumber
from lotto_archive.repositories.draw_repository import DrawRepository

logger = logging.getLogger(__name__)

CATEGORY_LABELS = {
    "first": "รางวัลที่ 1",
    "second": "รางวัลที่ 2",
    "third": "รางวัลที่ 3",
    "fourth": "รางวัลที่ 4",
    "fifth": "รางวัลที่ 5",
    "last2": "รางวัลเลขท้าย 2 ตัว",
    "last3f": "รางวัลเลขหน้า 3 ตัว",
    "last3b": "รางวัลเลขท้าย 3 ตัว",
    "near1": "รางวัลข้างเคียงรางวัลที่ 1",
}

# Display order on the report, not the storage order.
CATEGORY_ORDER = ("first", "near1", "second", "third", "fourth", "fifth", "last3f", "last3b", "last2")

HIGHLIGHT_CATEGORIES = {"near1", "last2", "last3f", "last3b"}


def format_amount(amount: str) -> str:
    try:
        return f"{float(amount):,.0f} บาท"
    except ValueError:
        return f"{amount} บาท"


@dataclass(frozen=True)
class ReportSection:
    category: str
    label: str
    amount: str
    css_class: str
    numbers: list[PrizeNumber]


class ReportService:
    """Render a stored draw to HTML and optionally save it to disk."""

    def __init__(self, repository: DrawRepository | None = None, env: Environment | None = None) -> None:
        self._repo = repository or DrawRepository()
        self._env = env or Environment(
            loader=PackageLoader("lotto_archive", "templates"),
            autoescape=select_autoescape(["html"]),
        )

    def render(self, session: Session, date_text: str) -> str:
        draw_date = parse_date_text(date_text)
        draw = self._repo.get_by_date(session, draw_date)
        if draw is None:
            raise NotFoundError(message=f"No draw stored for {draw_date.isoformat()}")

        grouped: dict[str, list[PrizeNumber]] = {}
        for prize in draw.prizes:
            grouped.setdefault(prize.category, []).append(prize)

        sections = []
        for category in CATEGORY_ORDER:
            numbers = grouped.get(category)
            if not numbers:
                continue
            if category == "first":
                css_class = "prize-section first-prize"
            elif category in HIGHLIGHT_CATEGORIES:
                css_class = "prize-section special-prize"
            else:
                css_class = "prize-section"
            sections.append(
                ReportSection(
                    category=category,
                    label=CATEGORY_LABELS[category],
                    amount=format_amount(numbers[0].prize_amount),
                    css_class=css_class,
                    numbers=sorted(numbers, key=lambda n: n.round_number),
                )
            )

        template = self._env.get_template("report.html")
        return template.render(
            draw=draw,
            sections=sections,
            total_numbers=len(draw.prizes),
            category_count=len(grouped),
            generated_at=dt.datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        )

    def save(self, session: Session, date_text: str, report_dir: str) -> pathlib.Path:
        html = self.render(session, date_text)
        target_dir = pathlib.Path(report_dir)
        target_dir.mkdir(parents=True, exist_ok=True)

        path = target_dir / f"lottery_report_{parse_date_text(date_text).isoformat()}.html"
        path.write_text(html, encoding="utf-8")
        logger.info("Report written to %s", path)
        return path
