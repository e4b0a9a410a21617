"""
Builders for fake juku-site widgets: tab sections, the line accordion, the
review filter modal and the card kinds the page objects read.

Client-side behaviour (tab switching, accordion disclosure, modal opening)
is scheduled with a delay so that controllers must poll for it.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .fake_dom import FakeElement, el, later


# =============================================================================
# Tabs
# =============================================================================

class FakeTabs:
    """Tab wrap whose triggers switch the active content after `delay` seconds."""

    def __init__(
        self,
        labels: Sequence[str],
        contents: Optional[Sequence[Iterable[FakeElement]]] = None,
        active: Optional[int] = 0,
        delay: float = 0.05,
        responsive: bool = True,
        marker: str = "",
    ):
        self.delay = delay
        self.responsive = responsive
        self.triggers = [
            el("li", "js-tab__item", label, on_click=self._on_click) for label in labels
        ]
        contents = contents or [[] for _ in labels]
        self.contents = [
            el("div", "js-tab__content", "", el("div", marker, "", *children))
            if marker else el("div", "js-tab__content", "", *children)
            for children in contents
        ]
        self.wrap = el(
            "div", "bjc-juku-inner-tab-wrap", "",
            el("ul", "bjc-juku-inner-tab-nav", "", *self.triggers),
            *self.contents,
        )
        for content in self.contents:
            content.visible = False
        if active is not None:
            self.activate_now(active)

    def activate_now(self, index: int) -> None:
        for i, (trigger, content) in enumerate(zip(self.triggers, self.contents)):
            if i == index:
                trigger.add_class("is-active")
                content.add_class("is-active")
                content.visible = True
            else:
                trigger.remove_class("is-active")
                content.remove_class("is-active")
                content.visible = False

    def _on_click(self, target: FakeElement) -> None:
        if not self.responsive:
            return
        index = self.triggers.index(target)
        later(self.delay, lambda: self.activate_now(index))

    @property
    def clicks(self) -> int:
        return sum(trigger.clicks for trigger in self.triggers)


# =============================================================================
# Station line accordion
# =============================================================================

Station = Tuple[str, int]


class FakeLineAccordion:
    """Line triggers followed by station-list targets, toggled after `delay`."""

    def __init__(
        self,
        lines: Dict[str, Sequence[Station]],
        delay: float = 0.05,
        stuck: Iterable[str] = (),
        expanded: Iterable[str] = (),
    ):
        self.delay = delay
        self.stuck = set(stuck)
        self.triggers: List[FakeElement] = []
        self.targets: List[FakeElement] = []
        self.links: Dict[str, List[FakeElement]] = {}
        children = []
        station_id = 100
        for line, stations in lines.items():
            trigger = el("div", "bjc-search-form--station-list-accordion-trigger", line,
                         on_click=self._on_click)
            links = []
            for name, count in stations:
                station_id += 1
                links.append(el("a", "search-form", f"{name}（{count}件）",
                                href=f"/search/station/{station_id}/"))
            target = el(
                "div", "bjc-search-form--station-list-accordion-target", "",
                *[el("div", "bjc-form--checkbox--wrap", "", link) for link in links],
                visible=False,
            )
            self.triggers.append(trigger)
            self.targets.append(target)
            self.links[line] = links
            children.extend([trigger, target])
        self.root = el("div", "bjc-search-form--station-list", "", *children)
        for line in expanded:
            self.set_open(list(lines).index(line), True)

    def set_open(self, index: int, is_open: bool) -> None:
        target = self.targets[index]
        target.visible = is_open
        if is_open:
            target.add_class("is-open")
        else:
            target.remove_class("is-open")

    def _on_click(self, trigger: FakeElement) -> None:
        if trigger.text in self.stuck:
            return
        index = self.triggers.index(trigger)
        is_open = not self.targets[index].visible
        later(self.delay, lambda: self.set_open(index, is_open))


# =============================================================================
# Review filter modal
# =============================================================================

RADIO_GROUPS = {
    "date_sort": ["新しい順", "古い順"],
    "evaluation_sort": ["高い順", "低い順"],
}
CHECKBOX_GROUPS = {
    "respondent": ["保護者", "生徒"],
    "purpose": ["大学受験", "高校受験", "中学受験", "小学校受験", "テスト対策", "中高一貫校", "子供英語"],
    "rating": ["星5", "星4", "星3", "星2", "星1"],
}


class FakeFilterModal:
    """`#modal-1` with the review filter form, plus its opener and a result list."""

    def __init__(self, delay: float = 0.05, submit_settles: bool = True,
                 initially_checked: Iterable[str] = ("新しい順", "高い順"),
                 closable: bool = True):
        self.delay = delay
        self.submit_settles = submit_settles
        self.closable = closable
        self.submissions = 0
        self.controls: Dict[str, FakeElement] = {}

        fields = []
        for group, labels in RADIO_GROUPS.items():
            for label in labels:
                control = el("input", "", "", type="radio", name=group, label=label,
                             checked=label in initially_checked)
                self.controls[label] = control
                fields.append(control)
        for group, labels in CHECKBOX_GROUPS.items():
            for label in labels:
                control = el("input", "", "", type="checkbox", name=group, label=label,
                             checked=label in initially_checked)
                self.controls[label] = control
                fields.append(control)
        self.keyword = el("input", "", "", type="text", placeholder="キーワードを入力")

        self.modal = el(
            "div", "modal", "",
            el("h2", "", "絞り込み"),
            el("button", "", "", aria_label="close", on_click=lambda _: self._on_close()),
            *fields,
            self.keyword,
            el("button", "", "クリア", on_click=lambda _: self.clear()),
            el("button", "", "検索する", on_click=lambda _: self._submit()),
            id="modal-1",
            visible=False,
        )
        self.opener = el("button", "bjc-review-filter-button", "絞り込み",
                         on_click=lambda _: later(self.delay, self.open_now))
        self.results = el("div", "bjc-juku-inner", "")

    def open_now(self) -> None:
        self.modal.visible = True
        self.modal.add_class("is-open")

    def close(self) -> None:
        self.modal.visible = False
        self.modal.remove_class("is-open")

    def _on_close(self) -> None:
        if self.closable:
            self.close()

    def clear(self) -> None:
        for control in self.controls.values():
            control.checked = False
        self.keyword.value = ""

    def _submit(self) -> None:
        self.submissions += 1
        if self.submit_settles:
            self.results.visible = False
            self.close()
            later(self.delay, self._show_results)

    def _show_results(self) -> None:
        self.results.visible = True

    def checked_labels(self) -> List[str]:
        return [label for label, control in self.controls.items() if control.checked]


# =============================================================================
# Cards
# =============================================================================

def course_card(course_id: str, title: str, description: str, juku_id: str = "7",
                subjects: str = "") -> FakeElement:
    return el(
        "a", "bjc-post-course", "",
        el("div", "bjc-post-course-icon", "", el("img", src=f"/img/course{course_id}.png")),
        el("p", "bjc-post-course-title", title),
        el("p", "bjc-post-course-paragraph bju-line-clamp-3", f"{description}{subjects}"),
        href=f"/juku/{juku_id}/course/{course_id}/",
    )


def experience_card(experience_id: str, title: str, meta: str, pickup: bool = False,
                    icon: bool = True) -> FakeElement:
    children = [el("p", "bjc-post-experience-title", title),
                el("p", "bjc-post-experience-meta", meta)]
    if icon:
        children.insert(0, el("div", "bjc-post-experience-icon", "",
                              el("img", src=f"/img/exp{experience_id}.png")))
    return el(
        "a", "bjc-post-experience pickup" if pickup else "bjc-post-experience", "",
        *children,
        href=f"/shingaku/experience/{experience_id}/",
    )


def interview_card(interview_id: str, rows: Dict[str, str], gender: str = "女性",
                   balloon: str = "") -> FakeElement:
    items = [
        el("li", "", "",
           el("p", "bjc-post-interview-list-paragraph bold", label),
           el("p", "bjc-post-interview-list-paragraph", value))
        for label, value in rows.items()
    ]
    return el(
        "a", "bjc-post-interview", "",
        el("div", "bjc-post-interview-icon", "", el("span", "", gender),
           el("img", src=f"/img/int{interview_id}.png")),
        el("p", "bjc-post-interview-balloon", balloon),
        el("ul", "bjc-post-interview-list", "", *items),
        href=f"/passed-interview/{interview_id}/",
    )


def price_block(title: str, initial: str, monthly: str) -> List[FakeElement]:
    return [
        el("h4", "bjc-juku-heading-4", title),
        el("div", "bjc-juku-price", "",
           el("table", "bjc-juku-price-table", "",
              el("tr", "", "", el("th", "", "初期費用"), el("td", "", initial)),
              el("tr", "", "", el("th", "", "月額費用"), el("td", "", monthly)))),
    ]


def review_card(review_id: str, title: str, rating: str, content: str = "",
                date: str = "2024年04月") -> FakeElement:
    return el(
        "a", "bjc-review-article", "",
        el("p", "bjc-review-article--header-heading", "保護者の口コミ"),
        el("p", "bjc-review-article--header-title", title),
        el("p", "bjc-review-article--meta-txt", "中学生 / 高校受験"),
        el("span", "bjc-evaluation-average_number", rating),
        el("span", "bjc-evaluation-period", date),
        el("p", "bjc-review-article--content", content),
        href=f"/juku/7/review/{review_id}/",
    )


def school_card(classroom_id: str, name: str, station: str) -> FakeElement:
    return el(
        "div", "bjc-search-result-article--school_list-card", "",
        el("p", "bjc-search-result-article--school_list-card-header-heading", "",
           el("a", "", name, href=f"/juku/7/class/{classroom_id}/")),
        el("p", "bjc-search-result-article--school_list-address is-heading", "最寄駅"),
        el("p", "bjc-search-result-article--school_list-address", station),
    )


def institution_article(name: str, juku_id: str, rating: str, stars: int, reviews: int,
                        *schools: FakeElement) -> FakeElement:
    star_spans = [el("span", "bjc-evaluation-star") for _ in range(stars)]
    star_spans += [el("span", "bjc-evaluation-star inert") for _ in range(5 - stars)]
    return el(
        "div", "bjc-search-result-article", "",
        el("p", "bjc-search-result-article--header-title", "",
           el("a", "", name, href=f"/juku/{juku_id}/")),
        el("div", "bjc-juku-header-evaluation", "",
           *star_spans,
           el("span", "bjc-juku-header-evaluation-average_number", rating),
           el("span", "bjc-juku-header-evaluation-number", f"口コミ ({reviews})")),
        el("p", "bjc-search-result-article--header-tagline", "成績アップ保証"),
        *schools,
    )
