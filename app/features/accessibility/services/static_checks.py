"""
Checks that only need the parsed markup.

Each check takes the BeautifulSoup document and returns its CheckResult.
They do not catch their own errors: the analyzer runs every check through
its isolation runner, which downgrades a failure to an empty result.
"""
from typing import List

from bs4 import BeautifulSoup, Tag

from app.features.accessibility.schemas.report import (
    AriaCheckResult,
    FormCheckResult,
    HeadingCheckResult,
    ImageCheckResult,
    Issue,
    LinkCheckResult,
    SemanticCheckResult,
)
from app.features.accessibility.services import rules

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]


def _text(element: Tag) -> str:
    return " ".join(element.get_text(" ").split())


def _attr(element: Tag, name: str) -> str:
    value = element.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


def _count_errors(issues: List[Issue]) -> int:
    return sum(1 for issue in issues if issue.severity == "error")


def check_images(soup: BeautifulSoup) -> ImageCheckResult:
    issues = []
    images = soup.find_all("img")

    for img in images:
        alt = img.get("alt")
        src = img.get("src") or "Unknown source"

        if alt is None:
            issues.append(rules.build_issue(
                rules.MISSING_ALT_TEXT, "error", "Image missing alt attribute",
                element="img", location=src,
            ))
        elif not alt.strip() and not _attr(img, "role"):
            issues.append(rules.build_issue(
                rules.EMPTY_ALT_TEXT, "warning",
                "Image has empty alt text - ensure this is decorative",
                element="img", location=src,
            ))

    return ImageCheckResult(
        issues=issues,
        total_images=len(images),
        passed=max(0, len(images) - _count_errors(issues)),
    )


def check_headings(soup: BeautifulSoup) -> HeadingCheckResult:
    issues = []
    levels = [int(heading.name[1]) for heading in soup.find_all(HEADING_TAGS)]
    has_h1 = 1 in levels

    for current, following in zip(levels, levels[1:]):
        if following > current + 1:
            issues.append(rules.build_issue(
                rules.HEADING_HIERARCHY, "warning",
                f"Heading level jumps from h{current} to h{following}",
                element=f"h{following}",
            ))

    if not has_h1 and levels:
        issues.append(rules.build_issue(
            rules.MISSING_H1, "error", "Page missing h1 heading", element="h1",
        ))

    return HeadingCheckResult(
        issues=issues,
        total_headings=len(levels),
        hierarchy=levels,
        has_h1=has_h1,
    )


def check_forms(soup: BeautifulSoup) -> FormCheckResult:
    issues = []
    controls = soup.find_all(["input", "textarea", "select"])

    for control in controls:
        control_type = _attr(control, "type").lower()
        if control_type == "hidden":
            continue

        control_id = _attr(control, "id")
        has_label = bool(control_id) and soup.find("label", attrs={"for": control_id}) is not None

        if not (has_label or _attr(control, "aria-label") or _attr(control, "aria-labelledby")):
            issues.append(rules.build_issue(
                rules.MISSING_LABEL, "error", "Form control missing label",
                element=control.name,
                location=control_id or control_type or "Unknown input",
            ))

    return FormCheckResult(
        issues=issues,
        total_inputs=len(controls),
        passed=max(0, len(controls) - len(issues)),
    )


def check_links(soup: BeautifulSoup) -> LinkCheckResult:
    issues = []
    links = soup.find_all("a", href=True)

    for link in links:
        href = _attr(link, "href")
        text = _text(link)

        if not text and not _attr(link, "aria-label"):
            issues.append(rules.build_issue(
                rules.EMPTY_LINK_TEXT, "error", "Link has no accessible text",
                element="a", location=href,
            ))
        elif text.lower() in rules.VAGUE_LINK_TEXTS:
            issues.append(rules.build_issue(
                rules.VAGUE_LINK_TEXT, "warning", f'Link text "{text}" is not descriptive',
                element="a", location=href,
            ))

    return LinkCheckResult(
        issues=issues,
        total_links=len(links),
        passed=max(0, len(links) - _count_errors(issues)),
    )


def _has_aria(tag: Tag) -> bool:
    return tag.has_attr("role") or any(name.startswith("aria-") for name in tag.attrs)


def check_aria(soup: BeautifulSoup) -> AriaCheckResult:
    """
    Flag unknown roles and aria-labelledby/aria-describedby references that
    point at ids missing from the document.
    """
    issues = []
    failed_elements = 0
    elements = soup.find_all(_has_aria)

    for element in elements:
        issues_before = len(issues)
        role = _attr(element, "role").lower()
        if role and not any(token in rules.ARIA_ROLES for token in role.split()):
            issues.append(rules.build_issue(
                rules.INVALID_ARIA_ROLE, "warning", f'Unknown ARIA role "{role}"',
                element=element.name, location=_attr(element, "id") or None,
            ))

        for attribute in ("aria-labelledby", "aria-describedby"):
            for ref in _attr(element, attribute).split():
                if soup.find(id=ref) is None:
                    issues.append(rules.build_issue(
                        rules.BROKEN_ARIA_REFERENCE, "warning",
                        f'{attribute} references missing id "{ref}"',
                        element=element.name, location=ref,
                    ))

        if len(issues) > issues_before:
            failed_elements += 1

    return AriaCheckResult(
        issues=issues,
        aria_elements=len(elements),
        passed=len(elements) - failed_elements,
    )


def check_semantic(soup: BeautifulSoup) -> SemanticCheckResult:
    has_main = soup.find("main") is not None
    issues = []

    if not has_main:
        issues.append(rules.build_issue(
            rules.MISSING_MAIN, "warning", "Page lacks main landmark", element="main",
        ))

    return SemanticCheckResult(
        issues=issues,
        has_main=has_main,
        has_nav=soup.find("nav") is not None,
        has_header=soup.find("header") is not None,
        has_footer=soup.find("footer") is not None,
    )
