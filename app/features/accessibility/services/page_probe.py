"""
In-page queries against the live Selenium driver.

Every script below is sent to the browser as-is through execute_script, so
it must be self-contained: helpers are declared inside the script body and
nothing from Python scope is visible to it except `arguments`.
"""
import logging
from typing import Any, Dict, List, Optional

from selenium.common.exceptions import WebDriverException

from app.features.accessibility.services import rules

logger = logging.getLogger(__name__)

COLOR_SAMPLES_SCRIPT = """
const limit = arguments[0];
const isTransparent = (value) =>
  !value || value === 'transparent' || /rgba\\(.*,\\s*0\\)$/.test(value);
const effectiveBackground = (element) => {
  let node = element;
  while (node && node.nodeType === 1) {
    const background = window.getComputedStyle(node).backgroundColor;
    if (!isTransparent(background)) return background;
    node = node.parentElement;
  }
  return 'rgb(255, 255, 255)';
};
const samples = [];
for (const element of document.querySelectorAll('body *')) {
  if (samples.length >= limit) break;
  const ownText = Array.from(element.childNodes)
    .filter((node) => node.nodeType === 3)
    .map((node) => node.textContent)
    .join('')
    .trim();
  if (!ownText) continue;
  const styles = window.getComputedStyle(element);
  if (styles.display === 'none' || styles.visibility === 'hidden') continue;
  samples.push({
    tag: element.tagName.toLowerCase(),
    id: element.id || null,
    color: styles.color,
    backgroundColor: effectiveBackground(element),
    fontSize: styles.fontSize,
    fontWeight: styles.fontWeight,
  });
}
return samples;
"""

FOCUS_STYLES_SCRIPT = """
const selector = arguments[0];
const snapshot = (element) => {
  const styles = window.getComputedStyle(element);
  return {
    outlineStyle: styles.outlineStyle,
    outlineWidth: styles.outlineWidth,
    boxShadow: styles.boxShadow,
    border: styles.border,
  };
};
const previous = document.activeElement;
const results = [];
for (const element of document.querySelectorAll(selector)) {
  const before = snapshot(element);
  let focused = before;
  let focusable = false;
  try {
    element.focus({ preventScroll: true });
    focusable = document.activeElement === element;
    focused = snapshot(element);
    element.blur();
  } catch (error) {
    focusable = false;
  }
  results.push({
    tag: element.tagName.toLowerCase(),
    id: element.id || null,
    focusable: focusable,
    before: before,
    focused: focused,
  });
}
if (previous && typeof previous.focus === 'function') previous.focus();
return results;
"""

CLICK_TARGETS_SCRIPT = """
const selector = arguments[0];
return Array.from(document.querySelectorAll(selector)).map((element) => {
  const rect = element.getBoundingClientRect();
  return {
    tag: element.tagName.toLowerCase(),
    id: element.id || null,
    width: rect.width,
    height: rect.height,
  };
});
"""

CLICKABLE_SELECTOR = (
    'button, [href], input[type="button"], input[type="submit"], [onclick], [role="button"]'
)


class PageProbe:
    """
    Runs the in-page scripts for one analysis run.

    Focus styles are collected once and reused: the keyboard check and the
    visual assessor both need them and re-focusing every element twice
    would be wasted work on the single driver.
    """

    def __init__(self, driver):
        self.driver = driver
        self._focus_styles: Optional[List[Dict[str, Any]]] = None

    def _run(self, script: str, *args) -> List[Dict[str, Any]]:
        try:
            result = self.driver.execute_script(script, *args)
        except WebDriverException as e:
            logger.warning(f"In-page query failed: {e}")
            raise
        if not isinstance(result, list):
            raise ValueError(f"In-page query returned {type(result).__name__}, expected list")
        return [entry for entry in result if isinstance(entry, dict)]

    def color_samples(self) -> List[Dict[str, Any]]:
        return self._run(COLOR_SAMPLES_SCRIPT, rules.MAX_COLOR_SAMPLES)

    def focus_styles(self) -> List[Dict[str, Any]]:
        if self._focus_styles is None:
            self._focus_styles = self._run(FOCUS_STYLES_SCRIPT, rules.FOCUSABLE_SELECTOR)
        return self._focus_styles

    def click_targets(self) -> List[Dict[str, Any]]:
        return self._run(CLICK_TARGETS_SCRIPT, CLICKABLE_SELECTOR)
