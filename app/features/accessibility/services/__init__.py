"""
Accessibility Services

Read this before adding a check. One analysis run flows top to bottom:

1. page_loader.py - Headless Chrome navigation, sanitized DOM snapshot, parse
   - PageLoaderService.open(): owns the driver, releases it exactly once

2. static_checks.py - Markup-only checks over the BeautifulSoup document
   - images, headings, forms, links, aria, semantic

3. page_probe.py + dynamic_checks.py - Checks against the live page
   - page_probe.py: self-contained in-page scripts, returns plain data
   - dynamic_checks.py: colors (contrast), keyboard (focus indicators)

4. disability.py - Per-category impact scores (visual, auditory, motor, cognitive)

5. aggregator.py - Merges everything into one AnalysisReport with a summary

6. analyzer.py - Orchestrates 1-5 and isolates failing checks

7. suggestions.py - Remediation text, LLM-backed with rule-based fallback

rules.py holds every rule id, threshold, penalty and WCAG reference.
New rules must be registered there before build_issue() will accept them.
"""
