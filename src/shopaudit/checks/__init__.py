"""Check strategies — one leaf function per automation type."""

from shopaudit.checks.checkout import button_text_exact_check, checkbox_state_check
from shopaudit.checks.consent import (
    cookie_banner_compliance_check,
    network_sniffing_check,
)
from shopaudit.checks.currency import currency_check
from shopaudit.checks.manual import MANUAL_CHECK_REASON, manual_check
from shopaudit.checks.ssl import ssl_check
from shopaudit.checks.text import (
    keyword_search_check,
    link_presence_check,
    regex_search_check,
)
from shopaudit.checks.visibility import element_visibility_check

__all__ = [
    "MANUAL_CHECK_REASON",
    "button_text_exact_check",
    "checkbox_state_check",
    "cookie_banner_compliance_check",
    "currency_check",
    "element_visibility_check",
    "keyword_search_check",
    "link_presence_check",
    "manual_check",
    "network_sniffing_check",
    "regex_search_check",
    "ssl_check",
]
