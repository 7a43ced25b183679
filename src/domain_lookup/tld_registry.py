"""
TLD Registry - built-in TLD table used when the catalog endpoint is not consulted.

Simulation mode serves this table in place of GET /domains, and tests use it
to build catalogs without network access. It mirrors the shape of the live
catalog: a mix of generic and country-code TLDs.
"""

from .enums import TldKind
from .models import Tld


# ============================================================================
# GENERIC TLDs (gTLDs)
# ============================================================================
GENERIC_TLDS = [
    Tld(name="app", kind=TldKind.GENERIC),
    Tld(name="biz", kind=TldKind.GENERIC),
    Tld(name="com", kind=TldKind.GENERIC),
    Tld(name="dev", kind=TldKind.GENERIC),
    Tld(name="info", kind=TldKind.GENERIC),
    Tld(name="net", kind=TldKind.GENERIC),
    Tld(name="online", kind=TldKind.GENERIC),
    Tld(name="org", kind=TldKind.GENERIC),
    Tld(name="shop", kind=TldKind.GENERIC),
    Tld(name="xyz", kind=TldKind.GENERIC),
]


# ============================================================================
# COUNTRY CODE TLDs (ccTLDs)
# ============================================================================
COUNTRY_CODE_TLDS = [
    Tld(name="de", kind=TldKind.COUNTRY_CODE),
    Tld(name="ee", kind=TldKind.COUNTRY_CODE),
    Tld(name="eu", kind=TldKind.COUNTRY_CODE),
    Tld(name="fi", kind=TldKind.COUNTRY_CODE),
    Tld(name="io", kind=TldKind.COUNTRY_CODE),
    Tld(name="lv", kind=TldKind.COUNTRY_CODE),
    Tld(name="lt", kind=TldKind.COUNTRY_CODE),
    Tld(name="se", kind=TldKind.COUNTRY_CODE),
    Tld(name="uk", kind=TldKind.COUNTRY_CODE),
    Tld(name="us", kind=TldKind.COUNTRY_CODE),
]


# ============================================================================
# COMBINE ALL TLDs
# ============================================================================
DEFAULT_TLDS = GENERIC_TLDS + COUNTRY_CODE_TLDS

# Total count for reference
TLD_COUNT = len(DEFAULT_TLDS)
