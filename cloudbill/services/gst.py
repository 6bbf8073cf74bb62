"""Indian GST calculation, tax identifier validation and HSN/SAC lookup.

Pure functions over integer paise. Nothing here touches the database.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Protocol

DEFAULT_GST_RATE = Decimal("18")  # Cloud services are taxed at 18%
DEFAULT_HSN_SAC_CODE = "998314"  # Cloud computing services

GSTIN_PATTERN = re.compile(r"[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]")
PAN_PATTERN = re.compile(r"[A-Z]{5}[0-9]{4}[A-Z]")

STATE_CODES: dict[str, str] = {
    "01": "Jammu and Kashmir",
    "02": "Himachal Pradesh",
    "03": "Punjab",
    "04": "Chandigarh",
    "05": "Uttarakhand",
    "06": "Haryana",
    "07": "Delhi",
    "08": "Rajasthan",
    "09": "Uttar Pradesh",
    "10": "Bihar",
    "11": "Sikkim",
    "12": "Arunachal Pradesh",
    "13": "Nagaland",
    "14": "Manipur",
    "15": "Mizoram",
    "16": "Tripura",
    "17": "Meghalaya",
    "18": "Assam",
    "19": "West Bengal",
    "20": "Jharkhand",
    "21": "Odisha",
    "22": "Chhattisgarh",
    "23": "Madhya Pradesh",
    "24": "Gujarat",
    "25": "Daman and Diu",
    "26": "Dadra and Nagar Haveli and Daman and Diu",
    "27": "Maharashtra",
    "28": "Andhra Pradesh",
    "29": "Karnataka",
    "30": "Goa",
    "31": "Lakshadweep",
    "32": "Kerala",
    "33": "Tamil Nadu",
    "34": "Puducherry",
    "35": "Andaman and Nicobar Islands",
    "36": "Telangana",
    "37": "Andhra Pradesh",
    "38": "Ladakh",
}

# Pre-merger / pre-bifurcation codes still found on older GSTINs
_LEGACY_STATE_CODES = frozenset({"25", "28"})

_CODES_BY_STATE: dict[str, str] = {
    name.lower(): code
    for code, name in STATE_CODES.items()
    if code not in _LEGACY_STATE_CODES
}

HSN_SAC_CODES: dict[str, str] = {
    "compute": "998314",
    "kubernetes": "998314",
    "storage": "998315",
    "block_storage": "998315",
    "object_storage": "998315",
    "backup": "998315",
    "database": "998316",
    "network": "998317",
    "bandwidth": "998317",
    "cdn": "998318",
    "dns": "998319",
    "monitoring": "998320",
    "support": "998321",
    "license": "998322",
    "setup": "998323",
}


class GstTaxType(str, Enum):
    CGST_SGST = "CGST+SGST"
    IGST = "IGST"


class HasState(Protocol):
    state: Any


@dataclass
class GstCalculationResult:
    """GST breakdown for one taxable amount. Amounts are integer paise."""

    taxable_amount: int
    cgst_rate: Decimal
    sgst_rate: Decimal
    igst_rate: Decimal
    cgst_amount: int
    sgst_amount: int
    igst_amount: int
    total_tax: int
    total_amount: int
    tax_type: GstTaxType
    seller_state: str
    buyer_state: str
    hsn_sac_code: str

    @property
    def is_intra_state(self) -> bool:
        return self.tax_type == GstTaxType.CGST_SGST


@dataclass
class GstLineInput:
    amount: int
    hsn_sac_code: str = DEFAULT_HSN_SAC_CODE
    tax_rate: Decimal | int | None = None


@dataclass
class GstSummary:
    """Per-item GST results with plain sums across items."""

    items: list[GstCalculationResult] = field(default_factory=list)
    total_taxable_amount: int = 0
    total_cgst: int = 0
    total_sgst: int = 0
    total_igst: int = 0
    total_tax: int = 0
    grand_total: int = 0


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def normalize_state(state: str) -> str:
    return state.strip().lower()


def is_same_state(seller_state: str, buyer_state: str) -> bool:
    return normalize_state(seller_state) == normalize_state(buyer_state)


def calculate_gst(
    taxable_amount: int,
    seller_state: str,
    buyer_state: str,
    hsn_sac_code: str,
    tax_rate: Decimal | int = DEFAULT_GST_RATE,
) -> GstCalculationResult:
    """Split GST by jurisdiction.

    Intra-state supplies pay half the rate as CGST and half as SGST; inter-state
    supplies pay the full rate as IGST. Each component is rounded on its own,
    so CGST + SGST can differ by one paise from the full-rate rounding.
    """
    amount = Decimal(taxable_amount)
    rate = Decimal(str(tax_rate))

    cgst_rate = sgst_rate = igst_rate = Decimal("0")
    cgst_amount = sgst_amount = igst_amount = 0

    if is_same_state(seller_state, buyer_state):
        cgst_rate = sgst_rate = rate / 2
        cgst_amount = round_half_up(amount * cgst_rate / 100)
        sgst_amount = round_half_up(amount * sgst_rate / 100)
        tax_type = GstTaxType.CGST_SGST
    else:
        igst_rate = rate
        igst_amount = round_half_up(amount * igst_rate / 100)
        tax_type = GstTaxType.IGST

    total_tax = cgst_amount + sgst_amount + igst_amount

    return GstCalculationResult(
        taxable_amount=taxable_amount,
        cgst_rate=cgst_rate,
        sgst_rate=sgst_rate,
        igst_rate=igst_rate,
        cgst_amount=cgst_amount,
        sgst_amount=sgst_amount,
        igst_amount=igst_amount,
        total_tax=total_tax,
        total_amount=taxable_amount + total_tax,
        tax_type=tax_type,
        seller_state=seller_state,
        buyer_state=buyer_state,
        hsn_sac_code=hsn_sac_code,
    )


def calculate_multiple_items(
    items: Iterable[GstLineInput],
    seller_address: HasState,
    buyer_address: HasState,
) -> GstSummary:
    """Apply calculate_gst to each item independently and sum the results."""
    summary = GstSummary()
    for item in items:
        result = calculate_gst(
            item.amount,
            seller_address.state,
            buyer_address.state,
            item.hsn_sac_code,
            DEFAULT_GST_RATE if item.tax_rate is None else item.tax_rate,
        )
        summary.items.append(result)
        summary.total_taxable_amount += result.taxable_amount
        summary.total_cgst += result.cgst_amount
        summary.total_sgst += result.sgst_amount
        summary.total_igst += result.igst_amount
        summary.total_tax += result.total_tax
        summary.grand_total += result.total_amount
    return summary


def validate_gst_number(gstin: Any) -> bool:
    """Check the 15-character GSTIN layout: state, PAN, entity, 'Z', checksum."""
    if not isinstance(gstin, str):
        return False
    return GSTIN_PATTERN.fullmatch(gstin) is not None


def validate_pan(pan: Any) -> bool:
    if not isinstance(pan, str):
        return False
    return PAN_PATTERN.fullmatch(pan) is not None


def get_state_from_gstin(gstin: Any) -> str | None:
    if not validate_gst_number(gstin):
        return None
    return STATE_CODES.get(gstin[:2])


def get_state_code(state: str) -> str | None:
    """Reverse lookup of the two-digit GST state code for a state name."""
    return _CODES_BY_STATE.get(normalize_state(state))


def get_hsn_sac_for_service(service_category: Any) -> str:
    if not isinstance(service_category, str):
        return DEFAULT_HSN_SAC_CODE
    return HSN_SAC_CODES.get(service_category.strip().lower(), DEFAULT_HSN_SAC_CODE)
