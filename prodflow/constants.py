"""Studio reference data: crew roles, expense categories, brand pages and firms."""

from __future__ import annotations

from prodflow.models import Firm

CREW_ROLES = [
    "Floor Manager",
    "Makeup Artist",
    "Hair Stylist",
    "Helper",
    "DOP",
    "Videographer",
    "Photographer",
    "Light Boy",
    "Stylist",
    "Editor",
    "Creative Director",
    "Assistant",
]

# Roles billed once per booked model on the shoot
PER_TALENT_ROLES = frozenset({
    "Makeup Artist",
    "Stylist",
    "Hair Stylist",
})

EXPENSE_CATEGORIES = [
    "Location",
    "Food",
    "Lunch",
    "Breakfast",
    "Tea-Coffee",
    "Groceries",
    "Cutlery",
    "Travelling",
    "Transportation",
    "Decoration",
    "Props",
    "Jewellery",
    "Footwear",
    "Snacks",
    "Drinks",
    "Equipment",
    "Custom",
]

BRAND_PAGES = [
    "G3Surat",
    "G3Mens",
    "G3Kids",
    "G3Fashion",
    "G3NXT",
    "Youtube",
    "G3+ Live",
    "G3NXT Live",
]

KS_TRADING = "firm_ks_trading"
SS_SALES = "firm_ss_sales"

INITIAL_FIRMS = [
    Firm(
        id=KS_TRADING,
        name="K S Trading",
        store_name="G3+",
        address="Sayan textile park, Hazira road, Surat - 394510",
        phone="+91 98765 43210",
        email="accounts@g3plus.com",
    ),
    Firm(
        id=SS_SALES,
        name="S S Sales",
        store_name="G3NXT",
        address="Ghod Dod Road, Surat - 395007",
        phone="+91 98765 43211",
        email="accounts@g3nxt.com",
    ),
]

PAGE_TO_FIRM_MAP: dict[str, str] = {
    "G3Surat": KS_TRADING,
    "G3Mens": KS_TRADING,
    "G3Kids": KS_TRADING,
    "Youtube": KS_TRADING,
    "G3Fashion": KS_TRADING,
    "G3+ Live": KS_TRADING,
    "G3NXT": SS_SALES,
    "G3NXT Live": SS_SALES,
}

TRAVEL_DESCRIPTION = "Travel Allowance & Conveyance Reimbursement"
