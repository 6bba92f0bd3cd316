"""
Static legal reference data: Lithuanian Civil Code article groups used in
small claims, the case-type to article-group mapping, and district courts.
"""
from typing import Dict, List

from teisesdraugas.db.models import CaseType

CIVIL_CODE_REFERENCES: Dict[str, Dict] = {
    "contractFormation": {
        "articles": ["6.154", "6.156", "6.159"],
        "title_lt": "Sutarties sudarymas",
        "title_en": "Contract Formation",
    },
    "contractPerformance": {
        "articles": ["6.200", "6.205", "6.206"],
        "title_lt": "Sutarties vykdymas",
        "title_en": "Contract Performance",
    },
    "contractBreach": {
        "articles": ["6.245", "6.246", "6.247", "6.249"],
        "title_lt": "Sutarties pažeidimas ir žalos atlyginimas",
        "title_en": "Contract Breach and Damages",
    },
    "consumerRights": {
        "articles": ["6.228", "6.228¹", "6.228²"],
        "title_lt": "Vartotojų teisės",
        "title_en": "Consumer Rights",
    },
    "unjustEnrichment": {
        "articles": ["6.237", "6.238", "6.239"],
        "title_lt": "Nepagrįstas praturtėjimas",
        "title_en": "Unjust Enrichment",
    },
    "rental": {
        "articles": ["6.477", "6.478", "6.492", "6.493"],
        "title_lt": "Nuomos sutartis",
        "title_en": "Rental Agreement",
    },
    "deposit": {
        "articles": ["6.70", "6.71"],
        "title_lt": "Užstatas",
        "title_en": "Deposit",
    },
    "services": {
        "articles": ["6.716", "6.717", "6.718"],
        "title_lt": "Paslaugų sutartis",
        "title_en": "Service Agreement",
    },
    "limitations": {
        "articles": ["1.125", "1.126", "1.127"],
        "title_lt": "Ieškinio senatis",
        "title_en": "Statute of Limitations",
    },
}

# Limitations are appended to every case type by reference_groups_for()
CASE_TYPE_REFERENCE_GROUPS: Dict[CaseType, List[str]] = {
    CaseType.CONSUMER_DISPUTE: ["consumerRights", "contractBreach"],
    CaseType.RENTAL_DEPOSIT: ["rental", "deposit"],
    CaseType.UNPAID_INVOICE: ["services", "contractPerformance", "contractBreach"],
    CaseType.CONTRACT_BREACH: ["contractBreach", "contractPerformance", "contractFormation"],
    CaseType.PROPERTY_DAMAGE: ["contractBreach"],
    CaseType.SERVICE_COMPLAINT: ["services", "consumerRights"],
    CaseType.EMPLOYMENT_DISPUTE: ["contractPerformance", "contractBreach"],
    CaseType.OTHER: ["contractBreach", "unjustEnrichment"],
}

COURT_CODES: Dict[str, Dict[str, str]] = {
    "vilnius_district": {"code": "VRT", "name": "Vilniaus miesto apylinkės teismas"},
    "kaunas_district": {"code": "KRT", "name": "Kauno apylinkės teismas"},
    "klaipeda_district": {"code": "KLT", "name": "Klaipėdos apylinkės teismas"},
    "siauliai_district": {"code": "SRT", "name": "Šiaulių apylinkės teismas"},
    "panevezys_district": {"code": "PRT", "name": "Panevėžio apylinkės teismas"},
}

DEFAULT_COURT = "vilnius_district"


def reference_groups_for(case_type: CaseType) -> List[Dict]:
    """Article groups relevant to a case type, limitations last."""
    keys = list(CASE_TYPE_REFERENCE_GROUPS.get(case_type, ["contractBreach"]))
    keys.append("limitations")
    return [{"key": key, **CIVIL_CODE_REFERENCES[key]} for key in keys]


def select_court(case) -> Dict[str, str]:
    # TODO: route by the opponent's registered address once addresses are structured
    return COURT_CODES[DEFAULT_COURT]
