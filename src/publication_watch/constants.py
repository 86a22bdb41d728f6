"""Project-wide constants."""

from pathlib import Path

# -- HTTP client defaults ---------------------------------------------------
DEFAULT_TIMEOUT: float = 30.0

# -- Dataset ----------------------------------------------------------------
DEFAULT_PUBLICATIONS_FILE: Path = Path("data/publications.json")
PUBLICATION_ID_PREFIX: str = "pub"
PUBLICATION_ID_SUFFIX_LENGTH: int = 3
PUBLICATION_ID_ALPHABET: str = "0123456789abcdefghijklmnopqrstuvwxyz"
DOI_RESOLVER_URL: str = "https://doi.org"

# -- ORCID ------------------------------------------------------------------
DEFAULT_ORCID_ID: str = "0000-0001-8684-2417"
ORCID_BASE_URL: str = "https://pub.orcid.org/v3.0"

# -- PubMed / NCBI ----------------------------------------------------------
DEFAULT_PUBMED_AUTHOR: str = "Rubin BE"
PUBMED_MAX_RESULTS: int = 100
NCBI_BASE_URL: str = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"
PUBMED_SEARCH_URL: str = f"{NCBI_BASE_URL}/esearch.fcgi"
PUBMED_SUMMARY_URL: str = f"{NCBI_BASE_URL}/esummary.fcgi"

# -- GitHub issues (review-request sink) ------------------------------------
GITHUB_API_URL: str = "https://api.github.com"
REVIEW_LABELS: tuple[str, ...] = ("publication", "pending-review")
REVIEW_TITLE_PREFIX: str = "[New Publication]"
REVIEW_TITLE_MAX_CHARS: int = 80

# -- Review request wire format ---------------------------------------------
REVIEW_SCHEMA_VERSION: int = 1
REVIEW_MARKER_PREFIX: str = "publication-watch:review-request"
MISSING_FIELD_PLACEHOLDER: str = "N/A"
